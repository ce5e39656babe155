"""Source context retrieval from a Bazel build graph."""

__version__ = "0.1.0"
