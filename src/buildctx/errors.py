"""Exception hierarchy for buildctx.

Query and decode failures are fatal and unwind to the CLI boundary.
File-level failures are raised by the reader and caught by the emitter,
which logs them and moves on to the next candidate.
"""

from __future__ import annotations


class BuildCtxError(Exception):
    """Base class for all buildctx errors."""


class QueryFailed(BuildCtxError):
    """The build graph engine exited with a non-success status."""

    def __init__(self, argv: list[str], returncode: int | None, stderr: str):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        cmd = " ".join(self.argv)
        detail = stderr.strip() or "(no diagnostic output)"
        if returncode is None:
            msg = f"Bazel query failed to start: {cmd}\n{detail}"
        else:
            msg = f"Bazel query failed (exit {returncode}): {cmd}\n{detail}"
        super().__init__(msg)


class DecodeFailed(BuildCtxError):
    """Engine output was not valid UTF-8 text."""


class FileMissing(BuildCtxError):
    """A candidate file no longer exists on disk."""


class FileReadFailed(BuildCtxError):
    """A candidate file exists but could not be read as text."""


class NoOwningTarget(BuildCtxError):
    """No build target in the package depends on the subject file."""


class ConfigError(BuildCtxError):
    """The workspace config file is malformed."""
