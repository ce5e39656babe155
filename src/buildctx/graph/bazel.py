"""Bazel query adapter and output parsers."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from buildctx.errors import DecodeFailed, QueryFailed

logger = logging.getLogger(__name__)


class BuildGraphClient(Protocol):
    def resolve_package(self, path: str) -> str: ...

    def query_dependencies(self, scope: str, depth: int) -> list[str]: ...

    def find_reverse_dependents(self, package: str, path: str, depth: int) -> list[str]: ...


# ---------------------------------------------------------------------------
# Output parsing
# ---------------------------------------------------------------------------


def parse_location_output(output: str) -> list[str]:
    """Extract file paths from ``--output=location`` records.

    Each record looks like ``/ws/pkg/a.rs:1:1: source file //pkg:a.rs``;
    only the part before the first colon is kept.  Blank lines and lines
    with an empty path prefix are dropped.  Order and duplicates are
    preserved.
    """
    files = []
    for line in output.splitlines():
        path = line.split(":", 1)[0].strip()
        if path:
            files.append(path)
    return files


def parse_label_output(output: str) -> list[str]:
    """One target label per non-empty line."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def package_label(package: str) -> str:
    """Normalise ``--output=package`` text into an absolute package label."""
    if package.startswith("//") or package.startswith("@"):
        return package
    return "//" + package


def _decode(data: bytes, what: str, argv: list[str]) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeFailed(f"Failed to decode {what} of: {' '.join(argv)} ({exc})") from exc


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class BazelClient:
    """Runs ``bazel query`` in a subprocess, one process per call."""

    def __init__(self, bazel: str = "bazel", cwd: Path | None = None):
        self.bazel = bazel
        self.cwd = cwd

    def _query(self, expression: str, output: str) -> str:
        argv = [self.bazel, "query", expression, f"--output={output}"]
        logger.debug("running: %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=str(self.cwd) if self.cwd else None,
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise QueryFailed(argv, None, str(exc)) from exc

        stdout = _decode(proc.stdout, "stdout", argv)
        stderr = _decode(proc.stderr, "stderr", argv)
        if proc.returncode != 0:
            raise QueryFailed(argv, proc.returncode, stderr)
        return stdout

    def resolve_package(self, path: str) -> str:
        # The root package prints as an empty line, which is a valid answer.
        lines = self._query(path, "package").strip().splitlines()
        package = lines[0].strip() if lines else ""
        logger.debug("package for %s: %r", path, package)
        return package

    def query_dependencies(self, scope: str, depth: int) -> list[str]:
        expression = f'kind("source file", deps({scope}, {depth}))'
        files = parse_location_output(self._query(expression, "location"))
        logger.debug("%d source files for %s", len(files), scope)
        return files

    def find_reverse_dependents(self, package: str, path: str, depth: int) -> list[str]:
        expression = f"kind(rule, rdeps({package_label(package)}:all, {path}, {depth}))"
        return parse_label_output(self._query(expression, "label"))
