"""Print whole files under a global line budget."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Iterable

import click

from buildctx.errors import FileMissing, FileReadFailed

logger = logging.getLogger(__name__)


@dataclass
class EmittedFile:
    path: str
    lines: int
    distance: int | None = None
    content: str | None = None


@dataclass
class EmissionState:
    """Running totals for one run.

    ``lines`` never exceeds ``limit``.  ``emitted`` holds the resolved
    path of every printed file, so a file is printed at most once no
    matter how many candidate lists mention it.  A skipped file is
    recorded once in ``skipped`` and not retried.
    """

    limit: int
    lines: int = 0
    emitted: set[str] = field(default_factory=set)
    files: list[EmittedFile] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)
    skipped_paths: set[str] = field(default_factory=set)

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.lines)

    @property
    def exhausted(self) -> bool:
        return self.lines >= self.limit


def count_lines(content: str) -> int:
    """Count lines the way a line iterator would: a trailing partial line
    counts, a trailing newline does not open a new one."""
    if not content:
        return 0
    n = content.count("\n")
    return n if content.endswith("\n") else n + 1


def read_source(path: str) -> str:
    if not os.path.exists(path):
        raise FileMissing(f"File {path} does not exist.")
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadFailed(f"Failed to read file {path}: {exc}") from exc


def write_file_text(path: str, content: str) -> None:
    # color=True keeps escape bytes when stdout is not a terminal.
    click.echo(f"==> {path} <==", color=True)
    if content:
        click.echo(content, nl=not content.endswith("\n"), color=True)


def emit_files(
    candidates: Iterable[tuple[str, int | None]],
    state: EmissionState,
    write: Callable[[str, str], None] | None = write_file_text,
) -> int:
    """Emit each candidate that fits in full; return lines printed.

    *candidates* are ``(path, distance)`` pairs in print order.  A file is
    admitted only if ``state.remaining >= its line count``; otherwise it
    is skipped whole.  Missing or unreadable files are logged and
    skipped.  Iteration stops once the budget is used up.  With
    ``write=None`` nothing is printed and contents are kept on the
    ``EmittedFile`` records instead.
    """
    printed = 0
    for path, distance in candidates:
        if state.exhausted:
            break
        key = os.path.realpath(path)
        if key in state.emitted or key in state.skipped_paths:
            continue

        try:
            content = read_source(path)
        except (FileMissing, FileReadFailed) as exc:
            logger.warning("%s", exc)
            reason = "missing" if isinstance(exc, FileMissing) else "unreadable"
            state.skipped.append({"path": path, "reason": reason})
            state.skipped_paths.add(key)
            continue

        n = count_lines(content)
        if n > state.remaining:
            logger.debug("skipping %s: %d lines, %d remaining", path, n, state.remaining)
            state.skipped.append({"path": path, "reason": "budget"})
            state.skipped_paths.add(key)
            continue

        if write is not None:
            write(path, content)
        state.files.append(EmittedFile(
            path=path,
            lines=n,
            distance=distance,
            content=content if write is None else None,
        ))
        state.emitted.add(key)
        state.lines += n
        printed += n
    return printed
