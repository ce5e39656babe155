"""Merge, rank, filter and deduplicate raw query results."""

from __future__ import annotations

import logging
import os

from buildctx.graph.proximity import path_distance

logger = logging.getLogger(__name__)


def normalize_extension(ext: str) -> str:
    """``".rs"`` and ``"rs"`` both become ``"rs"``."""
    return ext.strip().lstrip(".")


def file_extension(path: str) -> str | None:
    """Extension without the dot, or None when the file has none."""
    _, ext = os.path.splitext(os.path.basename(path))
    return ext[1:] if len(ext) > 1 else None


def allowed_extensions(
    subject: str,
    include_file_types: list[str] | None,
    filter_by_ext: bool,
) -> set[str] | None:
    """Return the extension allow-list, or None when filtering is off.

    Filtering is on when an explicit list is given or *filter_by_ext* is
    set.  The subject's own extension is always part of an active list.
    """
    explicit = {normalize_extension(e) for e in include_file_types or [] if normalize_extension(e)}
    if not explicit and not filter_by_ext:
        return None
    subject_ext = file_extension(subject)
    if subject_ext:
        explicit.add(subject_ext)
    return explicit


def assemble(
    subject: str,
    raw_lists: list[list[str]],
    allowed: set[str] | None = None,
) -> list[tuple[str, int]]:
    """Build the ranked candidate list for *subject*.

    Returns ``(path, distance)`` pairs.  Lists are concatenated in the
    order given, stable-sorted by distance to *subject*, filtered by
    *allowed* extensions (a file without an extension never passes an
    active filter) and deduplicated keeping the first, closest, entry.
    """
    candidates = [path for raw in raw_lists for path in raw]

    distances: dict[str, int] = {}
    for path in candidates:
        if path not in distances:
            distances[path] = path_distance(subject, path)
    ranked = sorted(candidates, key=lambda p: distances[p])

    if allowed is not None:
        ranked = [p for p in ranked if file_extension(p) in allowed]

    seen = set()
    out = []
    for path in ranked:
        if path in seen:
            continue
        seen.add(path)
        out.append((path, distances[path]))

    logger.debug(
        "assembled %d candidates from %d raw entries (filter: %s)",
        len(out), len(candidates),
        ",".join(sorted(allowed)) if allowed is not None else "off",
    )
    return out
