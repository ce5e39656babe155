"""Tree distance between filesystem paths."""

from __future__ import annotations

import sys
from pathlib import Path

# Distance reported for paths that cannot be resolved; sorts last.
UNREACHABLE = sys.maxsize


def path_distance(a: str | Path, b: str | Path) -> int:
    """Return the number of directory hops between *a* and *b*.

    Both paths are resolved to their real, symlink-free location first.
    With ``c`` shared leading segments the distance is
    ``(len(a) - c) + (len(b) - c)``, so identical files score 0 and
    siblings score 2.  If either path does not exist the result is
    ``UNREACHABLE``.
    """
    try:
        a_parts = Path(a).resolve(strict=True).parts
        b_parts = Path(b).resolve(strict=True).parts
    except (OSError, RuntimeError):
        return UNREACHABLE

    common = 0
    for x, y in zip(a_parts, b_parts):
        if x != y:
            break
        common += 1
    return (len(a_parts) - common) + (len(b_parts) - common)
