"""Dependency discovery strategies.

Both strategies return raw query results (lists of file paths) for the
assembler.  ``combined`` is the default; ``pivot`` first finds the rules
that own the file and queries their dependencies at two depths.
"""

from __future__ import annotations

import logging

from buildctx.errors import NoOwningTarget
from buildctx.graph.bazel import BuildGraphClient, package_label

logger = logging.getLogger(__name__)


class CombinedQueryStrategy:
    """Single ``deps(rdeps(pkg:all, file, D), D)`` query."""

    name = "combined"

    def discover(self, client: BuildGraphClient, package: str, path: str, depth: int) -> list[list[str]]:
        scope = f"rdeps({package_label(package)}:all, {path}, {depth})"
        return [client.query_dependencies(scope, depth)]


class TargetPivotStrategy:
    """Pivot from the file to its owning targets, then query forward.

    The depth-1 result comes first so files the owning targets use
    directly win ties against the wider depth-D closure.
    """

    name = "pivot"

    def discover(self, client: BuildGraphClient, package: str, path: str, depth: int) -> list[list[str]]:
        targets = client.find_reverse_dependents(package, path, 1)
        if not targets:
            raise NoOwningTarget(f"No build target in package '{package}' depends on {path}")
        logger.debug("owning targets for %s: %s", path, ", ".join(targets))

        scope = " + ".join(targets)
        if len(targets) > 1:
            scope = f"({scope})"
        primary = client.query_dependencies(scope, min(1, depth))
        if depth <= 1:
            return [primary]
        return [primary, client.query_dependencies(scope, depth)]


STRATEGIES = {
    CombinedQueryStrategy.name: CombinedQueryStrategy,
    TargetPivotStrategy.name: TargetPivotStrategy,
}

DEFAULT_STRATEGY = CombinedQueryStrategy.name


def get_strategy(name: str):
    return STRATEGIES[name]()
