"""Print the source files the build graph considers relevant to a file."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from buildctx.commands.assemble import allowed_extensions, assemble
from buildctx.commands.discovery import STRATEGIES, get_strategy
from buildctx.commands.emit import EmissionState, emit_files, write_file_text
from buildctx.config import command_settings
from buildctx.errors import BuildCtxError
from buildctx.graph.bazel import BazelClient, BuildGraphClient
from buildctx.output.formatter import json_envelope, to_json

logger = logging.getLogger(__name__)


def split_list(values) -> list[str]:
    """Flatten repeated and comma-delimited option values."""
    out = []
    for v in values or ():
        out.extend(part.strip() for part in v.split(",") if part.strip())
    return out


def query_path(subject: str, cwd: Path | None) -> str:
    """Express *subject* relative to the directory the engine runs in."""
    if cwd is None:
        return subject
    absolute = Path(os.path.abspath(subject))
    try:
        return absolute.relative_to(cwd).as_posix()
    except ValueError:
        return subject


def gather_context(
    client: BuildGraphClient,
    subject: str,
    *,
    limit: int = 2000,
    depth: int = 2,
    include_file_types: list[str] | None = None,
    always_include: list[str] | None = None,
    filter_by_ext: bool = True,
    strategy: str = "combined",
    cwd: Path | None = None,
    write=write_file_text,
) -> tuple[EmissionState, str]:
    """Resolve, query, rank and emit context for *subject*.

    Query failures propagate before anything is printed.  The
    always-include files go out first and bypass the extension filter;
    the ranked dependency files follow while budget remains.
    """
    target = query_path(subject, cwd)
    package = client.resolve_package(target)
    raw_lists = get_strategy(strategy).discover(client, package, target, depth)
    if cwd is not None:
        raw_lists = [[str(cwd / p) if not os.path.isabs(p) else p for p in raw] for raw in raw_lists]

    allowed = allowed_extensions(subject, include_file_types, filter_by_ext)
    ranked = assemble(subject, raw_lists, allowed)

    state = EmissionState(limit=limit)
    emit_files(((p, None) for p in always_include or ()), state, write)
    emit_files(ranked, state, write)
    logger.debug("emitted %d files, %d/%d lines", len(state.files), state.lines, limit)
    return state, package


@click.command("context")
@click.argument("source_file")
@click.option("-l", "--limit", type=click.IntRange(min=0), default=None,
              help="Maximum number of lines to print (default 2000)")
@click.option("-d", "--depth", type=click.IntRange(min=0), default=None,
              help="Dependency traversal depth (default 2)")
@click.option("-i", "--include-file-types", "include_file_types", multiple=True,
              help="Comma-separated extensions to include, e.g. rs,toml")
@click.option("-a", "--always-include", "always_include", multiple=True,
              help="Comma-separated files printed first, unfiltered")
@click.option("--filter-by-ext/--no-filter-by-ext", "filter_by_ext", default=None,
              help="Restrict results to the source file's extension")
@click.option("--strategy", type=click.Choice(sorted(STRATEGIES)), default=None,
              help="Dependency discovery strategy (default combined)")
@click.pass_context
def context(ctx, source_file, limit, depth, include_file_types, always_include,
            filter_by_ext, strategy):
    """Print source context for SOURCE_FILE from the Bazel build graph."""
    obj = ctx.obj or {}
    json_mode = obj.get("json", False)
    root = obj.get("root")
    try:
        config, bazel = command_settings(obj)
    except BuildCtxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    limit = config["limit"] if limit is None else limit
    depth = config["depth"] if depth is None else depth
    types = split_list(include_file_types) or config["include_file_types"]
    always = split_list(always_include) or config["always_include"]
    if filter_by_ext is None:
        filter_by_ext = config["filter_by_ext"]
    strategy = strategy or config["strategy"]

    client = BazelClient(bazel=bazel, cwd=root)
    try:
        state, package = gather_context(
            client,
            source_file,
            limit=limit,
            depth=depth,
            include_file_types=types,
            always_include=always,
            filter_by_ext=filter_by_ext,
            strategy=strategy,
            cwd=root,
            write=None if json_mode else write_file_text,
        )
    except BuildCtxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if not json_mode:
        return

    click.echo(to_json(json_envelope(
        "context",
        summary={
            "files": len(state.files),
            "lines": state.lines,
            "limit": limit,
            "skipped": len(state.skipped),
            "package": package,
        },
        subject=source_file,
        files=[
            {"path": f.path, "lines": f.lines, "distance": f.distance, "content": f.content}
            for f in state.files
        ],
        skipped=state.skipped,
    )))
