"""Show the Bazel package that owns a file."""

import click

from buildctx.commands.cmd_context import query_path
from buildctx.config import command_settings
from buildctx.errors import BuildCtxError
from buildctx.graph.bazel import BazelClient
from buildctx.output.formatter import json_envelope, to_json


@click.command("package")
@click.argument("source_file")
@click.pass_context
def package(ctx, source_file):
    """Print the package owning SOURCE_FILE."""
    obj = ctx.obj or {}
    json_mode = obj.get("json", False)
    root = obj.get("root")

    try:
        _, bazel = command_settings(obj)
        client = BazelClient(bazel=bazel, cwd=root)
        pkg = client.resolve_package(query_path(source_file, root))
    except BuildCtxError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)

    if json_mode:
        click.echo(to_json(json_envelope(
            "package", summary={"package": pkg}, subject=source_file, package=pkg,
        )))
        return
    click.echo(pkg if pkg else "(root package)")
