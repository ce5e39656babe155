"""Command-line entry point."""

import logging
import sys

import click

from buildctx import __version__
from buildctx.commands.cmd_context import context
from buildctx.commands.cmd_package import package
from buildctx.config import find_workspace_root


def _setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root = logging.getLogger("buildctx")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


@click.group()
@click.version_option(__version__, prog_name="buildctx")
@click.option("--json", "json_mode", is_flag=True, help="Output structured JSON")
@click.option("--bazel", envvar="BUILDCTX_BAZEL", default=None,
              help="Bazel binary to run queries with (env: BUILDCTX_BAZEL)")
@click.option("-v", "--verbose", is_flag=True, help="Log queries and ranking to stderr")
@click.pass_context
def cli(ctx, json_mode, bazel, verbose):
    """Retrieve source context for a file from the Bazel build graph."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["json"] = json_mode
    ctx.obj["root"] = find_workspace_root()
    ctx.obj["bazel"] = bazel


cli.add_command(context)
cli.add_command(package)
