"""
depsync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer

from depsync import __version__
from depsync.cli import fields, resolve, run
from depsync.core.config import load_layered_env

app = typer.Typer(
    name="depsync",
    help="Inherit GitHub Project field values from top-level parent issues",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Progress is logged at INFO so CI runs show what was processed; --debug
    adds request-level detail.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"depsync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    depsync - propagate project field values down the sub-issue hierarchy.

    Configuration comes from the environment (or .env files):

        GITHUB_TOKEN            token with project + repo read, project write
        PROJECT_URL             https://github.com/orgs/<org>/projects/<n>
        SYNC_FIELDS             comma-separated single-select fields
        TOP_PARENT_ISSUE_TYPE   ancestor Issue Type (default: Initiative)
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()
    setup_logging(debug)
    ctx.obj = {"debug": debug}


app.command(name="run")(run.run)
app.command(name="fields")(fields.fields)
app.command(name="resolve")(resolve.resolve)


def cli_main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "cli_main"]
