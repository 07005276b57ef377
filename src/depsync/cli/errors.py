"""
Standardized failure reporting and exit codes for the depsync CLI.

A failed run reports exactly once, through ``report_failure``. Under GitHub
Actions the message is also emitted as an ``::error::`` workflow command so
it shows up as an annotation on the job.
"""

from __future__ import annotations

import os
from enum import IntEnum

import typer
from rich.console import Console
from rich.markup import escape

from depsync.core.exceptions import ConfigError, DepsyncError

err_console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for depsync CLI operations."""

    SUCCESS = 0
    """Run completed (individual items may have been skipped)."""

    GENERAL_ERROR = 1
    """Run aborted: GitHub call failed, project unreadable, nothing to sync."""

    USER_ERROR = 2
    """Configuration error (actionable by user)."""


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def escape_workflow_data(message: str) -> str:
    """Escape a message for use in a GitHub Actions workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def report_failure(message: str, *, solution: str | None = None) -> None:
    """
    Print the single terminal failure message of a run.

    Args:
        message: Human-readable description of what went wrong
        solution: Optional hint on how to fix it
    """
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False, soft_wrap=True)
    if solution:
        err_console.print(
            f"[cyan]→ Try:[/cyan] {escape(solution)}", highlight=False, soft_wrap=True
        )
    if in_github_actions():
        typer.echo(f"::error::{escape_workflow_data(message)}")


def exit_for(error: Exception) -> typer.Exit:
    """
    Report ``error`` and return the ``typer.Exit`` to raise for it.

    Example:
        >>> try:
        ...     run_sync()
        ... except Exception as e:
        ...     raise exit_for(e) from e
    """
    if isinstance(error, ConfigError):
        report_failure(error.message, solution=_config_hint(error))
        return typer.Exit(ExitCode.USER_ERROR)
    if isinstance(error, DepsyncError):
        report_failure(error.message)
        return typer.Exit(ExitCode.GENERAL_ERROR)
    report_failure(str(error) or type(error).__name__)
    return typer.Exit(ExitCode.GENERAL_ERROR)


def _config_hint(error: ConfigError) -> str | None:
    variable = error.context.get("variable")
    if variable == "GITHUB_TOKEN":
        return "export GITHUB_TOKEN=<token with project scope>"
    if variable == "PROJECT_URL" or "project_url" in error.context:
        return "export PROJECT_URL=https://github.com/orgs/<org>/projects/<number>"
    return None
