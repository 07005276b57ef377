"""
depsync CLI - Run command.

Copies the configured single-select field values from each issue's
top-level ancestor onto the issue's project item.
"""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from depsync.cli.errors import exit_for
from depsync.cli.options import FieldsOption, ProjectUrlOption, TopParentTypeOption
from depsync.core.config import load_config
from depsync.core.github import GitHubClient
from depsync.core.sync import ItemOutcome, SyncDriver, SyncReport

logger = logging.getLogger(__name__)
console = Console()

COMPLETED_MESSAGE = "Update process completed for all project items."

_OUTCOME_LABELS = {
    ItemOutcome.SYNCED: "Synced",
    ItemOutcome.SKIPPED_NO_RECORD: "Skipped: not linked to an issue",
    ItemOutcome.SKIPPED_NO_ANCESTOR: "Skipped: no matching ancestor",
    ItemOutcome.SKIPPED_ANCESTOR_UNTRACKED: "Skipped: ancestor not in project",
}


def run(
    project_url: ProjectUrlOption = None,
    fields: FieldsOption = None,
    top_parent_type: TopParentTypeOption = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show which fields would be updated without changing anything",
        ),
    ] = False,
) -> None:
    """
    Sync field values from top-level ancestor issues to their descendants.

    Every project item linked to an issue is walked up its parent chain to
    the nearest issue of the top parent type; the values that issue's item
    has for the synced fields are then set on the descendant's item.

    Examples:
        depsync run
        depsync run --fields "Initiative,Theme" --top-parent-type Epic
        depsync run --dry-run
    """
    try:
        config = load_config(
            project_url=project_url,
            sync_fields=fields,
            top_parent_issue_type=top_parent_type,
            dry_run=True if dry_run else None,
        )
        with GitHubClient.from_config(config) as client:
            report = SyncDriver(config, client).run()
    except Exception as e:
        logger.debug("Run failed", exc_info=True)
        raise exit_for(e) from e

    _print_report(report)
    logger.info(COMPLETED_MESSAGE)
    console.print(f"[green]✓[/green] {COMPLETED_MESSAGE}")


def _print_report(report: SyncReport) -> None:
    if not report.items:
        console.print("[dim]No project items to process.[/dim]")
        return

    table = Table(title="Dry run summary" if report.dry_run else "Sync summary")
    table.add_column("Outcome")
    table.add_column("Items", justify="right")
    for outcome, label in _OUTCOME_LABELS.items():
        table.add_row(label, str(report.count(outcome)))
    table.add_row(
        "[bold]Field values to set[/bold]" if report.dry_run else "[bold]Field values set[/bold]",
        f"[bold]{report.fields_updated}[/bold]",
    )
    console.print(table)
