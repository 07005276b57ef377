"""
depsync CLI - Resolve command.

Runs only the ancestor walk for one issue; useful for checking a parent
chain before a full run.
"""

from typing import Annotated

import typer
from rich.console import Console

from depsync.cli.errors import exit_for
from depsync.cli.options import TopParentTypeOption
from depsync.core.config import load_resolve_config
from depsync.core.github import GitHubClient
from depsync.core.sync import AncestorResolver, ResolutionStatus

console = Console()

_STATUS_MESSAGES = {
    ResolutionStatus.NO_PARENT: "reached the top of the chain without a match",
    ResolutionStatus.CYCLE: "the parent chain loops back on itself",
    ResolutionStatus.DEPTH_EXCEEDED: "the parent chain is deeper than the traversal limit",
}


def resolve(
    issue_id: Annotated[str, typer.Argument(help="Issue node id (e.g. I_kwDOABC123)")],
    top_parent_type: TopParentTypeOption = None,
) -> None:
    """
    Find the top-level ancestor of an issue.

    Only GITHUB_TOKEN is required; no project is read or modified.
    """
    try:
        config = load_resolve_config(top_parent_issue_type=top_parent_type)
        target = config.top_parent_issue_type
        with GitHubClient.from_config(config) as client:
            resolution = AncestorResolver(client).resolve(issue_id, target)
    except Exception as e:
        raise exit_for(e) from e

    if resolution.ancestor_id is not None:
        console.print(
            f"[green]✓[/green] {target} ancestor of {issue_id}: "
            f"[bold]{resolution.ancestor_id}[/bold] ({resolution.steps} steps)"
        )
        return

    console.print(
        f"[yellow]No {target} ancestor for {issue_id}:[/yellow] "
        f"{_STATUS_MESSAGES[resolution.status]} ({resolution.steps} steps)"
    )
    raise typer.Exit(1)
