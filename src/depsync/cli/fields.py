"""
depsync CLI - Fields command.

Lists the project's fields and shows which of them a run would sync.
"""

import typer
from rich.console import Console
from rich.table import Table

from depsync.cli.errors import exit_for
from depsync.cli.options import FieldsOption, ProjectUrlOption
from depsync.core.config import load_config
from depsync.core.exceptions import SyncAborted
from depsync.core.github import GitHubClient
from depsync.core.sync import RunState, select_eligible_fields

console = Console()


def fields(
    project_url: ProjectUrlOption = None,
    field_names: FieldsOption = None,
) -> None:
    """
    Show the project's fields and which ones are eligible for syncing.

    A field is eligible when it is listed in SYNC_FIELDS (or --fields) and
    is a single-select field.
    """
    try:
        config = load_config(project_url=project_url, sync_fields=field_names)
        with GitHubClient.from_config(config) as client:
            schema = client.get_project_schema(config.project.org, config.project.number)
        if schema is None:
            raise SyncAborted(
                "Unable to retrieve project details from the given URL.",
                state=RunState.LOADING_SCHEMA,
            )
    except Exception as e:
        raise exit_for(e) from e

    eligible = {field.id for field in select_eligible_fields(schema, config.sync_fields)}

    table = Table(title=f"Fields of project {config.project.org}/{config.project.number}")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Options")
    table.add_column("Synced", justify="center")
    for field in schema.fields:
        table.add_row(
            field.name,
            field.kind.name.lower(),
            ", ".join(option.name for option in field.options) or "-",
            "[green]✓[/green]" if field.id in eligible else "",
        )
    console.print(table)

    if not eligible:
        console.print(
            "[yellow]No configured field is a single-select field of this project.[/yellow]"
        )
        raise typer.Exit(1)
