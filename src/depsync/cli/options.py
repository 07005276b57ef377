"""
Shared CLI options.

Every command accepts the same project options; each one overrides the
environment variable named in its help text.
"""

from typing import Annotated

import typer


ProjectUrlOption = Annotated[
    str | None,
    typer.Option(
        "--project-url",
        "-p",
        help="Organization project URL (overrides PROJECT_URL)",
        show_default=False,
    ),
]

FieldsOption = Annotated[
    str | None,
    typer.Option(
        "--fields",
        "-f",
        help="Comma-separated single-select fields to sync (overrides SYNC_FIELDS)",
        show_default=False,
    ),
]

TopParentTypeOption = Annotated[
    str | None,
    typer.Option(
        "--top-parent-type",
        "-t",
        help="Issue Type of the ancestor to inherit from (overrides TOP_PARENT_ISSUE_TYPE)",
        show_default=False,
    ),
]
