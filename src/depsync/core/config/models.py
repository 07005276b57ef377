"""
Configuration data models for depsync.

A run is driven by a single immutable ``SyncConfig`` that is built once at
startup (see ``depsync.core.config.loader``) and handed to the driver.
"""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from depsync.core.exceptions import ConfigError

DEFAULT_TOP_PARENT_ISSUE_TYPE = "Initiative"
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"


class ProjectLocator(BaseModel):
    """
    Organization-scoped GitHub project, parsed from its URL.

    Example:
        >>> ProjectLocator.from_url("https://github.com/orgs/my-org/projects/7")
        ProjectLocator(org='my-org', number=7, url='https://github.com/orgs/my-org/projects/7')
    """

    model_config = ConfigDict(frozen=True)

    org: str = Field(..., description="Organization login")
    number: int = Field(..., ge=1, description="Project number within the organization")
    url: str = Field(..., description="The URL the locator was parsed from")

    @classmethod
    def from_url(cls, project_url: str) -> ProjectLocator:
        """
        Parse an organization project URL.

        Only ``/orgs/<org>/projects/<number>`` URLs are supported; user-owned
        projects (``/users/...``) and anything else are rejected.

        Raises:
            ConfigError: If the URL is not an organization project URL
        """
        error = ConfigError(f"Cannot parse PROJECT_URL: {project_url}", project_url=project_url)

        parts = [part for part in urlparse(project_url).path.split("/") if part]
        if not (len(parts) >= 3 and parts[0] == "orgs"):
            raise error

        number = parts[3] if len(parts) > 3 else ""
        # isdecimal, not isdigit: "²" is a digit that int() rejects
        if not number.isdecimal() or int(number) < 1:
            raise error

        return cls(org=parts[1], number=int(number), url=project_url)


class ResolveConfig(BaseModel):
    """
    Settings every command needs: credentials, the API endpoint and its
    timeout/retry limits, and the Issue Type of the ancestor to look for.

    ``depsync resolve`` runs on this alone; a full run extends it with the
    project and the fields to sync (``SyncConfig``).

    The token is held as a ``SecretStr`` so it never leaks through ``repr``
    or log output.
    """

    model_config = ConfigDict(frozen=True)

    token: SecretStr = Field(..., description="GitHub access token")
    top_parent_issue_type: str = Field(
        default=DEFAULT_TOP_PARENT_ISSUE_TYPE,
        min_length=1,
        description="Issue Type label of the ancestor to inherit from",
    )
    graphql_url: str = Field(default=DEFAULT_GRAPHQL_URL, description="GraphQL endpoint")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries for transient failures (0 = attempt every call exactly once)",
    )


class SyncConfig(ResolveConfig):
    """Everything a synchronization run needs, validated and frozen."""

    project: ProjectLocator = Field(..., description="Project to operate on")
    sync_fields: tuple[str, ...] = Field(
        default=(),
        description="Names of the single-select fields to copy from the ancestor",
    )
    dry_run: bool = Field(
        default=False,
        description="Compute updates without issuing any mutation",
    )

    @field_validator("sync_fields", mode="before")
    @classmethod
    def split_field_list(cls, value: object) -> object:
        """Accept a comma-separated string as well as a sequence."""
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return tuple(str(name).strip() for name in value if str(name).strip())
        return value
