"""
Build the run configuration from the environment.

Precedence (highest to lowest):
    1. Explicit overrides (CLI options)
    2. Environment variables (GITHUB_TOKEN, PROJECT_URL, ...)
    3. Hardcoded defaults on ``ResolveConfig`` / ``SyncConfig``

The environment is read once, here; nothing below the CLI looks at
``os.environ`` again.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from depsync.core.exceptions import ConfigError

from .models import ProjectLocator, ResolveConfig, SyncConfig

TOKEN_VAR = "GITHUB_TOKEN"
PROJECT_URL_VAR = "PROJECT_URL"
SYNC_FIELDS_VAR = "SYNC_FIELDS"
TOP_PARENT_TYPE_VAR = "TOP_PARENT_ISSUE_TYPE"
GRAPHQL_URL_VAR = "GITHUB_GRAPHQL_URL"
TIMEOUT_VAR = "DEPSYNC_TIMEOUT"
MAX_RETRIES_VAR = "DEPSYNC_MAX_RETRIES"
DRY_RUN_VAR = "DEPSYNC_DRY_RUN"

ConfigT = TypeVar("ConfigT", bound=ResolveConfig)


def parse_bool(value: str) -> bool:
    """Interpret an environment flag; empty, "0", "false", "no" and "off" are false."""
    return value.strip().lower() not in ("", "0", "false", "no", "off")


def _parse_number(environ: Mapping[str, str], name: str, cast: type) -> Any:
    raw = environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"Invalid {name} value '{raw}'", variable=name) from None


def require_token(environ: Mapping[str, str] | None = None) -> str:
    """
    Read the GitHub token.

    Raises:
        ConfigError: If GITHUB_TOKEN is unset or empty
    """
    if environ is None:
        environ = os.environ
    token = environ.get(TOKEN_VAR, "").strip()
    if not token:
        raise ConfigError(f"{TOKEN_VAR} is required", variable=TOKEN_VAR)
    return token


def _api_settings(environ: Mapping[str, str]) -> dict[str, Any]:
    """Settings shared by every command, read from the environment when set."""
    values: dict[str, Any] = {}
    if top_type := environ.get(TOP_PARENT_TYPE_VAR, "").strip():
        values["top_parent_issue_type"] = top_type
    if graphql_url := environ.get(GRAPHQL_URL_VAR, "").strip():
        values["graphql_url"] = graphql_url
    if (timeout := _parse_number(environ, TIMEOUT_VAR, float)) is not None:
        values["timeout"] = timeout
    if (retries := _parse_number(environ, MAX_RETRIES_VAR, int)) is not None:
        values["max_retries"] = retries
    return values


def _validated(model: type[ConfigT], values: dict[str, Any]) -> ConfigT:
    try:
        return model(**values)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e


def load_resolve_config(
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ResolveConfig:
    """
    Build a validated ``ResolveConfig``; PROJECT_URL is not required.

    Args:
        environ: Environment mapping (defaults to ``os.environ``)
        **overrides: Values taking precedence over the environment. ``None``
            means "not given".

    Raises:
        ConfigError: If GITHUB_TOKEN is missing or any value is invalid
    """
    if environ is None:
        environ = os.environ
    given = {key: value for key, value in overrides.items() if value is not None}

    values: dict[str, Any] = {"token": given.pop("token", None) or require_token(environ)}
    values.update(_api_settings(environ))
    values.update(given)
    return _validated(ResolveConfig, values)


def load_config(
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> SyncConfig:
    """
    Build a validated ``SyncConfig``.

    Required values are checked in order (token first, then project URL) so
    that a missing credential is reported before anything else.

    Args:
        environ: Environment mapping (defaults to ``os.environ``)
        **overrides: Values taking precedence over the environment. ``None``
            means "not given". ``project_url`` replaces PROJECT_URL.

    Returns:
        Frozen SyncConfig instance

    Raises:
        ConfigError: If a required value is missing or any value is invalid

    Example:
        >>> config = load_config(
        ...     {"GITHUB_TOKEN": "t", "PROJECT_URL": "https://github.com/orgs/acme/projects/3"}
        ... )
        >>> config.project.org, config.top_parent_issue_type
        ('acme', 'Initiative')
    """
    if environ is None:
        environ = os.environ
    given = {key: value for key, value in overrides.items() if value is not None}

    token = given.pop("token", None) or require_token(environ)

    project_url = given.pop("project_url", None) or environ.get(PROJECT_URL_VAR, "")
    if not project_url:
        raise ConfigError(
            f"{PROJECT_URL_VAR} is required in the environment.", variable=PROJECT_URL_VAR
        )
    project = ProjectLocator.from_url(project_url)

    values: dict[str, Any] = {
        "token": token,
        "project": project,
        "sync_fields": environ.get(SYNC_FIELDS_VAR, ""),
    }
    values.update(_api_settings(environ))
    if dry_run := environ.get(DRY_RUN_VAR):
        values["dry_run"] = parse_bool(dry_run)

    values.update(given)
    return _validated(SyncConfig, values)
