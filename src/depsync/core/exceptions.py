"""
Custom exceptions for depsync.

Exception Hierarchy:
    DepsyncError (base)
    ├── ConfigError (missing or malformed run configuration)
    ├── GitHubClientError (GitHub API failures)
    └── SyncAborted (fatal precondition failure during a run)

Every fatal path in a run surfaces as one of these, and the CLI turns each
into a single failure report.

Example:
    >>> try:
    ...     raise ConfigError("GITHUB_TOKEN is required", variable="GITHUB_TOKEN")
    ... except DepsyncError as e:
    ...     print(e, e.context)
    GITHUB_TOKEN is required {'variable': 'GITHUB_TOKEN'}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depsync.core.sync.models import RunState


class DepsyncError(Exception):
    """
    Base exception for all depsync errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ConfigError(DepsyncError):
    """
    Raised when the run configuration is missing or malformed.

    Always raised before any network call is made.
    """


class GitHubClientError(DepsyncError):
    """
    Error from a GitHub API call.

    Raised for transport failures, non-2xx responses and GraphQL payloads
    carrying an ``errors`` array. The underlying httpx exception, when there
    is one, is chained via ``__cause__``.

    Attributes:
        status_code: HTTP status code, if a response was received
        retryable: Whether the failure was classified as transient
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
        **context: object,
    ) -> None:
        super().__init__(message, **context)
        self.status_code = status_code
        self.retryable = retryable


class SyncAborted(DepsyncError):
    """
    Raised by the driver when a run cannot continue.

    Attributes:
        state: The run state the driver was in when it aborted
    """

    def __init__(self, message: str, *, state: RunState, **context: object) -> None:
        super().__init__(message, **context)
        self.state = state


__all__ = [
    "DepsyncError",
    "ConfigError",
    "GitHubClientError",
    "SyncAborted",
]
