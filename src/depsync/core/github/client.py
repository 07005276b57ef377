"""
GitHub GraphQL client for depsync.

Implements ``ProjectGateway`` on top of the GitHub GraphQL API using an
``httpx.Client``. Every call is a single POST to the GraphQL endpoint, sent
with a timeout and wrapped in the retry policy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from types import TracebackType
from typing import Any

import httpx

from depsync import __version__
from depsync.core.config.models import DEFAULT_GRAPHQL_URL, ResolveConfig
from depsync.core.exceptions import GitHubClientError

from .models import ParentLink, ProjectItem, ProjectSchema
from .queries import (
    GRAPHQL_FEATURES,
    ISSUE_PARENT_QUERY,
    PROJECT_ITEMS_QUERY,
    PROJECT_SCHEMA_QUERY,
    SET_FIELD_OPTION_MUTATION,
)
from .retry import RetryPolicy, is_retryable_error

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Client for the GitHub GraphQL API.

    Use as a context manager so the underlying connection pool is closed:

    Example:
        >>> with GitHubClient.from_config(config) as client:
        ...     schema = client.get_project_schema("my-org", 1)
        ...     print(schema.project_id)
    """

    def __init__(
        self,
        token: str,
        *,
        graphql_url: str = DEFAULT_GRAPHQL_URL,
        timeout: float = 30.0,
        retry: RetryPolicy | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize GitHubClient.

        Args:
            token: Access token with ``project`` and ``repo`` read scopes
                (``project`` write scope for updates)
            graphql_url: GraphQL endpoint (override for GitHub Enterprise Server)
            timeout: Per-request timeout in seconds
            retry: Retry policy for transient failures
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.graphql_url = graphql_url
        self.retry = retry or RetryPolicy()
        self._http = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": f"depsync/{__version__}",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: ResolveConfig, transport: httpx.BaseTransport | None = None
    ) -> GitHubClient:
        """Create a client from a run (or resolve-only) configuration."""
        return cls(
            config.token.get_secret_value(),
            graphql_url=config.graphql_url,
            timeout=config.timeout,
            retry=RetryPolicy(max_retries=config.max_retries),
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    def graphql(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        features: str | None = None,
    ) -> dict[str, Any]:
        """
        Execute a GraphQL document and return its ``data`` object.

        Args:
            query: GraphQL query or mutation
            variables: Variables for the document
            features: Value for the ``GraphQL-Features`` preview header

        Returns:
            The ``data`` member of the response

        Raises:
            GitHubClientError: On transport failure, non-2xx status, an
                ``errors`` payload, or a response that is not JSON
        """
        headers = {"GraphQL-Features": features} if features else None
        payload = {"query": query, "variables": variables or {}}

        def _post() -> httpx.Response:
            response = self._http.post(self.graphql_url, json=payload, headers=headers)
            response.raise_for_status()
            return response

        try:
            response = self.retry.call(_post, description="GitHub GraphQL request")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise GitHubClientError(
                f"GitHub API returned HTTP {status}: {_error_detail(e.response)}",
                status_code=status,
                retryable=is_retryable_error(e),
            ) from e
        except httpx.TimeoutException as e:
            raise GitHubClientError(
                f"GitHub API request timed out: {e}", retryable=True
            ) from e
        except httpx.HTTPError as e:
            raise GitHubClientError(f"GitHub API request failed: {e}", retryable=True) from e

        try:
            body = response.json()
        except ValueError as e:
            raise GitHubClientError(
                f"Failed to parse GitHub API response: {e}", status_code=response.status_code
            ) from e

        if not isinstance(body, dict):
            raise GitHubClientError("Unexpected GitHub API response shape")

        errors = body.get("errors")
        if errors:
            messages = ", ".join(
                str(error.get("message", "Unknown GraphQL error"))
                if isinstance(error, dict)
                else str(error)
                for error in errors
            )
            raise GitHubClientError(messages, status_code=response.status_code)

        data = body.get("data")
        return data if isinstance(data, dict) else {}

    # ------------------------------------------------------------------
    # ProjectGateway
    # ------------------------------------------------------------------

    def get_project_schema(self, org: str, project_number: int) -> ProjectSchema | None:
        data = self.graphql(PROJECT_SCHEMA_QUERY, {"org": org, "number": project_number})
        project = (data.get("organization") or {}).get("projectV2")
        if not project:
            return None
        return ProjectSchema.from_graphql(project)

    def list_project_items(self, org: str, project_number: int) -> Iterator[ProjectItem]:
        after: str | None = None
        page = 0
        while True:
            page += 1
            data = self.graphql(
                PROJECT_ITEMS_QUERY, {"org": org, "number": project_number, "after": after}
            )
            project = (data.get("organization") or {}).get("projectV2")
            if not project:
                raise GitHubClientError(
                    f"Project {org}/{project_number} disappeared while loading items"
                )
            items = project.get("items") or {}
            nodes = items.get("nodes") or []
            logger.debug("Loaded page %d with %d items", page, len(nodes))
            for node in nodes:
                if isinstance(node, dict) and node.get("id"):
                    yield ProjectItem.from_graphql(node)

            page_info = items.get("pageInfo") or {}
            after = page_info.get("endCursor")
            if not page_info.get("hasNextPage") or not after:
                return

    def get_record_parent(self, record_id: str) -> ParentLink:
        data = self.graphql(ISSUE_PARENT_QUERY, {"id": record_id}, features=GRAPHQL_FEATURES)
        node = data.get("node")
        return ParentLink.from_graphql(record_id, node if isinstance(node, dict) else None)

    def set_item_field_option(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> str:
        data = self.graphql(
            SET_FIELD_OPTION_MUTATION,
            {
                "projectId": project_id,
                "itemId": item_id,
                "fieldId": field_id,
                "value": {"singleSelectOptionId": option_id},
            },
        )
        result = (data.get("updateProjectV2ItemFieldValue") or {}).get("projectV2Item") or {}
        return str(result.get("id") or item_id)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase
