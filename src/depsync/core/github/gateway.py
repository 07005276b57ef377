"""
Gateway protocol for the remote project store.

The sync core only talks to GitHub through this interface, so it can be
driven by the real GraphQL client or by an in-memory fake in tests.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from .models import ParentLink, ProjectItem, ProjectSchema


@runtime_checkable
class ProjectGateway(Protocol):
    """
    Protocol for project data sources.

    Implementations perform exactly one remote operation per call (plus any
    retries of that same operation) and raise ``GitHubClientError`` on
    failure.
    """

    def get_project_schema(self, org: str, project_number: int) -> ProjectSchema | None:
        """
        Load the project id and its field definitions.

        Returns:
            ProjectSchema, or None if the organization has no such project
        """
        ...

    def list_project_items(self, org: str, project_number: int) -> Iterator[ProjectItem]:
        """
        Yield every item of the project, in the order the API returns them.

        Pages are fetched lazily as the iterator is consumed.
        """
        ...

    def get_record_parent(self, record_id: str) -> ParentLink:
        """Fetch an issue's parent link and the parent's Issue Type."""
        ...

    def set_item_field_option(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> str:
        """
        Set a single-select field on a project item.

        Setting the same option twice leaves the item unchanged.

        Returns:
            The id of the updated item
        """
        ...
