"""
Pytest configuration and shared fixtures.

Provides an in-memory ``FakeGateway`` standing in for GitHub, builders for
schema fields and project items, and a scrubbed environment so tests never
see the developer's real token.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from depsync.core.config.models import ProjectLocator, SyncConfig
from depsync.core.github.models import (
    FieldKind,
    FieldOption,
    ParentLink,
    ProjectField,
    ProjectItem,
    ProjectSchema,
)

PROJECT_URL = "https://github.com/orgs/my-org/projects/1"

ENV_VARS = (
    "GITHUB_TOKEN",
    "PROJECT_URL",
    "SYNC_FIELDS",
    "TOP_PARENT_ISSUE_TYPE",
    "GITHUB_GRAPHQL_URL",
    "DEPSYNC_TIMEOUT",
    "DEPSYNC_MAX_RETRIES",
    "DEPSYNC_DRY_RUN",
    "GITHUB_ACTIONS",
)


# ==============================================================================
# Builders
# ==============================================================================


def single_select(field_id: str, name: str, *options: tuple[str, str]) -> ProjectField:
    """Build a single-select field from (option_id, label) pairs."""
    return ProjectField(
        id=field_id,
        name=name,
        kind=FieldKind.SINGLE_SELECT,
        options=tuple(FieldOption(id=oid, name=label) for oid, label in options),
    )


def plain_field(field_id: str, name: str) -> ProjectField:
    return ProjectField(id=field_id, name=name, kind=FieldKind.PLAIN)


def project_item(item_id: str, record_id: str | None = None, **values: str) -> ProjectItem:
    """Build a project item; keyword arguments are field name -> option id."""
    return ProjectItem(item_id=item_id, record_id=record_id, field_values=values)


# ==============================================================================
# Fake gateway
# ==============================================================================


class FakeGateway:
    """
    In-memory ProjectGateway.

    ``parents`` maps an issue id to ``(parent_id, parent_type)``; issues not
    in the map have no parent. Every call is recorded.
    """

    def __init__(
        self,
        schema: ProjectSchema | None = None,
        items: list[ProjectItem] | None = None,
        parents: dict[str, tuple[str, str | None]] | None = None,
    ) -> None:
        self.schema = schema
        self.items = list(items or [])
        self.parents = dict(parents or {})
        self.store: dict[tuple[str, str], str] = {}
        self.schema_calls = 0
        self.item_loads = 0
        self.parent_calls: list[str] = []
        self.updates: list[tuple[str, str, str, str]] = []
        self.update_error: Exception | None = None
        self.parent_error: Exception | None = None

    def get_project_schema(self, org: str, project_number: int) -> ProjectSchema | None:
        self.schema_calls += 1
        return self.schema

    def list_project_items(self, org: str, project_number: int) -> Iterator[ProjectItem]:
        self.item_loads += 1
        yield from self.items

    def get_record_parent(self, record_id: str) -> ParentLink:
        self.parent_calls.append(record_id)
        if self.parent_error is not None:
            raise self.parent_error
        parent_id, parent_type = self.parents.get(record_id, (None, None))
        return ParentLink(record_id=record_id, parent_id=parent_id, parent_type=parent_type)

    def set_item_field_option(
        self, project_id: str, item_id: str, field_id: str, option_id: str
    ) -> str:
        self.updates.append((project_id, item_id, field_id, option_id))
        if self.update_error is not None:
            raise self.update_error
        self.store[(item_id, field_id)] = option_id
        return item_id


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    """Remove depsync variables and point .env lookups at an empty directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def locator() -> ProjectLocator:
    return ProjectLocator(org="my-org", number=1, url=PROJECT_URL)


@pytest.fixture
def config(locator: ProjectLocator) -> SyncConfig:
    return SyncConfig(token="test-token", project=locator, sync_fields=("Initiative",))


@pytest.fixture
def initiative_field() -> ProjectField:
    return single_select("field-initiative", "Initiative", ("opt-x", "X"), ("opt-y", "Y"))


@pytest.fixture
def schema(initiative_field: ProjectField) -> ProjectSchema:
    return ProjectSchema(
        project_id="project-id",
        fields=(
            plain_field("field-title", "Title"),
            initiative_field,
            plain_field("field-notes", "Notes"),
        ),
    )


@pytest.fixture
def gateway(schema: ProjectSchema) -> FakeGateway:
    return FakeGateway(schema=schema)


@pytest.fixture
def project_url() -> str:
    return PROJECT_URL


@pytest.fixture
def make_single_select():
    """
    Factory for single-select fields.

    Usage:
        def test_something(make_single_select):
            field = make_single_select("field-id", "Team", ("opt-a", "A"))
    """
    return single_select


@pytest.fixture
def make_plain_field():
    """Factory for fields of any non-single-select kind."""
    return plain_field


@pytest.fixture
def make_item():
    """
    Factory for project items.

    Usage:
        def test_something(make_item):
            item = make_item("item-1", "issue-1", Initiative="opt-x")
    """
    return project_item


@pytest.fixture
def make_gateway():
    """
    Factory for in-memory gateways.

    Usage:
        def test_something(make_gateway):
            gateway = make_gateway(parents={"A": ("B", "Initiative")})
    """
    return FakeGateway
