"""
GitHub data models for depsync.

Defines Pydantic models for the parts of a Projects (v2) board this tool
reads: the field schema, project items, and an issue's parent link. Each
model knows how to build itself from the raw GraphQL node.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field


class FieldKind(str, Enum):
    """Project field kinds, as reported by ``__typename``."""

    SINGLE_SELECT = "ProjectV2SingleSelectField"
    ITERATION = "ProjectV2IterationField"
    PLAIN = "ProjectV2Field"

    @classmethod
    def from_typename(cls, typename: str | None) -> FieldKind:
        """Map a GraphQL ``__typename``; anything unknown is a plain field."""
        for kind in cls:
            if kind.value == typename:
                return kind
        return cls.PLAIN


class FieldOption(BaseModel):
    """One option of a single-select field."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class ProjectField(BaseModel):
    """A field defined on the project."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Field node id")
    name: str = Field(..., description="Field display name")
    kind: FieldKind = Field(default=FieldKind.PLAIN)
    options: tuple[FieldOption, ...] = Field(
        default=(),
        description="Ordered options; empty unless kind is SINGLE_SELECT",
    )

    @computed_field
    @property
    def is_single_select(self) -> bool:
        """Whether values of this field are one of a fixed option set."""
        return self.kind is FieldKind.SINGLE_SELECT

    def option_name(self, option_id: str) -> str | None:
        """Label for an option id, or None if the id is not an option of this field."""
        for option in self.options:
            if option.id == option_id:
                return option.name
        return None

    @classmethod
    def from_graphql(cls, node: dict[str, Any]) -> ProjectField:
        options = node.get("options") or []
        return cls(
            id=str(node["id"]),
            name=str(node["name"]),
            kind=FieldKind.from_typename(node.get("__typename")),
            options=tuple(
                FieldOption(id=str(o["id"]), name=str(o["name"]))
                for o in options
                if isinstance(o, dict) and "id" in o
            ),
        )


class ProjectSchema(BaseModel):
    """Project id plus its field definitions."""

    model_config = ConfigDict(frozen=True)

    project_id: str
    fields: tuple[ProjectField, ...] = ()

    @classmethod
    def from_graphql(cls, project: dict[str, Any]) -> ProjectSchema:
        nodes = (project.get("fields") or {}).get("nodes") or []
        return cls(
            project_id=str(project["id"]),
            # Nodes that match neither fragment come back as {}.
            fields=tuple(
                ProjectField.from_graphql(node)
                for node in nodes
                if isinstance(node, dict) and node.get("id") and node.get("name")
            ),
        )


class ProjectItem(BaseModel):
    """
    A project item (tracked item).

    ``record_id`` is the node id of the linked issue; it is None for draft
    issues, pull requests, and items whose issue is not visible to the token.
    """

    model_config = ConfigDict(frozen=True)

    item_id: str = Field(..., description="Project item node id")
    field_values: dict[str, str] = Field(
        default_factory=dict,
        description="Single-select field name -> selected option id",
    )
    record_id: str | None = Field(default=None, description="Linked issue node id")

    def option_for(self, field_name: str) -> str | None:
        """Selected option id for a field, or None if unset."""
        return self.field_values.get(field_name) or None

    @classmethod
    def from_graphql(cls, node: dict[str, Any]) -> ProjectItem:
        values: dict[str, str] = {}
        for value in (node.get("fieldValues") or {}).get("nodes") or []:
            if not isinstance(value, dict):
                continue
            field = value.get("field") or {}
            name = field.get("name")
            option_id = value.get("optionId")
            if name and option_id:
                values.setdefault(str(name), str(option_id))

        content = node.get("content") or {}
        record_id = content.get("id") if isinstance(content, dict) else None

        return cls(
            item_id=str(node["id"]),
            field_values=values,
            record_id=str(record_id) if record_id else None,
        )


class ParentLink(BaseModel):
    """
    The parent of an issue, as seen from the child.

    ``parent_type`` is None when the parent has no Issue Type set or the type
    could not be read.
    """

    model_config = ConfigDict(frozen=True)

    record_id: str
    parent_id: str | None = None
    parent_type: str | None = None

    @classmethod
    def from_graphql(cls, record_id: str, node: dict[str, Any] | None) -> ParentLink:
        parent = (node or {}).get("parent")
        if not isinstance(parent, dict) or not parent.get("id"):
            return cls(record_id=record_id)

        issue_type = parent.get("issueType")
        type_name = issue_type.get("name") if isinstance(issue_type, dict) else None
        return cls(
            record_id=record_id,
            parent_id=str(parent["id"]),
            parent_type=str(type_name) if type_name else None,
        )
