"""
GitHub integration for depsync.

Provides the project gateway: a typed GraphQL client for Projects (v2),
sub-issue parents and issue types.
"""

from depsync.core.exceptions import GitHubClientError
from depsync.core.github.client import GitHubClient
from depsync.core.github.gateway import ProjectGateway
from depsync.core.github.models import (
    FieldKind,
    FieldOption,
    ParentLink,
    ProjectField,
    ProjectItem,
    ProjectSchema,
)
from depsync.core.github.retry import RetryPolicy

__all__ = [
    "FieldKind",
    "FieldOption",
    "GitHubClient",
    "GitHubClientError",
    "ParentLink",
    "ProjectField",
    "ProjectGateway",
    "ProjectItem",
    "ProjectSchema",
    "RetryPolicy",
]
