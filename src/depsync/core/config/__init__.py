"""
Configuration models and loading.

This module provides the immutable ``SyncConfig`` for a run (and the smaller
``ResolveConfig`` for commands that need no project), the ``ProjectLocator``
parsed from PROJECT_URL, and layered .env loading.
"""

from .env import load_layered_env
from .loader import load_config, load_resolve_config
from .models import (
    DEFAULT_GRAPHQL_URL,
    DEFAULT_TOP_PARENT_ISSUE_TYPE,
    ProjectLocator,
    ResolveConfig,
    SyncConfig,
)

__all__ = [
    # Models
    "ProjectLocator",
    "ResolveConfig",
    "SyncConfig",
    "DEFAULT_GRAPHQL_URL",
    "DEFAULT_TOP_PARENT_ISSUE_TYPE",
    # Loader functions
    "load_config",
    "load_layered_env",
    "load_resolve_config",
]
