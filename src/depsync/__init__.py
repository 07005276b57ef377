"""
depsync - inherit project field values from parent issues.

Copies single-select GitHub Project field values from a top-level ancestor
issue (an "Initiative" by default) down to every descendant issue's item.
"""

__version__ = "0.1.0"

# Re-export configuration models for convenience
from depsync.core.config.models import ProjectLocator, SyncConfig

__all__ = ["ProjectLocator", "SyncConfig", "__version__"]
