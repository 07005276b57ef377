"""
Ancestor-driven field synchronization.

Every project item linked to an issue inherits the configured single-select
field values of its nearest ancestor issue of a given Issue Type.

Example:
    >>> from depsync.core.sync import SyncDriver
    >>> report = SyncDriver(config, client).run()
    >>> print(f"Updated {report.fields_updated} field values")
"""

from depsync.core.sync.driver import SyncDriver, index_by_record, select_eligible_fields
from depsync.core.sync.engine import FieldSyncEngine
from depsync.core.sync.models import (
    FieldOutcome,
    FieldResult,
    ItemOutcome,
    ItemResult,
    Resolution,
    ResolutionStatus,
    RunState,
    SyncReport,
)
from depsync.core.sync.resolver import MAX_DEPTH, AncestorResolver

__all__ = [
    "AncestorResolver",
    "FieldOutcome",
    "FieldResult",
    "FieldSyncEngine",
    "ItemOutcome",
    "ItemResult",
    "MAX_DEPTH",
    "Resolution",
    "ResolutionStatus",
    "RunState",
    "SyncDriver",
    "SyncReport",
    "index_by_record",
    "select_eligible_fields",
]
