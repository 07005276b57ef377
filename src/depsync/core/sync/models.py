"""
Data models for the sync core.

Defines the run state machine, per-item and per-field outcomes, ancestor
resolutions and the report returned at the end of a run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class RunState(str, Enum):
    """States of one synchronization run."""

    LOADING_SCHEMA = "loading_schema"
    SELECTING_FIELDS = "selecting_fields"
    LOADING_ITEMS = "loading_items"
    PROCESSING = "processing"
    DONE = "done"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.DONE, RunState.ABORTED)


class ResolutionStatus(str, Enum):
    """How an upward walk over parent links ended."""

    FOUND = "found"
    NO_PARENT = "no_parent"
    CYCLE = "cycle"
    DEPTH_EXCEEDED = "depth_exceeded"


class Resolution(BaseModel):
    """
    Result of resolving the top-level ancestor of an issue.

    ``ancestor_id`` is set if and only if ``status`` is FOUND.
    """

    model_config = ConfigDict(frozen=True)

    start_id: str
    status: ResolutionStatus
    ancestor_id: str | None = None
    steps: int = Field(default=0, ge=0, description="Parent lookups performed")

    @computed_field
    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.FOUND


class FieldOutcome(str, Enum):
    """What happened to one configured field of one item."""

    UPDATED = "updated"
    WOULD_UPDATE = "would_update"
    SKIPPED_NO_ANCESTOR_VALUE = "skipped_no_ancestor_value"


class FieldResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    field_name: str
    outcome: FieldOutcome
    option_id: str | None = None


class ItemOutcome(str, Enum):
    """What happened to one project item."""

    SYNCED = "synced"
    SKIPPED_NO_RECORD = "skipped_no_record"
    SKIPPED_NO_ANCESTOR = "skipped_no_ancestor"
    SKIPPED_ANCESTOR_UNTRACKED = "skipped_ancestor_untracked"


class ItemResult(BaseModel):
    """Outcome for one project item, with the field results when it was synced."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    outcome: ItemOutcome
    record_id: str | None = None
    resolution: Resolution | None = None
    fields: tuple[FieldResult, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.outcome is not ItemOutcome.SYNCED


class SyncReport(BaseModel):
    """
    Summary of a synchronization run.

    Example:
        >>> report = SyncDriver(config, client).run()
        >>> print(f"{report.items_synced}/{report.items_processed} items synced")
    """

    state: RunState = RunState.DONE
    project_id: str | None = None
    fields: tuple[str, ...] = Field(default=(), description="Eligible field names")
    items: list[ItemResult] = Field(default_factory=list)
    dry_run: bool = False

    @computed_field
    @property
    def items_processed(self) -> int:
        return len(self.items)

    @computed_field
    @property
    def items_synced(self) -> int:
        return sum(1 for item in self.items if not item.skipped)

    @computed_field
    @property
    def items_skipped(self) -> int:
        return sum(1 for item in self.items if item.skipped)

    @computed_field
    @property
    def fields_updated(self) -> int:
        return sum(
            1
            for item in self.items
            for field in item.fields
            if field.outcome in (FieldOutcome.UPDATED, FieldOutcome.WOULD_UPDATE)
        )

    def count(self, outcome: ItemOutcome) -> int:
        """Number of items that ended with ``outcome``."""
        return sum(1 for item in self.items if item.outcome is outcome)
