"""
Synchronization driver.

Runs one synchronization end to end:

    LOADING_SCHEMA -> SELECTING_FIELDS -> LOADING_ITEMS -> PROCESSING -> DONE

and ABORTED from any state when a precondition fails or a GitHub call
raises. Items are processed strictly one after another, in the order the
API returned them, and each item's fields are finished before the next item
starts. There is no resume: an aborted run is simply run again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from depsync.core.config.models import SyncConfig
from depsync.core.exceptions import SyncAborted
from depsync.core.github.gateway import ProjectGateway
from depsync.core.github.models import ProjectField, ProjectItem, ProjectSchema

from .engine import FieldSyncEngine
from .models import ItemOutcome, ItemResult, RunState, SyncReport
from .resolver import AncestorResolver

logger = logging.getLogger(__name__)


def select_eligible_fields(schema: ProjectSchema, names: Iterable[str]) -> list[ProjectField]:
    """
    Fields that are both requested by name and single-select in the schema.

    Same-named fields of any other kind are dropped without error. The
    result follows the schema's field order.
    """
    wanted = set(names)
    return [field for field in schema.fields if field.name in wanted and field.is_single_select]


def index_by_record(items: Iterable[ProjectItem]) -> dict[str, ProjectItem]:
    """Map linked issue id -> project item. The first item wins if an issue appears twice."""
    index: dict[str, ProjectItem] = {}
    for item in items:
        if item.record_id is not None:
            index.setdefault(item.record_id, item)
    return index


class SyncDriver:
    """
    Wires the gateway, resolver and engine together for one run.

    Example:
        >>> config = load_config()
        >>> with GitHubClient.from_config(config) as client:
        ...     report = SyncDriver(config, client).run()
        >>> report.state
        <RunState.DONE: 'done'>
    """

    def __init__(
        self,
        config: SyncConfig,
        gateway: ProjectGateway,
        resolver: AncestorResolver | None = None,
    ) -> None:
        self.config = config
        self.gateway = gateway
        self.resolver = resolver or AncestorResolver(gateway)
        self.state = RunState.LOADING_SCHEMA

    def _transition(self, state: RunState) -> None:
        logger.debug("Run state: %s -> %s", self.state.value, state.value)
        self.state = state

    def _abort(self, message: str) -> SyncAborted:
        error = SyncAborted(message, state=self.state)
        self._transition(RunState.ABORTED)
        return error

    def run(self) -> SyncReport:
        """
        Execute the synchronization.

        Returns:
            SyncReport with per-item outcomes

        Raises:
            SyncAborted: If the project cannot be read or no field is eligible
            GitHubClientError: If any GitHub call fails
        """
        try:
            return self._run()
        except Exception:
            if not self.state.is_terminal:
                logger.debug("Run aborted in state %s", self.state.value)
                self._transition(RunState.ABORTED)
            raise

    def _run(self) -> SyncReport:
        project = self.config.project
        report = SyncReport(dry_run=self.config.dry_run)

        self._transition(RunState.LOADING_SCHEMA)
        logger.info("Querying project details...")
        schema = self.gateway.get_project_schema(project.org, project.number)
        if schema is None:
            raise self._abort("Unable to retrieve project details from the given URL.")
        logger.info("Found project id: %s", schema.project_id)
        report.project_id = schema.project_id

        self._transition(RunState.SELECTING_FIELDS)
        fields = select_eligible_fields(schema, self.config.sync_fields)
        if not fields:
            raise self._abort(
                "Could not find any valid single select fields to sync in the project."
            )
        report.fields = tuple(field.name for field in fields)
        logger.info("Found fields to sync: %s", ", ".join(report.fields))

        self._transition(RunState.LOADING_ITEMS)
        logger.info("Loading all project items...")
        items = list(self.gateway.list_project_items(project.org, project.number))
        if not items:
            logger.info("No project items found in this project. Exiting.")
            self._transition(RunState.DONE)
            report.state = self.state
            return report
        logger.info("Loaded %d project items.", len(items))

        self._transition(RunState.PROCESSING)
        index = index_by_record(items)
        engine = FieldSyncEngine(self.gateway, schema.project_id, dry_run=self.config.dry_run)
        for item in items:
            report.items.append(self.sync_item(item, index, fields, engine))

        self._transition(RunState.DONE)
        report.state = self.state
        return report

    def sync_item(
        self,
        item: ProjectItem,
        index: dict[str, ProjectItem],
        fields: Sequence[ProjectField],
        engine: FieldSyncEngine,
    ) -> ItemResult:
        """Resolve one item's ancestor and copy its field values; skips are not errors."""
        if item.record_id is None:
            logger.info(
                "Skipping project item %s because it has no linked issue.", item.item_id
            )
            return ItemResult(item_id=item.item_id, outcome=ItemOutcome.SKIPPED_NO_RECORD)

        logger.info(
            "Processing project item %s linked to issue %s", item.item_id, item.record_id
        )
        resolution = self.resolver.resolve(item.record_id, self.config.top_parent_issue_type)
        if resolution.ancestor_id is None:
            logger.info(
                "No %s parent found for issue %s. Skipping update.",
                self.config.top_parent_issue_type,
                item.record_id,
            )
            return ItemResult(
                item_id=item.item_id,
                outcome=ItemOutcome.SKIPPED_NO_ANCESTOR,
                record_id=item.record_id,
                resolution=resolution,
            )
        logger.info(
            "Found parent %s issue with id: %s",
            self.config.top_parent_issue_type,
            resolution.ancestor_id,
        )

        ancestor = index.get(resolution.ancestor_id)
        if ancestor is None:
            logger.info(
                "No project item found for parent %s issue %s. Skipping update.",
                self.config.top_parent_issue_type,
                resolution.ancestor_id,
            )
            return ItemResult(
                item_id=item.item_id,
                outcome=ItemOutcome.SKIPPED_ANCESTOR_UNTRACKED,
                record_id=item.record_id,
                resolution=resolution,
            )

        results = engine.apply(item, ancestor, fields)
        return ItemResult(
            item_id=item.item_id,
            outcome=ItemOutcome.SYNCED,
            record_id=item.record_id,
            resolution=resolution,
            fields=tuple(results),
        )
