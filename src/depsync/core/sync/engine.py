"""
Field sync engine.

Copies the ancestor item's selected options onto a descendant item, one
field at a time. The descendant's current value is not compared: a set
option is always written (the mutation is idempotent on GitHub's side), and
an unset ancestor value never clears the descendant.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from depsync.core.github.gateway import ProjectGateway
from depsync.core.github.models import ProjectField, ProjectItem

from .models import FieldOutcome, FieldResult

logger = logging.getLogger(__name__)


class FieldSyncEngine:
    """
    Applies ancestor field values to descendant project items.

    Args:
        gateway: Where mutations are sent
        project_id: Node id of the project the items belong to
        dry_run: Log the updates that would be made instead of making them
    """

    def __init__(self, gateway: ProjectGateway, project_id: str, *, dry_run: bool = False) -> None:
        self.gateway = gateway
        self.project_id = project_id
        self.dry_run = dry_run

    def apply(
        self,
        item: ProjectItem,
        ancestor: ProjectItem,
        fields: Sequence[ProjectField],
    ) -> list[FieldResult]:
        """
        Sync every field in ``fields`` from ``ancestor`` to ``item``.

        Fields are handled in order and independently; a skipped field does
        not affect the ones after it.

        Raises:
            GitHubClientError: If a mutation fails
        """
        return [self._apply_field(item, ancestor, field) for field in fields]

    def _apply_field(
        self, item: ProjectItem, ancestor: ProjectItem, field: ProjectField
    ) -> FieldResult:
        option_id = ancestor.option_for(field.name)
        if option_id is None:
            logger.info(
                "Ancestor issue %s does not have a value set for field %s. "
                "Skipping update.",
                ancestor.record_id,
                field.name,
            )
            return FieldResult(
                field_name=field.name, outcome=FieldOutcome.SKIPPED_NO_ANCESTOR_VALUE
            )

        label = field.option_name(option_id)
        logger.info(
            "Ancestor issue's %s field option id: %s%s",
            field.name,
            option_id,
            f" ({label})" if label else "",
        )

        if self.dry_run:
            logger.info(
                "Dry run: would update project item %s with field option id: %s.",
                item.item_id,
                option_id,
            )
            return FieldResult(
                field_name=field.name, outcome=FieldOutcome.WOULD_UPDATE, option_id=option_id
            )

        self.gateway.set_item_field_option(self.project_id, item.item_id, field.id, option_id)
        logger.info("Updated project item %s with field option id: %s.", item.item_id, option_id)
        return FieldResult(field_name=field.name, outcome=FieldOutcome.UPDATED, option_id=option_id)
