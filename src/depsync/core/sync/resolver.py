"""
Top-level ancestor resolution.

Walks an issue's parent links upward until it reaches a parent whose Issue
Type matches the target label. Parent links live in GitHub and can be edited
at any time, so the walk is bounded: it stops on a revisited issue (cycle)
and after ``max_depth`` steps, and it never recurses.
"""

from __future__ import annotations

import logging

from depsync.core.github.gateway import ProjectGateway

from .models import Resolution, ResolutionStatus

logger = logging.getLogger(__name__)

MAX_DEPTH = 50


class AncestorResolver:
    """
    Resolves the nearest ancestor of a given Issue Type.

    Each step performs exactly one ``get_record_parent`` call. A parent whose
    type is missing or unreadable simply does not match, and the walk
    continues from it.

    Example:
        >>> resolver = AncestorResolver(client)
        >>> resolution = resolver.resolve("I_kwDOA", "Initiative")
        >>> resolution.ancestor_id if resolution.found else None
        'I_kwDOC'
    """

    def __init__(self, gateway: ProjectGateway, max_depth: int = MAX_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.gateway = gateway
        self.max_depth = max_depth

    def resolve(self, start_id: str, target_type: str) -> Resolution:
        """
        Find the nearest ancestor of ``start_id`` whose Issue Type is ``target_type``.

        The start issue itself is never a candidate, only its ancestors.

        Args:
            start_id: Node id of the issue to start from
            target_type: Issue Type label to look for (exact match)

        Returns:
            Resolution with status FOUND and the ancestor id, or NO_PARENT,
            CYCLE or DEPTH_EXCEEDED

        Raises:
            GitHubClientError: If a parent lookup fails
        """
        visited: set[str] = set()
        steps = 0
        current_id = start_id

        while True:
            if current_id in visited:
                logger.info("Cycle detected at issue %s.", current_id)
                return Resolution(start_id=start_id, status=ResolutionStatus.CYCLE, steps=steps)
            if steps > self.max_depth:
                logger.info("Maximum traversal depth of %d reached.", self.max_depth)
                return Resolution(
                    start_id=start_id, status=ResolutionStatus.DEPTH_EXCEEDED, steps=steps
                )

            visited.add(current_id)
            steps += 1
            link = self.gateway.get_record_parent(current_id)

            if link.parent_id is None:
                logger.info("No parent found.")
                return Resolution(start_id=start_id, status=ResolutionStatus.NO_PARENT, steps=steps)

            if link.parent_type is None:
                logger.info(
                    "Failed to get issue type for parent %s: no issue type set", link.parent_id
                )
            else:
                logger.info('Parent %s has issue type "%s"', link.parent_id, link.parent_type)
                if link.parent_type == target_type:
                    return Resolution(
                        start_id=start_id,
                        status=ResolutionStatus.FOUND,
                        ancestor_id=link.parent_id,
                        steps=steps,
                    )

            current_id = link.parent_id
