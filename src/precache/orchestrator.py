"""
Fetch orchestration for precache.

Given a resolved plan, decides whether the cache needs updating and, if so,
hands the required artifacts to the cache. This is the only step of the
precache command with side effects.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List

from precache.cache import Cache
from precache.selection.plan import PrecachePlan

logger = logging.getLogger(__name__)

UP_TO_DATE_MESSAGE = "Already up-to-date."


@dataclass
class PrecacheResult:
    """Result of a precache run."""

    success: bool
    updated: bool
    message: str
    updated_sets: List[str] = field(default_factory=list)


class FetchOrchestrator:
    """Brings the cache up to date for a plan."""

    def __init__(self, cache: Cache, printer: Callable[[str], None] = print):
        """Initialize orchestrator.

        Args:
            cache: Cache to update
            printer: Output function for status lines
        """
        self.cache = cache
        self.printer = printer

    def run(self, plan: PrecachePlan) -> PrecacheResult:
        """Update the cache for the plan.

        Errors raised by the cache update propagate to the caller.

        Returns:
            PrecacheResult describing whether anything was fetched
        """
        if plan.force:
            self.cache.clear_stamp_files()

        self.cache.configure(plan.configuration)

        if not self.cache.is_up_to_date(plan.required_artifacts):
            logger.info(f"Updating cache for {sorted(plan.required_names)}")
            updated_sets = self.cache.update_all(plan.required_artifacts)
            return PrecacheResult(
                success=True,
                updated=True,
                message=f"Updated {len(updated_sets)} artifact set(s)",
                updated_sets=updated_sets,
            )

        self.printer(UP_TO_DATE_MESSAGE)
        return PrecacheResult(success=True, updated=False, message=UP_TO_DATE_MESSAGE)
