from typing import List, Tuple
import logging

from core.models import ScheduledClass
from core.recommender import Recommendation
from scheduler.setup import SynthesisState
from utils.constants import LOCATIONS, RECOVERY_BLOCKED_DAYS, RECOVERY_MARKER

"""
This module contains the phases that seed the schedule from history: keeping
the current top performers and filling every historically used slot.
"""

logger = logging.getLogger(__name__)


def preserve_top_classes_phase(state: SynthesisState, current_schedule: List[ScheduledClass]):
    """
    Re-commit the top-performing classes of the current schedule before anything else.

    Each class goes through the same rule chain as a new one; a class that no
    longer fits (e.g. its teacher became inactive) is dropped.
    """
    stats = state.phase("preserve")
    days = set(state.options.days)
    for cls in current_schedule:
        if not cls.is_top_performer or cls.day not in days:
            continue
        stats.considered += 1
        kept = cls.copy(source="preserved")
        if kept.id in state.ledger:
            kept = kept.copy(id=state.ledger.next_id("preserved"))
        result = state.validator.evaluate(state.ledger, kept)
        if not result.is_valid:
            stats.reject(v.constraint_type.value for v in result.hard_violations)
            continue
        state.ledger.commit(kept)
        stats.filled += 1
    logger.info(f"📌 Preserved {stats.filled}/{stats.considered} top-performing classes")


def _allowed_on(day: str):
    blocked = day in RECOVERY_BLOCKED_DAYS

    def _check(class_format: str) -> bool:
        return not (blocked and RECOVERY_MARKER in class_format.lower())

    return _check


def historical_fill_phase(state: SynthesisState):
    """
    Fill every historically used slot that has no class starting in it yet.

    Only the best recommendation of a slot is tried; a rejected slot stays empty.
    With prioritize_top_performers the slots whose best pair is a top performer
    are visited first, each group in time order.
    """
    stats = state.phase("historical")
    for location in state.locations(LOCATIONS):
        for day in state.options.days:
            picks: List[Tuple[str, List[Recommendation]]] = []
            for time in state.index.times_for(location, day):
                # slots kept by the preserve phase
                if state.ledger.starts_at(location, day, time):
                    continue
                candidates = state.recommender.candidates(
                    location, day, time, format_filter=_allowed_on(day)
                )
                if not candidates:
                    stats.considered += 1
                    stats.no_candidate += 1
                    continue
                picks.append((time, candidates))

            if state.options.prioritize_top_performers:
                top = [p for p in picks if p[1][0].is_top_performer]
                rest = [p for p in picks if not p[1][0].is_top_performer]
                ordered = state.variation.order_slots(top) + state.variation.order_slots(rest)
            else:
                ordered = state.variation.order_slots(picks)

            for time, candidates in ordered:
                stats.considered += 1
                # shift-based teacher ranking applies to the quota and express fills only
                rec = state.variation.order_candidates(candidates)[0]
                state.try_commit(stats, rec, location, day, time, "historical")

    logger.info(
        f"▶️ Historical fill: {stats.filled} filled, {stats.rejected} rejected, "
        f"{stats.no_candidate} without candidate"
    )
