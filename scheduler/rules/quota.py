import logging

from core.state import ScheduleLedger
from scheduler.setup import SynthesisState
from utils.constants import (
    BARRE_MARKER,
    BARRE_QUOTA_PER_SHIFT,
    LOCATIONS,
    MIN_QUOTA_CHECKED_IN,
    QUOTA_SLOTS,
)
from utils.shift_utils import shift_type

logger = logging.getLogger(__name__)


def is_barre(class_format: str) -> bool:
    return BARRE_MARKER in class_format


def barre_count(ledger: ScheduleLedger, location: str, day: str, shift: str) -> int:
    """Barre 57 classes (Express included) starting in a shift at one location and day."""
    return sum(
        1 for c in ledger.classes_at(location, day)
        if is_barre(c.class_format) and shift_type(c.time) == shift
    )


def barre_quota_phase(state: SynthesisState):
    """
    Top up every morning and evening shift to at least two Barre 57 classes.

    The shift's candidate slots are walked once; at each slot with no class
    starting yet the best Barre pair (at least 4 average check-ins) is tried
    until the quota is met.
    """
    stats = state.phase("quota")
    for location in state.locations(LOCATIONS):
        for day in state.options.days:
            for shift, slots in QUOTA_SLOTS.items():
                count = barre_count(state.ledger, location, day, shift)
                if count >= BARRE_QUOTA_PER_SHIFT:
                    continue
                for time in state.variation.order_slots(slots):
                    if count >= BARRE_QUOTA_PER_SHIFT:
                        break
                    if state.ledger.starts_at(location, day, time):
                        continue
                    stats.considered += 1
                    candidates = state.recommender.candidates(
                        location, day, time, MIN_QUOTA_CHECKED_IN, is_barre
                    )
                    if not candidates:
                        stats.no_candidate += 1
                        continue
                    rec = state.order(candidates, location, day, time)[0]
                    if state.try_commit(stats, rec, location, day, time, "quota"):
                        count += 1
                if count < BARRE_QUOTA_PER_SHIFT:
                    logger.debug(f"Barre quota short at {location} {day} {shift}: {count}")

    logger.info(f"▶️ Barre quota: {stats.filled} added, {stats.rejected} rejected")
