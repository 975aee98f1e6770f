import logging

from scheduler.setup import SynthesisState
from utils.constants import EXPRESS_MARKER, EXPRESS_SLOTS, LOCATIONS, MIN_QUOTA_CHECKED_IN

logger = logging.getLogger(__name__)


def is_express(class_format: str) -> bool:
    return EXPRESS_MARKER in class_format.lower()


def express_fill_phase(state: SynthesisState):
    """Put the best Express class into every empty commuter slot."""
    stats = state.phase("express")
    for location in state.locations(LOCATIONS):
        for day in state.options.days:
            for time in state.variation.order_slots(EXPRESS_SLOTS):
                if state.ledger.starts_at(location, day, time):
                    continue
                stats.considered += 1
                candidates = state.recommender.candidates(
                    location, day, time, MIN_QUOTA_CHECKED_IN, is_express
                )
                if not candidates:
                    stats.no_candidate += 1
                    continue
                rec = state.order(candidates, location, day, time)[0]
                state.try_commit(stats, rec, location, day, time, "express")

    logger.info(f"▶️ Express fill: {stats.filled} added, {stats.rejected} rejected")
