from collections import Counter
from typing import List
import logging

from core.hard_rules import studio_capacity
from scheduler.rules.quota import is_barre
from scheduler.setup import PhaseStats, SynthesisState
from utils.constants import (
    BARRE_FORMAT,
    GAP_FILL_WINDOWS,
    LOCATIONS,
    MAX_SAME_FORMAT_PER_DAY,
    MAX_VARIETY_ADDITIONS,
    MIN_BARRE_PER_DAY,
    MIN_FILL_CHECKED_IN,
    MIN_QUOTA_CHECKED_IN,
    VARIETY_FORMATS,
)
from utils.shift_utils import is_time_restricted, times_between

"""
This module contains the optional gap-fill and class-mix passes run over an
existing schedule.
"""

logger = logging.getLogger(__name__)


def gap_fill_times() -> List[str]:
    times = []
    for start, end in GAP_FILL_WINDOWS.values():
        times.extend(times_between(start, end))
    return times


def fill_time_slot_gaps(state: SynthesisState, location: str, day: str):
    """
    Offer ranked candidates at every morning and evening start time that still
    has a free room, skipping formats already starting there.
    """
    stats = state.phase("gap_fill")
    capacity = studio_capacity(location)
    for time in state.variation.order_slots(gap_fill_times()):
        existing = state.ledger.starts_at(location, day, time)
        if len(existing) >= capacity:
            continue
        stats.considered += 1
        taken = {c.class_format for c in existing}
        candidates = state.recommender.candidates(
            location, day, time, MIN_FILL_CHECKED_IN, lambda f: f not in taken
        )
        if not candidates:
            stats.no_candidate += 1
            continue
        for rec in state.order(candidates, location, day, time):
            if state.try_commit(stats, rec, location, day, time, "gap-filler"):
                break


def add_missing_format(
    state: SynthesisState, stats: PhaseStats, location: str, day: str, class_format: str, needed: int
) -> int:
    """
    Add up to `needed` classes of one format using its best pair for the day.

    Returns:
        int: The number of classes added.
    """
    ranked = state.recommender.day_candidates(
        location, day, MIN_QUOTA_CHECKED_IN, lambda f: f == class_format
    )
    stats.considered += 1
    if not ranked:
        stats.no_candidate += 1
        return 0
    best = ranked[0]
    capacity = studio_capacity(location)

    added = 0
    for time in gap_fill_times():
        if added >= needed:
            break
        if is_time_restricted(time, day):
            continue
        existing = state.ledger.starts_at(location, day, time)
        if len(existing) >= capacity or any(c.class_format == class_format for c in existing):
            continue
        if state.try_commit(stats, best, location, day, time, "balance"):
            added += 1
    return added


def balance_class_mix(state: SynthesisState, location: str, day: str):
    """
    Keep at least two Barre 57 classes in the day, and add up to two missing
    variety formats when one format already runs more than three times.
    """
    stats = state.phase("mix_balance")
    counts = Counter(c.class_format for c in state.ledger.classes_at(location, day))

    barre = sum(n for fmt, n in counts.items() if is_barre(fmt))
    if barre < MIN_BARRE_PER_DAY:
        add_missing_format(state, stats, location, day, BARRE_FORMAT, MIN_BARRE_PER_DAY - barre)

    if counts and max(counts.values()) > MAX_SAME_FORMAT_PER_DAY:
        missing = [f for f in VARIETY_FORMATS if f not in counts]
        for class_format in missing[:MAX_VARIETY_ADDITIONS]:
            add_missing_format(state, stats, location, day, class_format, 1)


def gap_fill_phase(state: SynthesisState):
    for location in state.locations(LOCATIONS):
        for day in state.options.days:
            fill_time_slot_gaps(state, location, day)
            balance_class_mix(state, location, day)

    gaps, mix = state.phase("gap_fill"), state.phase("mix_balance")
    logger.info(f"🔧 Gap fill: {gaps.filled} added; class mix: {mix.filled} added")
