from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging

import pandas as pd

from core.hard_rules import RuleContext
from core.history import HistoricalPerformanceIndex, records_to_frame
from core.models import ScheduledClass, SynthesisOptions
from core.recommender import SlotRecommender
from core.state import ScheduleLedger
from scheduler.extractor import extract_schedule_and_summary, fill_statistics, sort_classes
from scheduler.rules import gap_fill_phase
from scheduler.runner import run_pipeline
from scheduler.setup import (
    RecordsInput,
    RosterInput,
    SynthesisState,
    build_validator,
    resolve_roster,
    setup_synthesis,
)
from scheduler.variation import VariationStrategy

logger = logging.getLogger(__name__)

LedgerInput = Union[ScheduleLedger, Iterable[ScheduledClass]]


@dataclass
class SynthesisResult:
    classes: List[ScheduledClass]
    """Committed classes in location, day, time order."""
    stats: Dict[str, Any]
    """Fill statistics of the run."""
    schedule: pd.DataFrame
    """One row per class."""
    summary: pd.DataFrame
    """One row per teacher."""


# == Synthesize Schedule ==
def run_synthesis(
    records: RecordsInput,
    roster: RosterInput = None,
    options: Union[SynthesisOptions, Mapping[str, Any], None] = None,
    current_schedule: Optional[List[ScheduledClass]] = None,
) -> SynthesisResult:
    """
    Builds a weekly class schedule from historical performance.
    Returns the classes, fill statistics, and schedule / summary frames.
    """
    logger.info("📋 Building schedule...")
    state = setup_synthesis(records, roster, options)
    run_pipeline(state, current_schedule)

    schedule_df, summary_df = extract_schedule_and_summary(
        state.ledger, state.roster, state.options.standard_weekly_cap
    )
    logger.info("📁 Schedule and summary generated.")
    return SynthesisResult(
        classes=sort_classes(state.ledger.classes),
        stats=fill_statistics(state),
        schedule=schedule_df,
        summary=summary_df,
    )


def synthesize(
    records: RecordsInput,
    roster: RosterInput = None,
    options: Union[SynthesisOptions, Mapping[str, Any], None] = None,
) -> List[ScheduledClass]:
    """Synthesize a weekly schedule and return its classes."""
    return run_synthesis(records, roster, options).classes


# == Gap Fill ==
def fill_gaps(
    records: RecordsInput,
    ledger: LedgerInput,
    roster: RosterInput = None,
) -> List[ScheduledClass]:
    """
    Fill free morning and evening rooms of an existing schedule and rebalance
    its class mix. The given ledger is never modified; the full class list of
    the filled copy is returned.
    """
    base = ledger.copy() if isinstance(ledger, ScheduleLedger) else ScheduleLedger(c.copy() for c in ledger)
    before = len(base)

    frame = records_to_frame(records)
    merged = resolve_roster(frame, roster)
    index = HistoricalPerformanceIndex(frame, merged)
    opts = SynthesisOptions()
    state = SynthesisState(
        index=index,
        roster=merged,
        recommender=SlotRecommender(index),
        validator=build_validator(RuleContext(roster=merged, standard_cap=opts.standard_weekly_cap)),
        options=opts,
        variation=VariationStrategy(),
        ledger=base,
    )
    logger.info("🔧 Filling scheduling gaps and balancing class mix...")
    gap_fill_phase(state)
    logger.info(f"✅ Filled gaps: {len(state.ledger) - before} classes added")
    return state.ledger.classes
