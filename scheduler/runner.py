from typing import List, Optional
import logging

from core.models import ScheduledClass
from scheduler.rules import (
    barre_quota_phase,
    express_fill_phase,
    historical_fill_phase,
    preserve_top_classes_phase,
)
from scheduler.setup import SynthesisState

logger = logging.getLogger(__name__)


def run_pipeline(state: SynthesisState, current_schedule: Optional[List[ScheduledClass]] = None) -> SynthesisState:
    """
    Run the synthesis phases in order on the state's ledger.

    Phase 0 keeps current top performers (only with preserve_top_classes),
    phase 1 fills historical slots, phase 2 tops up the Barre quota (only with
    balance_shifts) and phase 3 fills the commuter slots with Express classes.
    No phase revisits a decision of an earlier one.
    """
    opts = state.options
    if opts.iteration:
        logger.info(f"🔀 Variation iteration {opts.iteration} (bucket {state.variation.bucket})")

    if opts.preserve_top_classes and current_schedule:
        preserve_top_classes_phase(state, current_schedule)
    else:
        logger.info("⏭️ Skipping preserve phase: nothing to preserve.")

    historical_fill_phase(state)

    if opts.balance_shifts:
        barre_quota_phase(state)
    else:
        logger.info("⏭️ Skipping Barre quota: shift balancing disabled.")

    express_fill_phase(state)

    logger.info("✅ Done!")
    logger.info(f"📊 Total classes scheduled = {len(state.ledger)}")
    return state
