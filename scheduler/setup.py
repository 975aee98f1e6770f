from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging

import pandas as pd

from core.constraint_manager import ConstraintManager
from core.hard_rules import (
    RuleContext,
    capacity_rule,
    consecutive_rule,
    daily_cap_rule,
    format_allowed_rule,
    inactive_trainer_rule,
    new_trainer_format_rule,
    restricted_hour_rule,
    sunday_limit_rule,
    trainer_conflict_rule,
    weekly_cap_rule,
)
from core.history import HistoricalPerformanceIndex, records_to_frame
from core.models import (
    PerformanceRecord,
    RosterEntry,
    ScheduledClass,
    SynthesisOptions,
    TrainerRoster,
)
from core.recommender import Recommendation, SlotRecommender
from core.state import ScheduleLedger
from exceptions.custom_errors import InvalidOptionsError
from scheduler.variation import VariationStrategy
from utils.shift_utils import shift_type

logger = logging.getLogger(__name__)

RecordsInput = Union[pd.DataFrame, Iterable[PerformanceRecord]]
RosterInput = Union[TrainerRoster, Iterable[RosterEntry], None]

# camelCase option names accepted from callers
OPTION_ALIASES = {
    "prioritizeTopPerformers": "prioritize_top_performers",
    "balanceShifts": "balance_shifts",
    "optimizeTeacherHours": "optimize_teacher_hours",
    "respectTimeRestrictions": "respect_time_restrictions",
    "minimizeTrainersPerShift": "minimize_trainers_per_shift",
    "optimizationType": "optimization_type",
    "iteration": "iteration",
    "targetDay": "target_day",
    "targetTeacherHours": "target_teacher_hours",
    "preserveTopClasses": "preserve_top_classes",
}


@dataclass
class PhaseStats:
    """Fill counters of one pipeline phase."""

    considered: int = 0
    filled: int = 0
    no_candidate: int = 0
    rejected: int = 0
    rejections: Dict[str, int] = field(default_factory=dict)
    """A dictionary mapping constraint type values to rejection counts."""

    def reject(self, constraint_types: Iterable[str]):
        self.rejected += 1
        for ctype in constraint_types:
            self.rejections[ctype] = self.rejections.get(ctype, 0) + 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "considered": self.considered,
            "filled": self.filled,
            "noCandidate": self.no_candidate,
            "rejected": self.rejected,
            "rejections": dict(self.rejections),
        }


@dataclass
class SynthesisState:
    """
    Everything one synthesis run works on. A fresh instance (and ledger) is
    built for every run.
    """

    index: HistoricalPerformanceIndex
    """Read-only historical performance."""
    roster: TrainerRoster
    """Teachers discovered in the records merged with custom entries."""
    recommender: SlotRecommender
    validator: ConstraintManager
    """Rule chain used for every commit in the run."""
    options: SynthesisOptions
    variation: VariationStrategy
    ledger: ScheduleLedger = field(default_factory=ScheduleLedger)
    """Committed classes; exclusively owned by this run."""
    stats: Dict[str, PhaseStats] = field(default_factory=dict)
    """Fill counters keyed by phase name, in execution order."""

    def phase(self, name: str) -> PhaseStats:
        return self.stats.setdefault(name, PhaseStats())

    def locations(self, locations: Iterable[str]) -> List[str]:
        return self.variation.order_locations(locations)

    def order(self, candidates: List[Recommendation], location: str, day: str, time: str) -> List[Recommendation]:
        """Variation order, then teachers already on this location/day/shift first."""
        ordered = self.variation.order_candidates(candidates)
        if self.options.minimize_trainers_per_shift:
            ordered = prefer_working_teachers(ordered, self.ledger, location, day, time)
        return ordered

    def try_commit(
        self,
        stats: PhaseStats,
        rec: Recommendation,
        location: str,
        day: str,
        time: str,
        source: str,
    ) -> Optional[ScheduledClass]:
        """Validate one recommendation at a slot and commit it when no hard rule fails."""
        proposed = ScheduledClass.from_history(
            self.ledger.next_id(source),
            day,
            time,
            location,
            rec.class_format,
            rec.teacher,
            rec.avg_checked_in,
            rec.avg_revenue,
            source=source,
        )
        result = self.validator.evaluate(self.ledger, proposed)
        if not result.is_valid:
            stats.reject(v.constraint_type.value for v in result.hard_violations)
            logger.debug(
                f"Rejected {rec.class_format} / {rec.teacher} @ {location} {day} {time}: "
                + "; ".join(v.message for v in result.hard_violations)
            )
            return None
        stats.filled += 1
        return self.ledger.commit(proposed)


def prefer_working_teachers(
    candidates: List[Recommendation], ledger: ScheduleLedger, location: str, day: str, time: str
) -> List[Recommendation]:
    """Stable reorder putting teachers who already work this location, day and shift first."""
    shift = shift_type(time)
    working = {
        c.teacher for c in ledger.classes_at(location, day) if shift_type(c.time) == shift
    }
    return sorted(candidates, key=lambda r: r.teacher not in working)


def resolve_options(options: Union[SynthesisOptions, Mapping[str, Any], None]) -> SynthesisOptions:
    """Accept options as a SynthesisOptions, a camelCase / snake_case mapping, or None."""
    if options is None:
        return SynthesisOptions()
    if isinstance(options, SynthesisOptions):
        return options
    known = {f.name for f in fields(SynthesisOptions)}
    kwargs = {}
    for key, value in options.items():
        name = OPTION_ALIASES.get(key, key)
        if name not in known:
            raise InvalidOptionsError(f"Unknown option {key!r}")
        if value is not None:
            kwargs[name] = value
    return SynthesisOptions(**kwargs)


def resolve_roster(frame: pd.DataFrame, roster: RosterInput) -> TrainerRoster:
    """Merge teachers seen in the records with custom roster entries (entries win)."""
    if isinstance(roster, TrainerRoster):
        custom = list(roster.entries.values())
    else:
        custom = list(roster or [])
    discovered = frame["teacher"].dropna().astype(str).str.strip() if not frame.empty else []
    return TrainerRoster.build(discovered, custom)


def build_validator(
    context: RuleContext,
    respect_time_restrictions: bool = True,
    include_sunday_limit: bool = False,
) -> ConstraintManager:
    """The rule chain shared by the pipeline, gap-fill and manual edits."""
    cm = ConstraintManager(context)
    # Trainer eligibility
    cm.add_rule(inactive_trainer_rule)
    cm.add_rule(new_trainer_format_rule)
    # Studio rules
    cm.add_rule(format_allowed_rule)
    cm.add_rule(restricted_hour_rule, respect_time_restrictions)
    cm.add_rule(capacity_rule)
    cm.add_rule(sunday_limit_rule, include_sunday_limit)
    # Trainer load
    cm.add_rule(trainer_conflict_rule)
    cm.add_rule(consecutive_rule)
    cm.add_rule(daily_cap_rule)
    cm.add_rule(weekly_cap_rule)
    return cm


def setup_synthesis(
    records: RecordsInput,
    roster: RosterInput,
    options: Union[SynthesisOptions, Mapping[str, Any], None],
) -> SynthesisState:
    """
    Build the index, roster, recommender and rule chain for one run.

    Args:
        records: Historical performance records (or a frame with the record columns).
        roster: Custom roster entries or a TrainerRoster to merge with discovered teachers.
        options: Invocation options; missing values use the defaults.

    Returns:
        SynthesisState: A fresh state with an empty ledger.
    """
    opts = resolve_options(options)
    frame = records_to_frame(records)
    merged = resolve_roster(frame, roster)
    index = HistoricalPerformanceIndex(frame, merged)
    context = RuleContext(roster=merged, standard_cap=opts.standard_weekly_cap)
    validator = build_validator(
        context,
        respect_time_restrictions=opts.respect_time_restrictions,
        include_sunday_limit=True,
    )
    logger.info(
        f"📋 Loaded {len(index)} usable records ({index.dropped} dropped), "
        f"{len(merged.active_teachers())} active teachers"
    )
    return SynthesisState(
        index=index,
        roster=merged,
        recommender=SlotRecommender(index, opts.optimization_type),
        validator=validator,
        options=opts,
        variation=VariationStrategy(opts.iteration),
    )
