from dataclasses import dataclass
from typing import List, Optional
import logging

from core.history import HistoricalPerformanceIndex
from core.models import ScheduledClass, TrainerRoster
from core.state import ScheduleLedger
from scheduler.extractor import sort_classes
from scheduler.manual_edit import INVALID, validate_edit
from utils.constants import (
    MAX_DAILY_CLASSES,
    MAX_SUGGESTIONS,
    MAX_WEEKLY_HOURS,
    MIN_SPECIALTY_CHECKED_IN,
)

logger = logging.getLogger(__name__)


@dataclass
class TopClass:
    class_format: str
    location: str
    day: str
    time: str
    teacher: str
    avg_participants: float
    avg_revenue: float
    frequency: int


@dataclass
class OptimizationSuggestion:
    type: str
    original: ScheduledClass
    suggested: Optional[ScheduledClass]
    reason: str
    impact: str
    priority: int
    validation_status: str
    validation_message: str


def top_performing_classes(
    index: HistoricalPerformanceIndex, min_avg: float = MIN_SPECIALTY_CHECKED_IN, limit: int = 20
) -> List[TopClass]:
    """
    Rank (format, location, day, time) combinations by average check-ins.

    The teacher reported for a combination is the one with the most total
    check-ins there.
    """
    df = index.frame
    if df.empty:
        return []
    keys = ["class_format", "location", "day_of_week", "time"]
    stats = (
        df.groupby(keys, sort=False)
        .agg(
            avg_participants=("checked_in", "mean"),
            avg_revenue=("revenue", "mean"),
            frequency=("checked_in", "size"),
        )
        .reset_index()
    )
    by_teacher = df.groupby(keys + ["teacher"], sort=False)["checked_in"].sum().reset_index()
    # first row per key after a stable sort is the teacher with the most check-ins
    best = (
        by_teacher.sort_values("checked_in", ascending=False, kind="stable")
        .drop_duplicates(subset=keys)
        .set_index(keys)["teacher"]
    )

    stats["avg_participants"] = stats["avg_participants"].round(1)
    stats = stats[stats["avg_participants"] >= min_avg]
    stats = stats.sort_values("avg_participants", ascending=False, kind="stable").head(limit)

    return [
        TopClass(
            class_format=row.class_format,
            location=row.location,
            day=row.day_of_week,
            time=row.time,
            teacher=best.loc[(row.class_format, row.location, row.day_of_week, row.time)],
            avg_participants=float(row.avg_participants),
            avg_revenue=round(float(row.avg_revenue), 2),
            frequency=int(row.frequency),
        )
        for row in stats.itertuples(index=False)
    ]


def teacher_specialties(index: HistoricalPerformanceIndex, teacher: str, limit: int = 5) -> List[str]:
    """Formats a teacher averages at least 5 check-ins in, best first."""
    df = index.frame
    if df.empty:
        return []
    averages = df[df["teacher"] == teacher].groupby("class_format", sort=False)["checked_in"].mean()
    averages = averages[averages >= MIN_SPECIALTY_CHECKED_IN].sort_values(ascending=False, kind="stable")
    return list(averages.index[:limit])


def _alternative_teachers(
    cls: ScheduledClass, ledger: ScheduleLedger, index: Optional[HistoricalPerformanceIndex], roster: TrainerRoster
) -> List[str]:
    """Teachers with history in this format and location first, then everyone else on the schedule."""
    names: List[str] = []
    if index is not None:
        for pair in index.pairs_for_day(cls.location, cls.day):
            if pair.class_format == cls.class_format:
                names.append(pair.teacher)
        names.extend(index.teachers())
    names.extend(c.teacher for c in ledger)
    names.extend(roster.active_teachers())

    seen = set()
    ordered = []
    for name in names:
        if name == cls.teacher or name in seen or roster.is_inactive(name):
            continue
        seen.add(name)
        ordered.append(name)
    return ordered


def find_alternative_teacher(
    cls: ScheduledClass,
    ledger: ScheduleLedger,
    index: Optional[HistoricalPerformanceIndex],
    roster: TrainerRoster,
    standard_cap: float,
) -> Optional[ScheduledClass]:
    """The class handed to the first alternative teacher for whom the edit is not invalid."""
    for teacher in _alternative_teachers(cls, ledger, index, roster):
        candidate = cls.copy(teacher=teacher)
        if validate_edit(ledger, candidate, roster, standard_cap).status != INVALID:
            return candidate
    return None


def _suggestion(
    reason: str,
    impact: str,
    priority: int,
    cls: ScheduledClass,
    ledger: ScheduleLedger,
    index: Optional[HistoricalPerformanceIndex],
    roster: TrainerRoster,
    standard_cap: float,
) -> OptimizationSuggestion:
    suggested = find_alternative_teacher(cls, ledger, index, roster, standard_cap)
    if suggested is None:
        status, message = "unresolved", "No alternative teacher passes the scheduling rules"
    else:
        check = validate_edit(ledger, suggested, roster, standard_cap)
        status, message = check.status, check.message
    return OptimizationSuggestion(
        type="trainer_change",
        original=cls,
        suggested=suggested,
        reason=reason,
        impact=impact,
        priority=priority,
        validation_status=status,
        validation_message=message,
    )


def suggest_optimizations(
    ledger: ScheduleLedger,
    index: Optional[HistoricalPerformanceIndex] = None,
    roster: Optional[TrainerRoster] = None,
    standard_cap: float = MAX_WEEKLY_HOURS,
) -> List[OptimizationSuggestion]:
    """
    Deterministic trainer-change suggestions for an existing schedule.

    Covers teachers over their weekly cap, teachers at more than one location
    on a day and teachers over the daily class limit. Every suggested class
    is re-validated against the schedule. At most five suggestions are
    returned, highest priority first.
    """
    roster = roster or TrainerRoster()
    suggestions: List[OptimizationSuggestion] = []

    for teacher in sorted(ledger.teacher_hours):
        hours = ledger.teacher_hours[teacher]
        cap = roster.weekly_cap(teacher, standard_cap)

        # overloaded: hand classes over until the excess is covered
        if hours.weekly_hours > cap:
            excess = hours.weekly_hours - cap
            moved = 0.0
            for cls in sort_classes([c for c in ledger if c.teacher == teacher]):
                if moved >= excess:
                    break
                suggestions.append(
                    _suggestion(
                        f"{teacher} exceeds {cap:g}h limit ({hours.weekly_hours:.1f}h)",
                        "Keeps the teacher within the weekly hour limit",
                        9,
                        cls, ledger, index, roster, standard_cap,
                    )
                )
                moved += cls.duration

        for day, count in hours.day_counts.items():
            day_classes = ledger.teacher_day_classes(teacher, day)
            locations = list(dict.fromkeys(c.location for c in day_classes))
            if len(locations) > 1:
                suggestions.append(
                    _suggestion(
                        f"{teacher} assigned to multiple locations on {day} ({', '.join(locations)})",
                        "One location per teacher per day",
                        9,
                        day_classes[1], ledger, index, roster, standard_cap,
                    )
                )
            if count > MAX_DAILY_CLASSES:
                suggestions.append(
                    _suggestion(
                        f"{teacher} has {count} classes on {day}, exceeding daily limit",
                        "Keeps the teacher within the daily class limit",
                        8,
                        day_classes[-1], ledger, index, roster, standard_cap,
                    )
                )

    suggestions.sort(key=lambda s: s.priority, reverse=True)
    logger.info(f"💡 Generated {len(suggestions)} optimisation suggestions")
    return suggestions[:MAX_SUGGESTIONS]
