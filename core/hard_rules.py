"""
Rule predicates checked before a class is committed to the schedule.

Every rule takes (ledger, proposed class, context) and returns a
ConstraintViolation when the class breaks it, or None. Rules never raise.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from core.models import ScheduledClass, TrainerRoster
from core.state import ScheduleLedger
from utils.constants import (
    CONSECUTIVE_GAP_MINUTES,
    DEFAULT_STUDIO_CAPACITY,
    DEFAULT_SUNDAY_CLASS_LIMIT,
    LOCATION_FORMAT_RULES,
    MAX_CONSECUTIVE_CLASSES,
    MAX_DAILY_CLASSES,
    MAX_DAILY_HOURS,
    MAX_WEEKLY_HOURS,
    NEW_TRAINER_FORMATS,
    STUDIO_CAPACITIES,
    SUNDAY_CLASS_LIMITS,
    WEEKLY_HOURS_WARNING_MARGIN,
)
from utils.shift_utils import end_minutes, is_time_restricted, restricted_window, to_minutes


class ConstraintType(str, Enum):
    """Types of scheduling constraints"""
    CAPACITY = "capacity"
    TRAINER_CONFLICT = "trainer_conflict"
    CROSS_LOCATION = "cross_location"
    CONSECUTIVE = "consecutive"
    DAILY_LIMIT = "daily_limit"
    WEEKLY_HOURS = "weekly_hours"
    FORMAT_NOT_ALLOWED = "format_not_allowed"
    RESTRICTED_HOUR = "restricted_hour"
    INACTIVE_TRAINER = "inactive_trainer"
    NEW_TRAINER_FORMAT = "new_trainer_format"
    SUNDAY_LIMIT = "sunday_limit"


class ConstraintSeverity(str, Enum):
    """Severity levels for constraint violations"""
    HARD = "hard"  # Cannot be committed
    SOFT = "soft"  # Needs confirmation before committing


@dataclass
class ConstraintViolation:
    """Represents a single constraint violation"""
    constraint_type: ConstraintType
    message: str
    severity: ConstraintSeverity = ConstraintSeverity.HARD
    details: dict = field(default_factory=dict)

    def __str__(self):
        return f"[{self.severity.upper()}] {self.constraint_type.value}: {self.message}"


RuleOutcome = Optional[ConstraintViolation]


@dataclass
class ValidationResult:
    """Result of validating one proposed class"""
    is_valid: bool = True
    violations: List[ConstraintViolation] = field(default_factory=list)

    @property
    def hard_violations(self) -> List[ConstraintViolation]:
        return [v for v in self.violations if v.severity == ConstraintSeverity.HARD]

    @property
    def soft_violations(self) -> List[ConstraintViolation]:
        return [v for v in self.violations if v.severity == ConstraintSeverity.SOFT]

    @property
    def has_hard_violations(self) -> bool:
        return len(self.hard_violations) > 0

    def add_violation(self, violation: ConstraintViolation):
        self.violations.append(violation)
        if violation.severity == ConstraintSeverity.HARD:
            self.is_valid = False


@dataclass
class RuleContext:
    roster: TrainerRoster = field(default_factory=TrainerRoster)
    standard_cap: float = MAX_WEEKLY_HOURS
    """Weekly cap for standard teachers."""


def studio_capacity(location: str) -> int:
    return STUDIO_CAPACITIES.get(location, DEFAULT_STUDIO_CAPACITY)


# === Studio rules ===
def capacity_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    """Every 15-minute cell of the class must have a free room at the location."""
    capacity = studio_capacity(proposed.location)
    existing = [set(c.cells) for c in ledger.classes_at(proposed.location, proposed.day)]
    for cell in proposed.cells:
        occupied = sum(1 for cells in existing if cell in cells)
        if occupied >= capacity:
            return ConstraintViolation(
                ConstraintType.CAPACITY,
                f"{proposed.location} already runs {occupied} classes at {cell} on {proposed.day} "
                f"(capacity {capacity})",
                details={"cell": cell, "occupied": occupied, "capacity": capacity},
            )
    return None


def format_allowed_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    rules = LOCATION_FORMAT_RULES.get(proposed.location, {})
    denied = rules.get("restrictedFormats", [])
    allowed = rules.get("allowedFormats", [])
    if proposed.class_format in denied or (allowed and proposed.class_format not in allowed):
        return ConstraintViolation(
            ConstraintType.FORMAT_NOT_ALLOWED,
            f"{proposed.class_format} is not allowed at {proposed.location}",
        )
    return None


def restricted_hour_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    if proposed.is_private or not is_time_restricted(proposed.time, proposed.day):
        return None
    start, end = restricted_window(proposed.day)
    return ConstraintViolation(
        ConstraintType.RESTRICTED_HOUR,
        f"{proposed.time} on {proposed.day} is inside the {start}-{end} window; only private classes may start then",
    )


def sunday_limit_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    if proposed.day != "Sunday":
        return None
    limit = SUNDAY_CLASS_LIMITS.get(proposed.location, DEFAULT_SUNDAY_CLASS_LIMIT)
    count = ledger.count_on(proposed.location, "Sunday")
    if count + 1 > limit:
        return ConstraintViolation(
            ConstraintType.SUNDAY_LIMIT,
            f"{proposed.location} already has {count} Sunday classes (limit {limit})",
        )
    return None


# === Trainer rules ===
def trainer_conflict_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    """A teacher teaches one class at a time and at one location per day."""
    proposed_cells = set(proposed.cells)
    for other in ledger.teacher_day_classes(proposed.teacher, proposed.day):
        if proposed_cells.intersection(other.cells):
            return ConstraintViolation(
                ConstraintType.TRAINER_CONFLICT,
                f"{proposed.teacher} already teaches {other.class_format} at {other.time} on {proposed.day}",
                details={"conflicting_id": other.id},
            )
        if other.location != proposed.location:
            return ConstraintViolation(
                ConstraintType.CROSS_LOCATION,
                f"{proposed.teacher} already teaches at {other.location} on {proposed.day}",
                details={"conflicting_id": other.id, "location": other.location},
            )
    return None


def consecutive_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    timeline = ledger.teacher_day_classes(proposed.teacher, proposed.day) + [proposed]
    timeline.sort(key=lambda c: to_minutes(c.time))

    # walk the run of back-to-back classes that contains the proposal
    position = next(i for i, c in enumerate(timeline) if c is proposed)
    run = 1
    i = position
    while i > 0 and _back_to_back(timeline[i - 1], timeline[i]):
        run += 1
        i -= 1
    i = position
    while i < len(timeline) - 1 and _back_to_back(timeline[i], timeline[i + 1]):
        run += 1
        i += 1

    if run > MAX_CONSECUTIVE_CLASSES:
        return ConstraintViolation(
            ConstraintType.CONSECUTIVE,
            f"{proposed.teacher} would teach {run} consecutive classes on {proposed.day} "
            f"(max {MAX_CONSECUTIVE_CLASSES})",
            details={"run": run},
        )
    return None


def _back_to_back(first: ScheduledClass, second: ScheduledClass) -> bool:
    gap = to_minutes(second.time) - end_minutes(first.time, first.duration)
    return abs(gap) <= CONSECUTIVE_GAP_MINUTES


def daily_cap_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    hours = ledger.teacher_ledger(proposed.teacher)
    count = hours.day_counts.get(proposed.day, 0) + 1
    total = round(hours.day_hours.get(proposed.day, 0.0) + proposed.duration, 2)
    if count > MAX_DAILY_CLASSES or total > MAX_DAILY_HOURS:
        return ConstraintViolation(
            ConstraintType.DAILY_LIMIT,
            f"{proposed.teacher} would teach {count} classes / {total}h on {proposed.day} "
            f"(max {MAX_DAILY_CLASSES} classes, {MAX_DAILY_HOURS}h)",
            details={"classes": count, "hours": total},
        )
    return None


def weekly_cap_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    """Hard above the teacher's cap, a soft warning inside the margin below it."""
    cap = ctx.roster.weekly_cap(proposed.teacher, ctx.standard_cap)
    total = round(ledger.weekly_hours(proposed.teacher) + proposed.duration, 2)
    details = {"hours": total, "cap": cap}
    if total > cap:
        return ConstraintViolation(
            ConstraintType.WEEKLY_HOURS,
            f"{proposed.teacher} would reach {total}h this week, over the {cap:g}h limit",
            details=details,
        )
    if total > cap - WEEKLY_HOURS_WARNING_MARGIN:
        return ConstraintViolation(
            ConstraintType.WEEKLY_HOURS,
            f"{proposed.teacher} would reach {total}h this week, close to the {cap:g}h limit",
            severity=ConstraintSeverity.SOFT,
            details=details,
        )
    return None


def inactive_trainer_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    if ctx.roster.is_inactive(proposed.teacher):
        return ConstraintViolation(
            ConstraintType.INACTIVE_TRAINER,
            f"{proposed.teacher} is inactive and cannot be scheduled",
        )
    return None


def new_trainer_format_rule(ledger: ScheduleLedger, proposed: ScheduledClass, ctx: RuleContext) -> RuleOutcome:
    if ctx.roster.is_new_trainer(proposed.teacher) and proposed.class_format not in NEW_TRAINER_FORMATS:
        return ConstraintViolation(
            ConstraintType.NEW_TRAINER_FORMAT,
            f"New trainer {proposed.teacher} cannot teach {proposed.class_format}",
        )
    return None
