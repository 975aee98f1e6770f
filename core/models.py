from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional

from exceptions.custom_errors import InputMismatchError, InvalidOptionsError
from utils.constants import (
    DAYS_OF_WEEK,
    MAX_WEEKLY_HOURS,
    NEW_TRAINER_MAX_WEEKLY_HOURS,
    TOP_PERFORMER_THRESHOLD,
)
from utils.shift_utils import class_duration, occupied_cells, round_half_up


@dataclass(frozen=True)
class PerformanceRecord:
    """One past session of a class, as delivered by the import step."""

    class_format: str
    """Cleaned class format name, e.g. 'Studio Barre 57'."""
    location: str
    """Studio name."""
    day_of_week: str
    """Full weekday name, e.g. 'Monday'."""
    time: str
    """Start time as provided; normalised onto the grid by the index."""
    teacher: str
    """Full teacher name."""
    checked_in: float
    """Number of participants who checked in."""
    revenue: float = 0.0
    """Total revenue of the session."""


@dataclass
class ScheduledClass:
    """A class committed to (or proposed for) the weekly schedule."""

    id: str
    day: str
    time: str
    location: str
    class_format: str
    teacher: str
    duration: Optional[float] = None
    """Hours; derived from the format when not given."""
    participants: int = 0
    """Estimated participants from the historical average."""
    revenue: float = 0.0
    """Estimated revenue from the historical average."""
    is_top_performer: bool = False
    is_private: bool = False
    is_locked: bool = False
    source: str = "manual"
    """Pipeline phase (or 'manual') that created the class."""

    def __post_init__(self):
        if self.duration is None:
            self.duration = class_duration(self.class_format)

    @property
    def cells(self) -> List[str]:
        return occupied_cells(self.time, self.duration)

    @property
    def teacher_first_name(self) -> str:
        return self.teacher.split(" ")[0] if self.teacher else ""

    @property
    def teacher_last_name(self) -> str:
        return " ".join(self.teacher.split(" ")[1:]) if self.teacher else ""

    def copy(self, **changes) -> "ScheduledClass":
        return replace(self, **changes)

    @classmethod
    def from_history(
        cls,
        class_id: str,
        day: str,
        time: str,
        location: str,
        class_format: str,
        teacher: str,
        avg_checked_in: float,
        avg_revenue: float = 0.0,
        source: str = "historical",
    ) -> "ScheduledClass":
        """Build a class from a historical average, flagging top performers."""
        return cls(
            id=class_id,
            day=day,
            time=time,
            location=location,
            class_format=class_format,
            teacher=teacher,
            participants=round_half_up(avg_checked_in),
            revenue=round(avg_revenue, 2),
            is_top_performer=avg_checked_in >= TOP_PERFORMER_THRESHOLD,
            source=source,
        )


class TrainerClassification(str, Enum):
    """Roster classification of a teacher"""
    STANDARD = "standard"
    NEW_TRAINER = "new_trainer"  # reduced weekly cap, restricted formats
    INACTIVE = "inactive"  # never scheduled, history ignored


@dataclass(frozen=True)
class RosterEntry:
    name: str
    classification: TrainerClassification = TrainerClassification.STANDARD
    specialties: tuple = ()
    max_hours: Optional[float] = None
    """Explicit weekly cap; replaces the classification cap when set."""


@dataclass
class TrainerRoster:
    """Teachers known to the engine, keyed by full name."""

    entries: Dict[str, RosterEntry] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        discovered: Iterable[str] = (),
        custom: Iterable[RosterEntry] = (),
    ) -> "TrainerRoster":
        """
        Merge teachers discovered in historical records with custom entries.

        Discovered teachers are standard; a custom entry for the same name wins.
        Two custom entries for one name must agree on classification.
        """
        entries: Dict[str, RosterEntry] = {}
        for name in discovered:
            name = str(name).strip()
            if name and name not in entries:
                entries[name] = RosterEntry(name=name)

        seen_custom: Dict[str, RosterEntry] = {}
        for entry in custom:
            name = entry.name.strip()
            if not name:
                continue
            previous = seen_custom.get(name)
            if previous is not None and previous.classification != entry.classification:
                raise InputMismatchError(
                    f"Conflicting roster classifications for {name}: "
                    f"{previous.classification.value} vs {entry.classification.value}"
                )
            seen_custom[name] = entry
            entries[name] = replace(entry, name=name)
        return cls(entries=entries)

    def classification(self, teacher: str) -> TrainerClassification:
        entry = self.entries.get(teacher)
        return entry.classification if entry else TrainerClassification.STANDARD

    def is_inactive(self, teacher: str) -> bool:
        return self.classification(teacher) == TrainerClassification.INACTIVE

    def is_new_trainer(self, teacher: str) -> bool:
        return self.classification(teacher) == TrainerClassification.NEW_TRAINER

    def weekly_cap(self, teacher: str, standard_cap: float = MAX_WEEKLY_HOURS) -> float:
        entry = self.entries.get(teacher)
        if entry is not None and entry.max_hours is not None:
            return float(entry.max_hours)
        if self.is_new_trainer(teacher):
            return float(NEW_TRAINER_MAX_WEEKLY_HOURS)
        return float(standard_cap)

    def active_teachers(self) -> List[str]:
        return sorted(
            name for name, entry in self.entries.items()
            if entry.classification != TrainerClassification.INACTIVE
        )

    def inactive_teachers(self) -> set:
        return {
            name for name, entry in self.entries.items()
            if entry.classification == TrainerClassification.INACTIVE
        }


OPTIMIZATION_TYPES = ("revenue", "attendance", "balanced")


@dataclass(frozen=True)
class SynthesisOptions:
    """Invocation options of a synthesis run; missing values use these defaults."""

    prioritize_top_performers: bool = True
    balance_shifts: bool = True
    optimize_teacher_hours: bool = True
    respect_time_restrictions: bool = True
    minimize_trainers_per_shift: bool = True
    optimization_type: str = "balanced"
    iteration: int = 0
    target_day: Optional[str] = None
    target_teacher_hours: float = MAX_WEEKLY_HOURS
    preserve_top_classes: bool = False

    def __post_init__(self):
        if self.optimization_type not in OPTIMIZATION_TYPES:
            raise InvalidOptionsError(
                f"Unknown optimization type {self.optimization_type!r}; "
                f"expected one of {', '.join(OPTIMIZATION_TYPES)}"
            )
        if self.iteration < 0:
            raise InvalidOptionsError(f"Iteration must be >= 0, got {self.iteration}")
        if self.target_day is not None and self.target_day not in DAYS_OF_WEEK:
            raise InvalidOptionsError(f"Unknown target day {self.target_day!r}")
        if self.target_teacher_hours <= 0:
            raise InvalidOptionsError("Target teacher hours must be positive")

    @property
    def standard_weekly_cap(self) -> float:
        return float(self.target_teacher_hours if self.optimize_teacher_hours else MAX_WEEKLY_HOURS)

    @property
    def days(self) -> List[str]:
        return [self.target_day] if self.target_day else list(DAYS_OF_WEEK)
