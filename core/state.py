from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Optional
import logging

from core.models import ScheduledClass
from exceptions.custom_errors import DuplicateClassError, UnknownClassError
from utils.shift_utils import shift_type, to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeacherHourLedger:
    """
    Derived hour and shift indices for one teacher. Instances are immutable;
    adding a class returns a new ledger so a commit can compute every value
    before storing any of them.
    """

    weekly_hours: float = 0.0
    """Total hours across the week."""
    day_hours: Dict[str, float] = field(default_factory=dict)
    """A dictionary mapping each day to the hours taught on it."""
    day_shifts: Dict[str, str] = field(default_factory=dict)
    """A dictionary mapping each day to 'morning', 'evening', 'afternoon' or
    'mixed' when classes fall in more than one of those.
    """
    day_counts: Dict[str, int] = field(default_factory=dict)
    """A dictionary mapping each day to the number of classes taught."""
    day_locations: Dict[str, str] = field(default_factory=dict)
    """A dictionary mapping each day to the location of the first class."""

    def with_class(self, cls: ScheduledClass) -> "TeacherHourLedger":
        day = cls.day
        label = shift_type(cls.time)
        previous = self.day_shifts.get(day)
        new_label = label if previous in (None, label) else "mixed"
        return replace(
            self,
            weekly_hours=round(self.weekly_hours + cls.duration, 2),
            day_hours={**self.day_hours, day: round(self.day_hours.get(day, 0.0) + cls.duration, 2)},
            day_shifts={**self.day_shifts, day: new_label},
            day_counts={**self.day_counts, day: self.day_counts.get(day, 0) + 1},
            day_locations={**self.day_locations, day: self.day_locations.get(day, cls.location)},
        )


class ScheduleLedger:
    """Committed classes of one synthesis run, with per-teacher indices."""

    def __init__(self, classes: Iterable[ScheduledClass] = ()):
        self._classes: List[ScheduledClass] = []
        self._ids: Dict[str, ScheduledClass] = {}
        self.teacher_hours: Dict[str, TeacherHourLedger] = {}
        for cls in classes:
            self.commit(cls)

    # === Mutation ===
    def commit(self, cls: ScheduledClass) -> ScheduledClass:
        """Add a class and update its teacher's indices in one step."""
        if cls.id in self._ids:
            raise DuplicateClassError(f"Class {cls.id} is already in the schedule")
        updated = self.teacher_hours.get(cls.teacher, TeacherHourLedger()).with_class(cls)

        self._classes.append(cls)
        self._ids[cls.id] = cls
        self.teacher_hours[cls.teacher] = updated
        logger.debug(f"Committed {cls.id}: {cls.class_format} / {cls.teacher} @ {cls.location} {cls.day} {cls.time}")
        return cls

    def remove(self, class_id: str) -> ScheduledClass:
        if class_id not in self._ids:
            raise UnknownClassError(f"Class {class_id} is not in the schedule")
        removed = self._ids.pop(class_id)
        self._classes = [c for c in self._classes if c.id != class_id]
        self.rebuild()
        return removed

    def replace(self, class_id: str, cls: ScheduledClass) -> ScheduledClass:
        """Swap an existing class for an edited one, keeping its position."""
        if class_id not in self._ids:
            raise UnknownClassError(f"Class {class_id} is not in the schedule")
        if cls.id != class_id and cls.id in self._ids:
            raise DuplicateClassError(f"Class {cls.id} is already in the schedule")
        self._classes = [cls if c.id == class_id else c for c in self._classes]
        del self._ids[class_id]
        self._ids[cls.id] = cls
        self.rebuild()
        return cls

    def clear(self):
        self._classes = []
        self._ids = {}
        self.teacher_hours = {}

    def rebuild(self):
        """Recompute the teacher indices from the class list."""
        hours: Dict[str, TeacherHourLedger] = {}
        for cls in self._classes:
            hours[cls.teacher] = hours.get(cls.teacher, TeacherHourLedger()).with_class(cls)
        self.teacher_hours = hours

    # === Copies ===
    def copy(self) -> "ScheduleLedger":
        return ScheduleLedger(c.copy() for c in self._classes)

    def without(self, class_ids: Iterable[str]) -> "ScheduleLedger":
        excluded = set(class_ids)
        return ScheduleLedger(c for c in self._classes if c.id not in excluded)

    def next_id(self, prefix: str) -> str:
        """Deterministic id such as 'historical-0001', unique within this ledger."""
        n = sum(1 for c in self._classes if c.id.startswith(f"{prefix}-")) + 1
        while f"{prefix}-{n:04d}" in self._ids:
            n += 1
        return f"{prefix}-{n:04d}"

    # === Lookups ===
    @property
    def classes(self) -> List[ScheduledClass]:
        return list(self._classes)

    def get(self, class_id: str) -> Optional[ScheduledClass]:
        return self._ids.get(class_id)

    def classes_at(self, location: str, day: str) -> List[ScheduledClass]:
        return [c for c in self._classes if c.location == location and c.day == day]

    def starts_at(self, location: str, day: str, time: str) -> List[ScheduledClass]:
        return [c for c in self.classes_at(location, day) if c.time == time]

    def count_on(self, location: str, day: str) -> int:
        return len(self.classes_at(location, day))

    def teacher_day_classes(self, teacher: str, day: str) -> List[ScheduledClass]:
        return sorted(
            (c for c in self._classes if c.teacher == teacher and c.day == day),
            key=lambda c: to_minutes(c.time),
        )

    def teacher_ledger(self, teacher: str) -> TeacherHourLedger:
        return self.teacher_hours.get(teacher, TeacherHourLedger())

    def weekly_hours(self, teacher: str) -> float:
        return self.teacher_ledger(teacher).weekly_hours

    def __len__(self) -> int:
        return len(self._classes)

    def __iter__(self) -> Iterator[ScheduledClass]:
        return iter(list(self._classes))

    def __contains__(self, class_id: object) -> bool:
        return class_id in self._ids
