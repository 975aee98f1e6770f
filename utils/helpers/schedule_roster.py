from typing import Any, Dict, List

from core.models import (
    PerformanceRecord,
    RosterEntry,
    ScheduledClass,
    TrainerClassification,
)
from schemas.schedule.synthesize import (
    PerformanceRecordIn,
    ScheduledClassIn,
    SynthesisOptionsIn,
    TeacherEntry,
)
from utils.validate import validate_class_slot, validate_records


def to_performance_records(records: List[PerformanceRecordIn]) -> List[PerformanceRecord]:
    """Convert request records into engine records after checking their numbers."""
    validate_records(records)
    return [
        PerformanceRecord(
            class_format=r.classFormat,
            location=r.location,
            day_of_week=r.dayOfWeek,
            time=r.time,
            teacher=r.teacherName,
            checked_in=r.checkedIn,
            revenue=r.revenue,
        )
        for r in records
    ]


def to_roster_entries(teachers: List[TeacherEntry]) -> List[RosterEntry]:
    return [
        RosterEntry(
            name=t.name,
            classification=TrainerClassification(t.classification),
            specialties=tuple(t.specialties),
            max_hours=t.maxHours,
        )
        for t in teachers
    ]


def to_options(options: SynthesisOptionsIn) -> Dict[str, Any]:
    """camelCase option mapping; resolve_options maps the names onto SynthesisOptions."""
    return options.model_dump(include=set(SynthesisOptionsIn.model_fields))


def to_scheduled_class(item: ScheduledClassIn) -> ScheduledClass:
    time = validate_class_slot(item.id, item.day, item.time)
    return ScheduledClass(
        id=item.id,
        day=item.day,
        time=time,
        location=item.location,
        class_format=item.classFormat,
        teacher=item.teacher.strip(),
        duration=item.duration,
        participants=item.participants,
        revenue=item.revenue,
        is_top_performer=item.isTopPerformer,
        is_private=item.isPrivate,
        is_locked=item.isLocked,
        source=item.source,
    )


def to_scheduled_classes(items: List[ScheduledClassIn]) -> List[ScheduledClass]:
    return [to_scheduled_class(item) for item in items]


def class_to_dict(cls: ScheduledClass) -> Dict[str, Any]:
    """camelCase view of a class, with the teacher split into first and last name."""
    return {
        "id": cls.id,
        "day": cls.day,
        "time": cls.time,
        "location": cls.location,
        "classFormat": cls.class_format,
        "teacher": cls.teacher,
        "teacherFirstName": cls.teacher_first_name,
        "teacherLastName": cls.teacher_last_name,
        "duration": cls.duration,
        "participants": cls.participants,
        "revenue": cls.revenue,
        "isTopPerformer": cls.is_top_performer,
        "isPrivate": cls.is_private,
        "isLocked": cls.is_locked,
        "source": cls.source,
    }
