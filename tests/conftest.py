from __future__ import annotations

from typing import Callable, List

import pytest

from core.models import PerformanceRecord, ScheduledClass

KWALITY = "Kwality House, Kemps Corner"
SUPREME = "Supreme HQ, Bandra"
KENKERE = "Kenkere House"

TEACHERS = [
    "Anisha Shah",
    "Vivaran Dhasmana",
    "Mrigakshi Jaiswal",
    "Pranjali Jain",
    "Atulan Purohit",
    "Cauveri Vikrant",
    "Rohan Dahima",
    "Reshma Sharma",
    "Richard D'Costa",
    "Karan Bhatia",
]

FORMATS = [
    "Studio Barre 57",
    "Studio Mat 57",
    "Studio FIT",
    "Studio Cardio Barre",
    "Studio Barre 57 (Express)",
    "Studio powerCycle",
    "Studio Recovery",
    "Studio HIIT",
]

TIMES = ["07:00", "07:30", "08:00", "09:00", "10:00", "11:00", "17:30", "18:00", "18:30", "19:00", "19:30"]


@pytest.fixture
def make_record() -> Callable[..., PerformanceRecord]:
    def _make(
        class_format: str = "Studio Barre 57",
        location: str = KWALITY,
        day: str = "Monday",
        time: str = "07:00",
        teacher: str = "Anisha Shah",
        checked_in: float = 6,
        revenue: float = 0.0,
    ) -> PerformanceRecord:
        return PerformanceRecord(class_format, location, day, time, teacher, checked_in, revenue)

    return _make


@pytest.fixture
def make_class() -> Callable[..., ScheduledClass]:
    def _make(
        class_id: str,
        day: str = "Monday",
        time: str = "07:00",
        location: str = KWALITY,
        class_format: str = "Studio Mat 57",
        teacher: str = "Anisha Shah",
        **kwargs,
    ) -> ScheduledClass:
        return ScheduledClass(
            id=class_id,
            day=day,
            time=time,
            location=location,
            class_format=class_format,
            teacher=teacher,
            **kwargs,
        )

    return _make


def build_history() -> List[PerformanceRecord]:
    """A deterministic week of history: two pairs per slot, two sessions per pair."""
    records = []
    locations = [KWALITY, SUPREME, KENKERE]
    days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    for i, location in enumerate(locations):
        for j, day in enumerate(days):
            for k, time in enumerate(TIMES):
                first = (
                    FORMATS[(i + j + k) % len(FORMATS)],
                    TEACHERS[(i * 3 + j + k) % len(TEACHERS)],
                    3 + (i + 2 * j + 3 * k) % 6,
                )
                second = (
                    FORMATS[(i + j + k + 3) % len(FORMATS)],
                    TEACHERS[(i * 3 + j + k + 5) % len(TEACHERS)],
                    4 + (i + j + k) % 4,
                )
                for fmt, teacher, checked_in in (first, second):
                    for delta in (0, 1):
                        records.append(
                            PerformanceRecord(
                                fmt, location, day, time, teacher,
                                checked_in + delta, 1000.0 * (checked_in + delta),
                            )
                        )
    return records


@pytest.fixture(scope="session")
def history() -> List[PerformanceRecord]:
    return build_history()
