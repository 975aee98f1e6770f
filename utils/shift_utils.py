import math
import re
from datetime import datetime, time as dt_time
from typing import Any, List, Optional

import pandas as pd

from utils.constants import (
    CLASS_DURATIONS,
    DEFAULT_CLASS_DURATION,
    EVENING_SHIFT,
    GRID_END,
    GRID_START,
    GRID_STEP_MINUTES,
    MORNING_SHIFT,
    WEEKDAY_RESTRICTED_HOURS,
    WEEKEND_DAYS,
    WEEKEND_RESTRICTED_HOURS,
)

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*([AaPp][Mm])?\s*$")


# --- Clock conversions ---
def to_minutes(value: str) -> int:
    """Convert an 'HH:MM' string to minutes after midnight."""
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    """Convert minutes after midnight back to 'HH:MM'."""
    return f"{total // 60:02d}:{total % 60:02d}"


def normalise_time(raw: Any) -> Optional[str]:
    """
    Convert a raw class time to 'HH:MM', or None when it cannot be parsed.
    Supports formats like:
      - '7:00', '07:00:00', '7:00 AM', '19:30 pm'
      - datetime.time / datetime / pd.Timestamp values
    """
    if raw is None:
        return None
    if isinstance(raw, (pd.Timestamp, datetime)):
        return f"{raw.hour:02d}:{raw.minute:02d}"
    if isinstance(raw, dt_time):
        return f"{raw.hour:02d}:{raw.minute:02d}"
    if not isinstance(raw, str):
        return None

    match = _CLOCK_RE.match(raw)
    if match:
        hours, minutes, meridiem = int(match.group(1)), int(match.group(2)), match.group(3)
        if meridiem:
            pm = meridiem.lower() == "pm"
            # '19:30 pm' is a 24h time with a redundant suffix
            if pm and 12 < hours <= 23:
                pass
            elif 1 <= hours <= 12:
                hours = hours % 12 + (12 if pm else 0)
            else:
                return None
        if hours > 23 or minutes > 59:
            return None
        return f"{hours:02d}:{minutes:02d}"

    # pandas handles the remaining common layouts using dateutil under the hood
    parsed = pd.to_datetime(raw, errors="coerce")
    if pd.isna(parsed):
        return None
    return f"{parsed.hour:02d}:{parsed.minute:02d}"


# --- Grid ---
def grid_times() -> List[str]:
    """All slot start times on the 15-minute grid, inclusive of both ends."""
    return times_between(GRID_START, GRID_END)


def times_between(start: str, end: str) -> List[str]:
    """Grid times from start to end inclusive."""
    return [
        from_minutes(m)
        for m in range(to_minutes(start), to_minutes(end) + 1, GRID_STEP_MINUTES)
    ]


def is_on_grid(value: str) -> bool:
    minutes = to_minutes(value)
    return (
        to_minutes(GRID_START) <= minutes <= to_minutes(GRID_END)
        and (minutes - to_minutes(GRID_START)) % GRID_STEP_MINUTES == 0
    )


def class_duration(class_format: str) -> float:
    """Duration in hours derived from the class format name."""
    lowered = class_format.lower()
    for marker, hours in CLASS_DURATIONS:
        if marker in lowered:
            return float(hours)
    return float(DEFAULT_CLASS_DURATION)


def occupied_cells(start: str, duration: float) -> List[str]:
    """Every 15-minute cell a class spans, duration rounded up to the quarter hour."""
    start_min = to_minutes(start)
    cells = math.ceil(round(duration * 60) / GRID_STEP_MINUTES)
    return [from_minutes(start_min + i * GRID_STEP_MINUTES) for i in range(cells)]


def end_minutes(start: str, duration: float) -> int:
    return to_minutes(start) + round(duration * 60)


# --- Shifts and restrictions ---
def shift_type(value: str) -> str:
    """Return 'morning', 'evening' or 'afternoon' for a start time."""
    minutes = to_minutes(value)
    if to_minutes(MORNING_SHIFT[0]) <= minutes < to_minutes(MORNING_SHIFT[1]):
        return "morning"
    if to_minutes(EVENING_SHIFT[0]) <= minutes <= to_minutes(EVENING_SHIFT[1]):
        return "evening"
    return "afternoon"


def restricted_window(day: str) -> tuple[str, str]:
    return WEEKEND_RESTRICTED_HOURS if day in WEEKEND_DAYS else WEEKDAY_RESTRICTED_HOURS


def is_time_restricted(value: str, day: str) -> bool:
    """True when a start time falls in the midday blackout for that day."""
    start, end = restricted_window(day)
    return to_minutes(start) <= to_minutes(value) < to_minutes(end)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
