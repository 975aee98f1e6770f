from typing import Any, Dict, List, Optional
import logging

import numpy as np
import pandas as pd

from core.hard_rules import studio_capacity
from core.models import ScheduledClass, TrainerRoster
from core.state import ScheduleLedger
from scheduler.setup import SynthesisState
from utils.constants import DAYS_OF_WEEK, LOCATIONS, MAX_WEEKLY_HOURS
from utils.shift_utils import grid_times, to_minutes

logger = logging.getLogger(__name__)

SCHEDULE_COLUMNS = [
    "id", "day", "time", "location", "classFormat", "teacher", "duration",
    "participants", "revenue", "isTopPerformer", "source",
]


def _location_rank(location: str) -> int:
    return LOCATIONS.index(location) if location in LOCATIONS else len(LOCATIONS)


def sort_classes(classes: List[ScheduledClass]) -> List[ScheduledClass]:
    """Order classes by location, weekday and start time."""
    return sorted(
        classes,
        key=lambda c: (
            _location_rank(c.location),
            DAYS_OF_WEEK.index(c.day) if c.day in DAYS_OF_WEEK else len(DAYS_OF_WEEK),
            to_minutes(c.time),
        ),
    )


def occupancy_grid(ledger: ScheduleLedger, location: str, day: str) -> np.ndarray:
    """Number of classes running in each 15-minute grid cell of one location and day."""
    cells = grid_times()
    position = {t: i for i, t in enumerate(cells)}
    grid = np.zeros(len(cells), dtype=int)
    for cls in ledger.classes_at(location, day):
        idx = [position[c] for c in cls.cells if c in position]
        grid[idx] += 1
    return grid


def extract_schedule_and_summary(
    ledger: ScheduleLedger,
    roster: Optional[TrainerRoster] = None,
    standard_cap: float = MAX_WEEKLY_HOURS,
):
    """
    Flatten a ledger into a schedule frame (one row per class) and a summary
    frame (one row per teacher with hours, cap, days and shifts).
    """
    roster = roster or TrainerRoster()
    classes = sort_classes(ledger.classes)
    schedule_df = pd.DataFrame(
        [
            {
                "id": c.id,
                "day": c.day,
                "time": c.time,
                "location": c.location,
                "classFormat": c.class_format,
                "teacher": c.teacher,
                "duration": c.duration,
                "participants": c.participants,
                "revenue": c.revenue,
                "isTopPerformer": c.is_top_performer,
                "source": c.source,
            }
            for c in classes
        ],
        columns=SCHEDULE_COLUMNS,
    )

    summary = []
    for teacher in sorted(ledger.teacher_hours):
        hours = ledger.teacher_hours[teacher]
        shifts = list(hours.day_shifts.values())
        summary.append(
            {
                "Teacher": teacher,
                "Classification": roster.classification(teacher).value,
                "Weekly Hours": hours.weekly_hours,
                "Cap": roster.weekly_cap(teacher, standard_cap),
                "Classes": sum(hours.day_counts.values()),
                "Days": len(hours.day_counts),
                "Locations": len(set(hours.day_locations.values())),
                "Mixed Shift Days": shifts.count("mixed"),
            }
        )
    summary_df = pd.DataFrame(
        summary,
        columns=["Teacher", "Classification", "Weekly Hours", "Cap", "Classes", "Days", "Locations", "Mixed Shift Days"],
    )
    return schedule_df, summary_df


def fill_statistics(state: SynthesisState) -> Dict[str, Any]:
    """Per-phase counters plus per-location class counts and room utilisation."""
    rejections: Dict[str, int] = {}
    for phase in state.stats.values():
        for ctype, n in phase.rejections.items():
            rejections[ctype] = rejections.get(ctype, 0) + n

    locations = {}
    for location in LOCATIONS:
        grids = [occupancy_grid(state.ledger, location, day) for day in state.options.days]
        stacked = np.vstack(grids) if grids else np.zeros((0, len(grid_times())), dtype=int)
        capacity = studio_capacity(location)
        locations[location] = {
            "classes": sum(state.ledger.count_on(location, day) for day in state.options.days),
            "peakOccupancy": int(stacked.max()) if stacked.size else 0,
            "utilisation": round(float(stacked.mean()) / capacity, 3) if stacked.size else 0.0,
        }

    return {
        "totalClasses": len(state.ledger),
        "phases": {name: phase.as_dict() for name, phase in state.stats.items()},
        "rejectionsByConstraint": rejections,
        "locations": locations,
    }
