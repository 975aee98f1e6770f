from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional, Tuple, Union
import logging

import pandas as pd

from core.models import PerformanceRecord, TrainerRoster
from utils.constants import (
    DAYS_OF_WEEK,
    HOSTED_MARKER,
    QUALIFIER_SEPARATOR,
    TOP_PERFORMER_THRESHOLD,
)
from utils.shift_utils import is_on_grid, normalise_time, to_minutes

logger = logging.getLogger(__name__)

RECORD_COLUMNS = [f.name for f in fields(PerformanceRecord)]
SLOT_KEYS = ["location", "day_of_week", "time"]


@dataclass(frozen=True)
class SlotStats:
    avg_checked_in: float
    avg_revenue: float
    sample_count: int

    @classmethod
    def empty(cls) -> "SlotStats":
        return cls(0.0, 0.0, 0)


@dataclass(frozen=True)
class PairStats:
    """Aggregated history of one (format, teacher) pair."""

    class_format: str
    teacher: str
    avg_checked_in: float
    avg_revenue: float
    sample_count: int

    @property
    def is_top_performer(self) -> bool:
        return self.avg_checked_in >= TOP_PERFORMER_THRESHOLD


def records_to_frame(records: Union[pd.DataFrame, Iterable[PerformanceRecord]]) -> pd.DataFrame:
    """Turn records (or an already tabular input) into a frame with the record columns."""
    if isinstance(records, pd.DataFrame):
        missing = [c for c in RECORD_COLUMNS if c not in records.columns and c != "revenue"]
        if missing:
            raise KeyError(f"Historical records are missing columns: {missing}")
        frame = records.copy()
        if "revenue" not in frame.columns:
            frame["revenue"] = 0.0
        return frame[RECORD_COLUMNS]
    rows = [
        {name: getattr(record, name) for name in RECORD_COLUMNS}
        for record in records
    ]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


class HistoricalPerformanceIndex:
    """
    Read-only aggregation of historical class performance.

    Rows are grouped by (format, location, day, time) and by the same key plus
    teacher. Grouping keeps first-seen order so every lookup that returns several
    pairs is deterministic for a given input order.
    """

    def __init__(
        self,
        records: Union[pd.DataFrame, Iterable[PerformanceRecord]],
        roster: Optional[TrainerRoster] = None,
    ):
        self.roster = roster or TrainerRoster()
        raw = records_to_frame(records)
        self.frame = self._clean(raw)
        self.dropped = len(raw) - len(self.frame)
        if self.dropped:
            logger.debug(f"Dropped {self.dropped} unusable historical rows")

        self._slot: Dict[Tuple[str, str, str, str], SlotStats] = {}
        self._teacher_slot: Dict[Tuple[str, str, str, str, str], SlotStats] = {}
        self._pairs_at: Dict[Tuple[str, str, str], List[PairStats]] = {}
        self._pairs_for_day: Dict[Tuple[str, str], List[PairStats]] = {}
        self._times: Dict[Tuple[str, str], List[str]] = {}
        self._build()

    # === Cleaning ===
    def _clean(self, frame: pd.DataFrame) -> pd.DataFrame:
        df = frame.copy()
        if df.empty:
            return df.reset_index(drop=True)
        df["class_format"] = df["class_format"].fillna("").astype(str).str.strip()
        df["teacher"] = df["teacher"].fillna("").astype(str).str.strip()
        df["location"] = df["location"].fillna("").astype(str).str.strip()
        df["day_of_week"] = df["day_of_week"].fillna("").astype(str).str.strip()
        df["time"] = df["time"].map(normalise_time)
        df["checked_in"] = pd.to_numeric(df["checked_in"], errors="coerce")
        df["revenue"] = pd.to_numeric(df["revenue"], errors="coerce").fillna(0.0)

        lowered = df["class_format"].str.lower()
        on_grid = df["time"].map(lambda t: t is not None and is_on_grid(t)).astype(bool)
        keep = (
            (df["class_format"] != "")
            & ~lowered.str.contains(HOSTED_MARKER, regex=False).astype(bool)
            & ~df["class_format"].str.contains(QUALIFIER_SEPARATOR, regex=False).astype(bool)
            & (df["teacher"] != "")
            & ~df["teacher"].isin(list(self.roster.inactive_teachers()))
            & df["day_of_week"].isin(DAYS_OF_WEEK)
            & on_grid
            & df["checked_in"].notna()
        )
        return df[keep].reset_index(drop=True)

    # === Aggregation ===
    def _build(self):
        if self.frame.empty:
            return

        teacher_keys = SLOT_KEYS + ["class_format", "teacher"]
        by_teacher = (
            self.frame.groupby(teacher_keys, sort=False)
            .agg(
                avg_checked_in=("checked_in", "mean"),
                avg_revenue=("revenue", "mean"),
                sample_count=("checked_in", "size"),
            )
            .reset_index()
        )
        for row in by_teacher.itertuples(index=False):
            stats = PairStats(
                class_format=row.class_format,
                teacher=row.teacher,
                avg_checked_in=round(float(row.avg_checked_in), 1),
                avg_revenue=round(float(row.avg_revenue), 1),
                sample_count=int(row.sample_count),
            )
            slot = (row.location, row.day_of_week, row.time)
            self._pairs_at.setdefault(slot, []).append(stats)
            self._teacher_slot[(row.class_format, *slot, row.teacher)] = SlotStats(
                stats.avg_checked_in, stats.avg_revenue, stats.sample_count
            )

        by_slot = (
            self.frame.groupby(["class_format"] + SLOT_KEYS, sort=False)
            .agg(
                avg_checked_in=("checked_in", "mean"),
                avg_revenue=("revenue", "mean"),
                sample_count=("checked_in", "size"),
            )
            .reset_index()
        )
        for row in by_slot.itertuples(index=False):
            self._slot[(row.class_format, row.location, row.day_of_week, row.time)] = SlotStats(
                round(float(row.avg_checked_in), 1),
                round(float(row.avg_revenue), 1),
                int(row.sample_count),
            )

        by_day = (
            self.frame.groupby(["location", "day_of_week", "class_format", "teacher"], sort=False)
            .agg(
                avg_checked_in=("checked_in", "mean"),
                avg_revenue=("revenue", "mean"),
                sample_count=("checked_in", "size"),
            )
            .reset_index()
        )
        for row in by_day.itertuples(index=False):
            self._pairs_for_day.setdefault((row.location, row.day_of_week), []).append(
                PairStats(
                    class_format=row.class_format,
                    teacher=row.teacher,
                    avg_checked_in=round(float(row.avg_checked_in), 1),
                    avg_revenue=round(float(row.avg_revenue), 1),
                    sample_count=int(row.sample_count),
                )
            )

        for (location, day), group in self.frame.groupby(["location", "day_of_week"], sort=False):
            self._times[(location, day)] = sorted(group["time"].unique(), key=to_minutes)

    # === Lookups ===
    def slot_stats(self, class_format: str, location: str, day: str, time: str) -> SlotStats:
        return self._slot.get((class_format, location, day, time), SlotStats.empty())

    def teacher_slot_stats(
        self, class_format: str, location: str, day: str, time: str, teacher: str
    ) -> SlotStats:
        return self._teacher_slot.get(
            (class_format, location, day, time, teacher), SlotStats.empty()
        )

    def pairs_at(self, location: str, day: str, time: str) -> List[PairStats]:
        return list(self._pairs_at.get((location, day, time), []))

    def pairs_for_day(self, location: str, day: str) -> List[PairStats]:
        return list(self._pairs_for_day.get((location, day), []))

    def times_for(self, location: str, day: str) -> List[str]:
        return list(self._times.get((location, day), []))

    def teachers(self) -> List[str]:
        return list(self.frame["teacher"].unique()) if not self.frame.empty else []

    def __len__(self) -> int:
        return len(self.frame)
