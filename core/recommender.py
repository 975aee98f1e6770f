from dataclasses import dataclass
from typing import Callable, List, Optional

from core.history import HistoricalPerformanceIndex, PairStats
from utils.constants import MIN_FILL_CHECKED_IN, TOP_PERFORMER_THRESHOLD


@dataclass(frozen=True)
class Recommendation:
    class_format: str
    teacher: str
    avg_checked_in: float
    avg_revenue: float = 0.0

    @property
    def is_top_performer(self) -> bool:
        return self.avg_checked_in >= TOP_PERFORMER_THRESHOLD

    @classmethod
    def from_pair(cls, pair: PairStats) -> "Recommendation":
        return cls(pair.class_format, pair.teacher, pair.avg_checked_in, pair.avg_revenue)


class SlotRecommender:
    """
    Picks the best historical (format, teacher) pair for a slot.

    Pairs are scored by mean check-ins, or by mean revenue for revenue
    optimisation. The ledger is never consulted; callers validate the result.
    """

    def __init__(self, index: HistoricalPerformanceIndex, optimization_type: str = "balanced"):
        self.index = index
        self.optimization_type = optimization_type

    def _score(self, pair: PairStats) -> float:
        if self.optimization_type == "revenue":
            return pair.avg_revenue
        return pair.avg_checked_in

    def rank(
        self,
        pairs: List[PairStats],
        threshold: float = MIN_FILL_CHECKED_IN,
        format_filter: Optional[Callable[[str], bool]] = None,
    ) -> List[Recommendation]:
        """Viable pairs best first; the stable sort keeps first-seen order on ties."""
        viable = [
            p for p in pairs
            if p.avg_checked_in >= threshold
            and (format_filter is None or format_filter(p.class_format))
        ]
        viable.sort(key=self._score, reverse=True)
        return [Recommendation.from_pair(p) for p in viable]

    def candidates(
        self,
        location: str,
        day: str,
        time: str,
        threshold: float = MIN_FILL_CHECKED_IN,
        format_filter: Optional[Callable[[str], bool]] = None,
    ) -> List[Recommendation]:
        return self.rank(self.index.pairs_at(location, day, time), threshold, format_filter)

    def recommend(
        self,
        location: str,
        day: str,
        time: str,
        threshold: float = MIN_FILL_CHECKED_IN,
        format_filter: Optional[Callable[[str], bool]] = None,
    ) -> Optional[Recommendation]:
        ranked = self.candidates(location, day, time, threshold, format_filter)
        return ranked[0] if ranked else None

    def day_candidates(
        self,
        location: str,
        day: str,
        threshold: float = MIN_FILL_CHECKED_IN,
        format_filter: Optional[Callable[[str], bool]] = None,
    ) -> List[Recommendation]:
        """Ranked pairs over the whole day, independent of start time."""
        return self.rank(self.index.pairs_for_day(location, day), threshold, format_filter)
