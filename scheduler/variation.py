from dataclasses import dataclass
from typing import List, Sequence, TypeVar

from core.recommender import Recommendation
from utils.constants import PRIORITY_CLASS_FORMATS, VARIATION_BUCKETS

T = TypeVar("T")

BUCKET_NONE = 0
BUCKET_ALTERNATE_TEACHER = 1
BUCKET_REVERSE_SLOTS = 2
BUCKET_PRIORITY_FORMATS = 3
BUCKET_ROTATE_LOCATIONS = 4


@dataclass(frozen=True)
class VariationStrategy:
    """
    Deterministic perturbation of the sweep order, chosen by iteration % 5.

    Only orderings change; every candidate still goes through the full rule
    chain. Iteration 0 (and every multiple of 5) leaves the sweep untouched.
    """

    iteration: int = 0

    @property
    def bucket(self) -> int:
        return self.iteration % VARIATION_BUCKETS

    @property
    def offset(self) -> int:
        # grows every full cycle so iteration 1 and 6 do not collapse onto one schedule
        return 1 + self.iteration // VARIATION_BUCKETS

    def order_locations(self, locations: Sequence[T]) -> List[T]:
        items = list(locations)
        if self.bucket != BUCKET_ROTATE_LOCATIONS or not items:
            return items
        k = self.offset % len(items)
        return items[k:] + items[:k]

    def order_slots(self, times: Sequence[T]) -> List[T]:
        items = list(times)
        if self.bucket == BUCKET_REVERSE_SLOTS:
            items.reverse()
        return items

    def order_candidates(self, candidates: Sequence[Recommendation]) -> List[Recommendation]:
        items = list(candidates)
        if not items:
            return items
        if self.bucket == BUCKET_PRIORITY_FORMATS:
            items.sort(key=lambda r: r.class_format not in PRIORITY_CLASS_FORMATS)
        elif self.bucket == BUCKET_ALTERNATE_TEACHER:
            k = self.offset % len(items)
            items = items[k:] + items[:k]
        return items
