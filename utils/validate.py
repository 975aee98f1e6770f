from typing import List
from exceptions.custom_errors import InvalidRecordError
from utils.constants import DAYS_OF_WEEK
from utils.shift_utils import normalise_time


def validate_records(records: List) -> None:
    """
    Reject historical records whose numbers cannot be real class results.

    Rows with unusable times or blank teachers are not an error here; the
    performance index drops them.

    Raises:
        InvalidRecordError: If a record has a negative check-in count or revenue.
    """
    bad = [
        f"#{i} ({r.classFormat} @ {r.location})"
        for i, r in enumerate(records)
        if r.checkedIn < 0 or r.revenue < 0
    ]
    if bad:
        raise InvalidRecordError(
            f"⚠️ Negative check-ins or revenue in records: {', '.join(bad[:10])}"
            + (f" and {len(bad) - 10} more" if len(bad) > 10 else "")
        )


def validate_class_slot(class_id: str, day: str, time: str) -> str:
    """
    Check the day and time of a scheduled class and return the normalised 'HH:MM' time.

    Raises:
        InvalidRecordError: If the day is not a weekday name or the time cannot be parsed.
    """
    if day not in DAYS_OF_WEEK:
        raise InvalidRecordError(f"Class {class_id}: unknown day {day!r}")
    normalised = normalise_time(time)
    if normalised is None:
        raise InvalidRecordError(f"Class {class_id}: unparseable time {time!r}")
    return normalised
