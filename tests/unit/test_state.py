from __future__ import annotations

import pytest

from core.state import ScheduleLedger
from exceptions.custom_errors import DuplicateClassError, UnknownClassError
from utils.constants import LOCATIONS


def test_commit_updates_teacher_indices(make_class) -> None:
    ledger = ScheduleLedger()
    ledger.commit(make_class("a", time="07:00"))
    ledger.commit(make_class("b", time="18:00", class_format="Studio Recovery"))
    ledger.commit(make_class("c", day="Tuesday", time="09:00"))

    hours = ledger.teacher_ledger("Anisha Shah")
    assert hours.weekly_hours == 2.5
    assert hours.day_hours == {"Monday": 1.5, "Tuesday": 1.0}
    assert hours.day_counts == {"Monday": 2, "Tuesday": 1}
    assert hours.day_shifts == {"Monday": "mixed", "Tuesday": "morning"}
    assert hours.day_locations == {"Monday": LOCATIONS[0], "Tuesday": LOCATIONS[0]}


def test_duplicate_commit_leaves_ledger_untouched(make_class) -> None:
    ledger = ScheduleLedger([make_class("a")])

    with pytest.raises(DuplicateClassError):
        ledger.commit(make_class("a", day="Friday"))

    assert len(ledger) == 1
    assert ledger.weekly_hours("Anisha Shah") == 1.0
    assert ledger.get("a").day == "Monday"


def test_remove_and_replace_rebuild_indices(make_class) -> None:
    ledger = ScheduleLedger(
        [make_class("a", time="07:00"), make_class("b", time="09:00", teacher="Karan Bhatia")]
    )

    ledger.replace("b", make_class("b", time="09:00", teacher="Anisha Shah"))
    assert ledger.weekly_hours("Anisha Shah") == 2.0
    assert ledger.weekly_hours("Karan Bhatia") == 0.0
    assert [c.id for c in ledger] == ["a", "b"]

    removed = ledger.remove("a")
    assert removed.id == "a"
    assert "a" not in ledger
    assert ledger.weekly_hours("Anisha Shah") == 1.0


def test_replace_and_remove_errors(make_class) -> None:
    ledger = ScheduleLedger([make_class("a"), make_class("b", time="09:00")])

    with pytest.raises(UnknownClassError):
        ledger.remove("zzz")
    with pytest.raises(UnknownClassError):
        ledger.replace("zzz", make_class("zzz"))
    with pytest.raises(DuplicateClassError):
        ledger.replace("a", make_class("b"))


def test_copy_and_without_are_independent(make_class) -> None:
    ledger = ScheduleLedger([make_class("a"), make_class("b", time="09:00")])

    copied = ledger.copy()
    copied.commit(make_class("c", time="18:00"))
    reduced = ledger.without(["a"])

    assert len(ledger) == 2
    assert len(copied) == 3
    assert [c.id for c in reduced] == ["b"]
    assert ledger.weekly_hours("Anisha Shah") == 2.0


def test_next_id_is_deterministic(make_class) -> None:
    ledger = ScheduleLedger()
    assert ledger.next_id("historical") == "historical-0001"
    ledger.commit(make_class("historical-0001"))
    ledger.commit(make_class("quota-0001", time="09:00"))
    assert ledger.next_id("historical") == "historical-0002"
    assert ledger.next_id("quota") == "quota-0002"
    assert ledger.next_id("express") == "express-0001"


def test_lookups(make_class) -> None:
    ledger = ScheduleLedger(
        [
            make_class("a", time="18:00"),
            make_class("b", time="07:00"),
            make_class("c", time="07:00", teacher="Karan Bhatia"),
            make_class("d", location=LOCATIONS[1], teacher="Rohan Dahima"),
        ]
    )

    assert ledger.count_on(LOCATIONS[0], "Monday") == 3
    assert [c.id for c in ledger.starts_at(LOCATIONS[0], "Monday", "07:00")] == ["b", "c"]
    assert [c.id for c in ledger.teacher_day_classes("Anisha Shah", "Monday")] == ["b", "a"]

    ledger.clear()
    assert len(ledger) == 0
    assert ledger.teacher_hours == {}
