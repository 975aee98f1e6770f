from __future__ import annotations

import pytest

from core.models import (
    RosterEntry,
    ScheduledClass,
    SynthesisOptions,
    TrainerClassification,
    TrainerRoster,
)
from exceptions.custom_errors import InputMismatchError, InvalidOptionsError
from scheduler.setup import resolve_options


def test_roster_merges_discovered_and_custom_entries() -> None:
    roster = TrainerRoster.build(
        discovered=["Anisha Shah", " Karan Bhatia ", ""],
        custom=[RosterEntry("Karan Bhatia", TrainerClassification.NEW_TRAINER)],
    )

    assert roster.active_teachers() == ["Anisha Shah", "Karan Bhatia"]
    assert roster.is_new_trainer("Karan Bhatia")
    assert roster.classification("Somebody Else") == TrainerClassification.STANDARD
    assert roster.weekly_cap("Anisha Shah", 12) == 12.0


def test_conflicting_custom_entries_are_rejected() -> None:
    with pytest.raises(InputMismatchError):
        TrainerRoster.build(
            custom=[
                RosterEntry("Anisha Shah", TrainerClassification.NEW_TRAINER),
                RosterEntry("Anisha Shah", TrainerClassification.INACTIVE),
            ]
        )


def test_inactive_teachers_are_listed_separately() -> None:
    roster = TrainerRoster.build(
        discovered=["Anisha Shah"],
        custom=[RosterEntry("Gone Teacher", TrainerClassification.INACTIVE)],
    )
    assert roster.inactive_teachers() == {"Gone Teacher"}
    assert "Gone Teacher" not in roster.active_teachers()


def test_scheduled_class_derives_duration_and_names() -> None:
    cls = ScheduledClass.from_history(
        "historical-0001", "Monday", "07:00", "Kenkere House",
        "Studio Barre 57 (Express)", "Richard D'Costa", 6.45, 5123.4,
    )

    assert cls.duration == 0.75
    assert cls.cells == ["07:00", "07:15", "07:30"]
    assert cls.participants == 6
    assert cls.revenue == 5123.4
    assert cls.is_top_performer
    assert (cls.teacher_first_name, cls.teacher_last_name) == ("Richard", "D'Costa")
    assert cls.copy(teacher="Anisha Shah").duration == 0.75


@pytest.mark.parametrize(
    "kwargs",
    [
        {"optimization_type": "profit"},
        {"iteration": -1},
        {"target_day": "Funday"},
        {"target_teacher_hours": 0},
    ],
)
def test_invalid_options(kwargs) -> None:
    with pytest.raises(InvalidOptionsError):
        SynthesisOptions(**kwargs)


def test_options_defaults_and_caps() -> None:
    opts = SynthesisOptions()
    assert opts.optimization_type == "balanced"
    assert opts.standard_weekly_cap == 15.0
    assert len(opts.days) == 7

    assert SynthesisOptions(target_teacher_hours=12).standard_weekly_cap == 12.0
    assert SynthesisOptions(target_teacher_hours=12, optimize_teacher_hours=False).standard_weekly_cap == 15.0
    assert SynthesisOptions(target_day="Friday").days == ["Friday"]


def test_resolve_options_accepts_camel_case() -> None:
    opts = resolve_options({"balanceShifts": False, "iteration": 3, "targetDay": None, "optimization_type": "revenue"})
    assert not opts.balance_shifts
    assert opts.iteration == 3
    assert opts.target_day is None
    assert opts.optimization_type == "revenue"

    with pytest.raises(InvalidOptionsError):
        resolve_options({"shuffle": True})
