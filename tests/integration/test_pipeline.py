from __future__ import annotations

from core.models import RosterEntry, TrainerClassification
from core.recommender import Recommendation
from core.state import ScheduleLedger
from scheduler import fill_gaps, run_synthesis, synthesize
from scheduler.setup import prefer_working_teachers
from utils.constants import (
    DAYS_OF_WEEK,
    LOCATIONS,
    NEW_TRAINER_FORMATS,
    RECOVERY_BLOCKED_DAYS,
    SUNDAY_CLASS_LIMITS,
)

KWALITY = LOCATIONS[0]


def _signature(classes):
    return [(c.id, c.day, c.time, c.location, c.class_format, c.teacher) for c in classes]


def test_same_input_gives_same_schedule(history) -> None:
    first = synthesize(history)
    second = synthesize(list(history))

    assert first
    assert _signature(first) == _signature(second)


def test_target_day_limits_the_run(history) -> None:
    classes = synthesize(history, options={"targetDay": "Friday"})
    assert classes
    assert {c.day for c in classes} == {"Friday"}


def test_recovery_is_never_scheduled_early_in_the_week(history) -> None:
    classes = synthesize(history)
    assert not [
        c for c in classes
        if c.day in RECOVERY_BLOCKED_DAYS and "recovery" in c.class_format.lower()
    ]


def test_sunday_class_limits(history) -> None:
    classes = synthesize(history)
    for location in LOCATIONS:
        sunday = [c for c in classes if c.location == location and c.day == "Sunday"]
        assert len(sunday) <= SUNDAY_CLASS_LIMITS[location]


def test_balance_shifts_off_skips_the_barre_quota(history) -> None:
    result = run_synthesis(history, options={"balanceShifts": False})
    assert "quota" not in result.stats["phases"]
    assert not [c for c in result.classes if c.source == "quota"]


def test_roster_classifications_are_honoured(history) -> None:
    roster = [
        RosterEntry("Anisha Shah", TrainerClassification.INACTIVE),
        RosterEntry("Vivaran Dhasmana", TrainerClassification.NEW_TRAINER),
    ]
    result = run_synthesis(history, roster)

    assert not [c for c in result.classes if c.teacher == "Anisha Shah"]
    new_trainer = [c for c in result.classes if c.teacher == "Vivaran Dhasmana"]
    assert all(c.class_format in NEW_TRAINER_FORMATS for c in new_trainer)
    assert sum(c.duration for c in new_trainer) <= 10

    summary = result.summary.set_index("Teacher")
    if "Vivaran Dhasmana" in summary.index:
        assert summary.loc["Vivaran Dhasmana", "Classification"] == "new_trainer"
        assert summary.loc["Vivaran Dhasmana", "Cap"] == 10.0


def test_target_teacher_hours_caps_everyone(history) -> None:
    result = run_synthesis(history, options={"targetTeacherHours": 5})
    hours = {}
    for c in result.classes:
        hours[c.teacher] = hours.get(c.teacher, 0.0) + c.duration
    assert max(hours.values()) <= 5


def test_statistics_add_up(history) -> None:
    result = run_synthesis(history)
    stats = result.stats

    assert stats["totalClasses"] == len(result.classes) == len(result.schedule)
    assert sum(p["filled"] for p in stats["phases"].values()) == stats["totalClasses"]
    assert sum(loc["classes"] for loc in stats["locations"].values()) == stats["totalClasses"]
    assert list(stats["phases"]) == ["historical", "quota", "express"]
    for phase in stats["phases"].values():
        assert phase["considered"] >= phase["filled"] + phase["rejected"]
        assert sum(phase["rejections"].values()) >= phase["rejected"]


def test_schedule_frame_is_sorted(history) -> None:
    result = run_synthesis(history)
    frame = result.schedule
    keys = list(
        zip(
            frame["location"].map(LOCATIONS.index),
            frame["day"].map(DAYS_OF_WEEK.index),
            frame["time"],
        )
    )
    assert keys == sorted(keys)


def test_iterations_produce_different_schedules(history) -> None:
    signatures = {
        tuple(_signature(synthesize(history, options={"iteration": i}))) for i in range(5)
    }
    assert len(signatures) > 1
    # iteration 5 falls back to the unperturbed sweep
    assert _signature(synthesize(history, options={"iteration": 5})) == _signature(synthesize(history))


def test_slot_without_history_stays_empty(make_record) -> None:
    classes = synthesize([make_record(time="07:00", checked_in=5)])

    assert [(c.location, c.day, c.time) for c in classes] == [(KWALITY, "Monday", "07:00")]
    assert classes[0].participants == 5


def test_empty_history_gives_empty_schedule() -> None:
    result = run_synthesis([])
    assert result.classes == []
    assert result.stats["totalClasses"] == 0
    assert result.summary.empty


def test_top_classes_are_preserved(make_record, make_class) -> None:
    current = [
        make_class("keep", day="Tuesday", time="18:00", class_format="Studio FIT",
                   teacher="Karan Bhatia", is_top_performer=True),
        make_class("drop", day="Tuesday", time="09:00", teacher="Rohan Dahima"),
    ]
    result = run_synthesis(
        [make_record(checked_in=6)], options={"preserveTopClasses": True}, current_schedule=current
    )

    ids = {c.id: c for c in result.classes}
    assert ids["keep"].source == "preserved"
    assert "drop" not in ids
    assert result.stats["phases"]["preserve"]["filled"] == 1
    assert current[0].source == "manual"


def test_fill_gaps_leaves_input_untouched(history, make_class) -> None:
    existing = [make_class("manual-1", time="07:00")]
    filled = fill_gaps(history, existing)

    assert len(existing) == 1
    assert existing[0].source == "manual"
    assert filled[0].id == "manual-1"
    assert len(filled) > 1
    assert {c.source for c in filled[1:]} <= {"gap-filler", "balance"}


def test_fill_gaps_tops_up_barre(make_record) -> None:
    filled = fill_gaps([make_record(time="18:00", checked_in=6)], [])

    assert [(c.time, c.source) for c in filled] == [("18:00", "gap-filler"), ("07:00", "balance")]
    assert all(c.class_format == "Studio Barre 57" for c in filled)


def test_barre_quota_skips_slots_already_started(make_record) -> None:
    records = [
        make_record("Studio Mat 57", day="Thursday", teacher="Anisha Shah", checked_in=7),
        make_record("Studio Barre 57", day="Thursday", teacher="Karan Bhatia", checked_in=5),
    ]
    result = run_synthesis(records, options={"targetDay": "Thursday"})

    assert [(c.time, c.class_format, c.source) for c in result.classes] == [
        ("07:00", "Studio Mat 57", "historical")
    ]
    assert result.stats["phases"]["quota"]["filled"] == 0


def test_barre_quota_tops_up_a_shift_to_two(make_record) -> None:
    records = []
    for time, teacher in (("07:00", "Karan Bhatia"), ("08:00", "Pranjali Jain"), ("09:00", "Reshma Sharma")):
        # powerCycle is not allowed at this studio, so the historical pick is rejected
        records.append(make_record("Studio powerCycle", time=time, teacher="Rohan Dahima", checked_in=8))
        records.append(make_record("Studio Barre 57", time=time, teacher=teacher, checked_in=5))

    result = run_synthesis(records, options={"targetDay": "Monday"})

    assert [(c.time, c.teacher, c.source) for c in result.classes] == [
        ("07:00", "Karan Bhatia", "quota"),
        ("08:00", "Pranjali Jain", "quota"),
    ]
    assert result.stats["phases"]["historical"]["rejected"] == 3
    assert result.stats["phases"]["quota"]["filled"] == 2


def test_express_fills_commuter_slots_from_four_check_ins(make_record) -> None:
    supreme = LOCATIONS[1]
    records = [
        # HIIT is not allowed at this studio
        make_record("Studio HIIT", location=supreme, time="07:30", teacher="Rohan Dahima", checked_in=8),
        make_record("Studio powerCycle (Express)", location=supreme, time="07:30",
                    teacher="Karan Bhatia", checked_in=4.0),
        make_record("Studio HIIT", location=supreme, time="08:30", teacher="Rohan Dahima", checked_in=8),
        make_record("Studio powerCycle (Express)", location=supreme, time="08:30",
                    teacher="Pranjali Jain", checked_in=3.9),
    ]
    result = run_synthesis(records, options={"targetDay": "Monday"})

    assert [(c.time, c.teacher, c.source, c.duration) for c in result.classes] == [
        ("07:30", "Karan Bhatia", "express", 0.75)
    ]
    express = result.stats["phases"]["express"]
    assert express["filled"] == 1
    assert express["noCandidate"] >= 1


def test_minimize_trainers_prefers_teachers_already_in_the_shift(make_record) -> None:
    records = [
        make_record("Studio powerCycle", time="07:00", teacher="Rohan Dahima", checked_in=8),
        make_record("Studio Barre 57", time="07:00", teacher="Karan Bhatia", checked_in=5),
        make_record("Studio powerCycle", time="08:00", teacher="Rohan Dahima", checked_in=8),
        make_record("Studio Barre 57", time="08:00", teacher="Anisha Shah", checked_in=6),
        make_record("Studio Barre 57", time="08:00", teacher="Karan Bhatia", checked_in=5),
    ]

    fewer = synthesize(records, options={"targetDay": "Monday"})
    spread = synthesize(records, options={"targetDay": "Monday", "minimizeTrainersPerShift": False})

    assert [(c.time, c.teacher) for c in fewer] == [("07:00", "Karan Bhatia"), ("08:00", "Karan Bhatia")]
    assert [(c.time, c.teacher) for c in spread] == [("07:00", "Karan Bhatia"), ("08:00", "Anisha Shah")]


def test_prefer_working_teachers_only_looks_at_the_same_shift(make_class) -> None:
    ledger = ScheduleLedger([make_class("a", time="07:00", teacher="Karan Bhatia")])
    candidates = [
        Recommendation("Studio Barre 57", "Anisha Shah", 6.0),
        Recommendation("Studio Barre 57", "Karan Bhatia", 5.0),
    ]

    morning = prefer_working_teachers(candidates, ledger, KWALITY, "Monday", "09:00")
    evening = prefer_working_teachers(candidates, ledger, KWALITY, "Monday", "18:00")
    other_day = prefer_working_teachers(candidates, ledger, KWALITY, "Tuesday", "09:00")

    assert [r.teacher for r in morning] == ["Karan Bhatia", "Anisha Shah"]
    assert evening == candidates
    assert other_day == candidates


def test_top_performer_slots_are_filled_first(make_record) -> None:
    records = [
        make_record("Studio Mat 57", time="07:00", teacher="Anisha Shah", checked_in=4),
        make_record("Studio FIT", time="18:00", teacher="Karan Bhatia", checked_in=7),
    ]
    options = {"targetDay": "Monday", "balanceShifts": False}

    ranked = synthesize(records, options=options)
    in_time_order = synthesize(records, options={**options, "prioritizeTopPerformers": False})

    assert {c.time: c.id for c in ranked} == {"18:00": "historical-0001", "07:00": "historical-0002"}
    assert {c.time: c.id for c in in_time_order} == {"07:00": "historical-0001", "18:00": "historical-0002"}


def test_preserved_slots_are_not_counted_by_the_historical_fill(make_record, make_class) -> None:
    current = [make_class("keep", day="Tuesday", time="18:00", class_format="Studio FIT",
                          teacher="Karan Bhatia", is_top_performer=True)]
    records = [make_record("Studio FIT", day="Tuesday", time="18:00", teacher="Karan Bhatia", checked_in=2)]

    result = run_synthesis(
        records,
        options={"targetDay": "Tuesday", "preserveTopClasses": True},
        current_schedule=current,
    )

    historical = result.stats["phases"]["historical"]
    assert [c.id for c in result.classes] == ["keep"]
    assert historical["considered"] == 0
    assert historical["noCandidate"] == 0


def test_class_mix_adds_variety_when_one_format_dominates(make_record, make_class) -> None:
    existing = [
        make_class(f"barre-{i}", day="Thursday", time=time, class_format="Studio Barre 57", teacher=teacher)
        for i, (time, teacher) in enumerate(
            [("07:00", "Rohan Dahima"), ("09:00", "Atulan Purohit"),
             ("18:00", "Cauveri Vikrant"), ("19:30", "Richard D'Costa")]
        )
    ]
    # history outside the gap-fill windows so only the class mix pass can use it
    records = [
        make_record("Studio Mat 57", day="Thursday", time="14:00", teacher="Reshma Sharma", checked_in=5),
        make_record("Studio FIT", day="Thursday", time="14:00", teacher="Karan Bhatia", checked_in=5),
        make_record("Studio Cardio Barre", day="Thursday", time="14:00", teacher="Pranjali Jain", checked_in=5),
    ]

    filled = fill_gaps(records, existing)
    added = filled[len(existing):]

    assert sorted(c.class_format for c in added) == ["Studio FIT", "Studio Mat 57"]
    assert {c.source for c in added} == {"balance"}
    assert all(c.day == "Thursday" and c.location == KWALITY for c in added)
