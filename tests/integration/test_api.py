from __future__ import annotations

from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

import main
from utils.constants import LOCATIONS

KWALITY = LOCATIONS[0]


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setattr(main, "API_KEY", None)
    return TestClient(main.app)


def _export_rows(history) -> List[Dict[str, Any]]:
    """Records in the column names of the class export."""
    rows = []
    for r in history:
        first, _, last = r.teacher.partition(" ")
        rows.append(
            {
                "cleanedClass": r.class_format,
                "location": r.location,
                "dayOfWeek": r.day_of_week,
                "classTime": r.time,
                "teacherFirstName": first,
                "teacherLastName": last,
                "checkedIn": r.checked_in,
                "totalRevenue": r.revenue,
            }
        )
    return rows


def _class(class_id: str, **changes) -> Dict[str, Any]:
    payload = {
        "id": class_id,
        "day": "Monday",
        "time": "07:00",
        "location": KWALITY,
        "classFormat": "Studio Barre 57",
        "teacherFirstName": "Anisha",
        "teacherLastName": "Shah",
    }
    payload.update(changes)
    return payload


def test_health_check(client) -> None:
    response = client.get("/api/health/check")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_synthesize(client, history) -> None:
    response = client.post(
        "/api/schedule/synthesize",
        json={
            "records": _export_rows(history),
            "teachers": [{"firstName": "Anisha", "lastName": "Shah", "isActive": False}],
            "options": {"optimizationType": "attendance", "targetDay": "Thursday"},
        },
    )
    assert response.status_code == 200
    body = response.json()

    assert body["schedule"]
    assert body["stats"]["totalClasses"] == len(body["schedule"])
    assert {c["day"] for c in body["schedule"]} == {"Thursday"}
    assert "Anisha Shah" not in {c["teacher"] for c in body["schedule"]}
    first = body["schedule"][0]
    assert f"{first['teacherFirstName']} {first['teacherLastName']}" == first["teacher"]
    assert {row["Teacher"] for row in body["summary"]} == {c["teacher"] for c in body["schedule"]}


def test_synthesize_rejects_bad_options(client, history) -> None:
    records = _export_rows(history[:4])
    bad_type = client.post(
        "/api/schedule/synthesize",
        json={"records": records, "options": {"optimizationType": "profit"}},
    )
    assert bad_type.status_code == 422

    bad_day = client.post(
        "/api/schedule/synthesize",
        json={"records": records, "options": {"targetDay": "Funday"}},
    )
    assert bad_day.status_code == 400


def test_negative_check_ins_are_rejected(client, history) -> None:
    records = _export_rows(history[:2])
    records[1]["checkedIn"] = -3
    response = client.post("/api/schedule/synthesize", json={"records": records})
    assert response.status_code == 400


def test_conflicting_teacher_entries_are_rejected(client, history) -> None:
    response = client.post(
        "/api/schedule/synthesize",
        json={
            "records": _export_rows(history[:2]),
            "teachers": [
                {"name": "Karan Bhatia", "isNew": True},
                {"name": "Karan Bhatia", "isActive": False},
            ],
        },
    )
    assert response.status_code == 400


def test_validate_edit(client) -> None:
    denied = client.post(
        "/api/schedule/validate-edit",
        json={"schedule": [], "proposed": _class("x", classFormat="Studio powerCycle")},
    ).json()
    assert denied["status"] == "invalid"
    assert denied["canOverride"] is False
    assert denied["violations"][0]["type"] == "format_not_allowed"

    ok = client.post(
        "/api/schedule/validate-edit",
        json={"schedule": [_class("a")], "proposed": _class("a", time="7:00 PM")},
    ).json()
    assert ok == {"status": "valid", "message": "Class can be scheduled", "canOverride": False, "violations": []}


def test_validate_edit_rejects_unknown_day(client) -> None:
    response = client.post(
        "/api/schedule/validate-edit",
        json={"proposed": _class("x", day="Someday")},
    )
    assert response.status_code == 400


def test_fill_gaps(client, history) -> None:
    body = client.post(
        "/api/schedule/fill-gaps",
        json={"records": _export_rows(history), "schedule": [_class("manual-1")]},
    ).json()

    assert body["schedule"][0]["id"] == "manual-1"
    assert body["added"]
    assert "manual-1" not in {c["id"] for c in body["added"]}
    assert len(body["schedule"]) == len(body["added"]) + 1


def test_top_classes(client, history) -> None:
    body = client.post(
        "/api/insights/top-classes",
        json={"records": _export_rows(history), "limit": 3, "teacher": "Karan Bhatia"},
    ).json()

    assert len(body["topClasses"]) == 3
    averages = [c["avgParticipants"] for c in body["topClasses"]]
    assert averages == sorted(averages, reverse=True)
    assert isinstance(body["specialties"], list)


def test_suggestions(client) -> None:
    body = client.post(
        "/api/insights/suggestions",
        json={
            "schedule": [
                _class("a"),
                _class("b", time="18:00", location=LOCATIONS[1]),
            ],
            "teachers": [{"name": "Karan Bhatia"}],
        },
    ).json()

    [suggestion] = body["suggestions"]
    assert suggestion["originalClass"]["id"] == "b"
    assert suggestion["suggestedClass"]["teacher"] == "Karan Bhatia"
    assert suggestion["priority"] == 9


def test_api_key_is_required_when_configured(monkeypatch) -> None:
    monkeypatch.setattr(main, "API_KEY", "secret")
    client = TestClient(main.app)
    payload = {"schedule": [], "proposed": _class("x")}

    assert client.get("/api/health/check").status_code == 200
    assert client.post("/api/schedule/validate-edit", json=payload).status_code == 401
    assert client.post(
        "/api/schedule/validate-edit", json=payload, headers={"x-api-key": "wrong"}
    ).status_code == 401
    assert client.post(
        "/api/schedule/validate-edit", json=payload, headers={"x-api-key": "secret"}
    ).status_code == 200
