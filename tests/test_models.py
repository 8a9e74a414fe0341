from __future__ import annotations

import datetime as dt

import pytest

from core.exceptions import ValidationError
from core.models import Task, build_payload, default_form, form_from_task, normalize_priority


def test_from_record_parses_store_row() -> None:
    task = Task.from_record({
        "id": 7,
        "task_name": "Ship",
        "assignee": "",
        "due_date": "2026-11-02T00:00:00+00:00",
        "priority": "中",
        "progress": "40",
        "past_delay_days": None,
        "dependencies": "なし",
        "risk_factors": None,
        "created_at": "2026-01-01",
        "riskScore": 99,
    })
    assert task.id == 7
    assert task.assignee is None
    assert task.due_date == dt.date(2026, 11, 2)
    assert task.progress == 40
    assert task.past_delay_days is None
    assert not task.has_dependencies
    assert task.extra == {"created_at": "2026-01-01", "riskScore": 99}


def test_from_record_tolerates_bad_date() -> None:
    assert Task.from_record({"id": 1, "task_name": "x", "due_date": "soon"}).due_date is None


def test_payload_never_carries_id_or_score() -> None:
    task = Task.from_record({"id": 1, "task_name": "x", "riskScore": 50})
    payload = task.to_payload()
    assert "id" not in payload
    assert "riskScore" not in payload


def test_build_payload_normalizes_form() -> None:
    payload = build_payload({
        "task_name": "  Migrate DB ",
        "assignee": " ",
        "due_date": "2026-12-01",
        "priority": "high",
        "progress": "150",
        "past_delay_days": "-4",
        "dependencies": "",
        "risk_factors": "",
    })
    assert payload == {
        "task_name": "Migrate DB",
        "assignee": None,
        "due_date": "2026-12-01",
        "priority": "high",
        "progress": 100,
        "past_delay_days": 0,
        "dependencies": "none",
        "risk_factors": None,
    }


def test_build_payload_parses_ints_leniently() -> None:
    payload = build_payload({**default_form(), "task_name": "x", "progress": "abc", "past_delay_days": ""})
    assert payload["progress"] == 0
    assert payload["past_delay_days"] == 0
    assert payload["due_date"] is None


def test_build_payload_rejects_missing_name_and_bad_date() -> None:
    with pytest.raises(ValidationError):
        build_payload(default_form())
    with pytest.raises(ValidationError):
        build_payload({**default_form(), "task_name": "x", "due_date": "31/12/2026"})


def test_form_from_task_fills_defaults() -> None:
    form = form_from_task(Task(id=1, task_name="x", dependencies=None))
    assert form["priority"] == "medium"
    assert form["progress"] == 0
    assert form["dependencies"] == "none"
    assert form["due_date"] == ""


def test_normalize_priority() -> None:
    assert normalize_priority("High") == "high"
    assert normalize_priority("低") == "low"
    assert normalize_priority("urgent") is None
    assert normalize_priority(None) is None


def test_fractional_store_numbers_are_kept() -> None:
    assert Task.from_record({"id": 1, "task_name": "x", "progress": 50.7}).progress == 50.7
    assert Task.from_record({"id": 1, "task_name": "x", "progress": "50.5"}).progress == 50.5
    assert Task.from_record({"id": 1, "task_name": "x", "progress": 40.0}).progress == 40
    assert Task.from_record({"id": 1, "task_name": "x", "progress": "nan"}).progress is None


def test_form_numbers_keep_whole_part() -> None:
    payload = build_payload({**default_form(), "task_name": "x", "progress": "50.7", "past_delay_days": "inf"})
    assert payload["progress"] == 50
    assert payload["past_delay_days"] == 0
