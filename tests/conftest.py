from __future__ import annotations

import datetime as dt

import pytest

from controller.app_controller import DashboardController
from core.config import Capabilities

from .fakes import FakeStore

# midnight UTC keeps whole-day deadline arithmetic exact
NOW = dt.datetime(2026, 10, 17, tzinfo=dt.timezone.utc)


@pytest.fixture()
def now() -> dt.datetime:
    return NOW


@pytest.fixture()
def store() -> FakeStore:
    return FakeStore(
        [
            {"id": 1, "task_name": "Design review", "assignee": "Aiko", "priority": "high",
             "progress": 10, "due_date": "2026-10-15", "past_delay_days": 2, "dependencies": "API"},
            {"id": 2, "task_name": "Write docs", "assignee": "Ben", "priority": "low",
             "progress": 90, "due_date": "2026-12-31", "dependencies": "none"},
            {"id": 3, "task_name": "Load test", "assignee": "Aiko", "priority": "medium",
             "progress": 50, "due_date": "2026-10-27", "dependencies": "none"},
        ]
    )


@pytest.fixture()
def controller(store: FakeStore, now: dt.datetime) -> DashboardController:
    return DashboardController(store, Capabilities(), now=lambda: now)
