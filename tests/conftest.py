# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable

import pytest

from taskpulse.tasks.scoring import MS_PER_HOUR
from taskpulse.tasks.task_models import Priority, Task, TaskStatus

from .fakes import FakeNotificationService

# Fixed clock for deterministic tests (2026-01-26 12:00:00 UTC).
NOW = 1_769_428_800_000
HOUR = MS_PER_HOUR


@pytest.fixture()
def make_task() -> Callable[..., Task]:
    """
    Task factory with sensible defaults; override any field by keyword.

    Default: PENDING, MEDIUM, created 1h before NOW, due 3h after NOW.
    """
    counter = {"n": 0}

    def _make(**overrides) -> Task:
        counter["n"] += 1
        values = {
            "id": f"t{counter['n']}",
            "title": f"Task {counter['n']}",
            "description": "",
            "priority": Priority.MEDIUM,
            "deadline": NOW + 3 * HOUR,
            "status": TaskStatus.PENDING,
            "created_at": NOW - HOUR,
        }
        values.update(overrides)
        return Task(**values)

    return _make


@pytest.fixture()
def service() -> FakeNotificationService:
    return FakeNotificationService()
