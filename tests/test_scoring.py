# tests/test_scoring.py

from __future__ import annotations

import pytest

from taskpulse.tasks.scoring import (
    compute_consistency_score,
    compute_score,
    compute_time_health,
    consistency_label,
)
from taskpulse.tasks.task_models import Priority, TaskStatus

from .conftest import HOUR, NOW


@pytest.mark.parametrize("priority", list(Priority))
@pytest.mark.parametrize("offset_hours", [-100, -1, 0.5, 3, 1000])
def test_completed_task_scores_zero(make_task, priority, offset_hours) -> None:
    task = make_task(
        priority=priority,
        deadline=NOW + int(offset_hours * HOUR),
        status=TaskStatus.COMPLETED,
        completed_at=NOW,
    )
    assert compute_score(task, NOW) == 0


def test_score_formula(make_task) -> None:
    task = make_task(priority=Priority.HIGH, deadline=NOW + 2 * HOUR)
    assert compute_score(task, NOW) == pytest.approx(100 + 25)


def test_score_strictly_decreases_with_time_remaining(make_task) -> None:
    scores = [
        compute_score(make_task(priority=Priority.MEDIUM, deadline=NOW + h * HOUR), NOW)
        for h in (1, 2, 5, 24, 240)
    ]
    assert all(a > b for a, b in zip(scores, scores[1:]))


def test_priority_order_for_equal_time_remaining(make_task) -> None:
    deadline = NOW + 4 * HOUR
    high = compute_score(make_task(priority=Priority.HIGH, deadline=deadline), NOW)
    medium = compute_score(make_task(priority=Priority.MEDIUM, deadline=deadline), NOW)
    low = compute_score(make_task(priority=Priority.LOW, deadline=deadline), NOW)
    assert high > medium > low


def test_overdue_low_outranks_high_due_soon(make_task) -> None:
    overdue_low = make_task(priority=Priority.LOW, deadline=NOW - HOUR)
    high_soon = make_task(priority=Priority.HIGH, deadline=NOW + 3 * HOUR)

    assert compute_score(overdue_low, NOW) == pytest.approx(5010)
    assert compute_score(high_soon, NOW) == pytest.approx(100 + 50 / 3)
    assert compute_score(overdue_low, NOW) > compute_score(high_soon, NOW)


def test_overdue_floor_ignores_how_late(make_task) -> None:
    a_minute_late = make_task(priority=Priority.HIGH, deadline=NOW - 60_000)
    a_month_late = make_task(priority=Priority.HIGH, deadline=NOW - 720 * HOUR)
    due_now = make_task(priority=Priority.HIGH, deadline=NOW)

    assert compute_score(a_minute_late, NOW) == compute_score(a_month_late, NOW)
    assert compute_score(due_now, NOW) == pytest.approx(5100)


def test_score_defaults_now_to_wall_clock(make_task) -> None:
    far_future = make_task(priority=Priority.LOW, deadline=NOW + 10**12)
    # Roughly 10 + 50/277_777h with any realistic clock.
    assert 10 < compute_score(far_future) < 10.1


def test_consistency_empty_is_zero() -> None:
    assert compute_consistency_score([], NOW) == 0


def test_consistency_three_on_time_one_late(make_task) -> None:
    deadline = NOW - HOUR
    tasks = [
        make_task(deadline=deadline, status=TaskStatus.COMPLETED, completed_at=deadline - 1),
        make_task(deadline=deadline, status=TaskStatus.COMPLETED, completed_at=deadline),
        make_task(deadline=deadline, status=TaskStatus.COMPLETED, completed_at=deadline - HOUR),
        make_task(deadline=deadline, status=TaskStatus.COMPLETED, completed_at=deadline + 1),
    ]
    assert compute_consistency_score(tasks, NOW) == 75


def test_consistency_counts_missing_completed_at_as_late(make_task) -> None:
    tasks = [
        make_task(status=TaskStatus.COMPLETED, completed_at=NOW),
        make_task(status=TaskStatus.COMPLETED, completed_at=None),
    ]
    assert compute_consistency_score(tasks, NOW) == 50


def test_consistency_overdue_pending_counts_against(make_task) -> None:
    tasks = [
        make_task(status=TaskStatus.COMPLETED, completed_at=NOW),
        make_task(deadline=NOW - 1),
        make_task(deadline=NOW - HOUR),
        # Pending and not yet due: ignored.
        make_task(deadline=NOW + HOUR),
    ]
    assert compute_consistency_score(tasks, NOW) == 33


def test_consistency_only_future_pending_is_zero(make_task) -> None:
    assert compute_consistency_score([make_task(), make_task()], NOW) == 0


def test_consistency_rounds_half_up(make_task) -> None:
    # 1 / 8 = 12.5% -> 13 (not banker's 12)
    tasks = [make_task(status=TaskStatus.COMPLETED, completed_at=NOW)]
    tasks += [make_task(deadline=NOW - HOUR) for _ in range(7)]
    assert compute_consistency_score(tasks, NOW) == 13


def test_time_health_completed_on_deadline_and_one_ms_late(make_task) -> None:
    deadline = NOW + HOUR
    on_time = make_task(deadline=deadline, status=TaskStatus.COMPLETED, completed_at=deadline)
    late = make_task(deadline=deadline, status=TaskStatus.COMPLETED, completed_at=deadline + 1)
    assert compute_time_health(on_time, NOW) == 100
    assert compute_time_health(late, NOW) == 0


def test_time_health_halfway(make_task) -> None:
    task = make_task(created_at=0, deadline=1000)
    assert compute_time_health(task, 500) == 50


@pytest.mark.parametrize(
    "now,expected",
    [(-500, 100), (0, 100), (250, 75), (999, 0), (1000, 0), (5000, 0)],
)
def test_time_health_clamped(make_task, now, expected) -> None:
    task = make_task(created_at=0, deadline=1000)
    assert compute_time_health(task, now) == expected


@pytest.mark.parametrize("deadline", [0, -10])
def test_time_health_degenerate_span_is_zero(make_task, deadline) -> None:
    task = make_task(created_at=0, deadline=deadline)
    assert compute_time_health(task, -1000) == 0


@pytest.mark.parametrize(
    "score,label",
    [(100, "On Track"), (80, "On Track"), (79, "Needs Attention"), (50, "Needs Attention"), (49, "At Risk"), (0, "At Risk")],
)
def test_consistency_label(score, label) -> None:
    assert consistency_label(score) == label
