# src/taskpulse/tasks/scoring.py

"""
Score functions.

All functions are pure and total: given the same tasks and `now` they return
the same number, and they never raise for well-typed input.

Score = PriorityWeight + UrgencyWeight
  PriorityWeight : HIGH=100, MEDIUM=50, LOW=10
  UrgencyWeight  : (1 / hoursRemaining) * 50

Past-due tasks are treated as having 0.01 h remaining, so every overdue task of
a given priority gets the same (large) score regardless of how late it is.
"""

from __future__ import annotations

import math
import time
from collections.abc import Iterable

from .task_models import Priority, Task, TaskStatus

PRIORITY_WEIGHTS: dict[Priority, float] = {
    Priority.HIGH: 100.0,
    Priority.MEDIUM: 50.0,
    Priority.LOW: 10.0,
}

URGENCY_MULTIPLIER = 50.0
OVERDUE_HOURS_FLOOR = 0.01
MS_PER_HOUR = 60 * 60 * 1000


def now_ms() -> int:
    return int(time.time() * 1000)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_score(task: Task, now: int | None = None) -> float:
    if task.status == TaskStatus.COMPLETED:
        return 0.0

    if now is None:
        now = now_ms()

    priority_weight = PRIORITY_WEIGHTS[task.priority]

    ms_remaining = task.deadline - now
    hours_remaining = ms_remaining / MS_PER_HOUR if ms_remaining > 0 else OVERDUE_HOURS_FLOOR
    urgency_weight = (1.0 / hours_remaining) * URGENCY_MULTIPLIER

    return priority_weight + urgency_weight


def is_completed_on_time(task: Task) -> bool:
    return (
        task.status == TaskStatus.COMPLETED
        and task.completed_at is not None
        and task.completed_at <= task.deadline
    )


def is_overdue(task: Task, now: int) -> bool:
    return task.status == TaskStatus.PENDING and task.deadline < now


def compute_consistency_score(tasks: Iterable[Task], now: int | None = None) -> int:
    """
    Portfolio-level on-time consistency score (0..100).

    Only tasks completed on or before their deadline count as successes.
    Tasks completed late (or with no completion time recorded) and pending tasks
    past their deadline count as failures. Pending tasks not yet due are ignored.

    Returns 0 when there is no history yet.
    """
    if now is None:
        now = now_ms()

    on_time = late = overdue = 0
    for task in tasks:
        if task.status == TaskStatus.COMPLETED:
            if is_completed_on_time(task):
                on_time += 1
            else:
                late += 1
        elif is_overdue(task, now):
            overdue += 1

    total = on_time + late + overdue
    if total == 0:
        return 0
    return _round_half_up(on_time / total * 100)


def compute_time_health(task: Task, now: int | None = None) -> int:
    """
    Per-task time health (0..100): the share of the task's allotted
    duration (created_at -> deadline) that is still remaining.

    Completed tasks score 100 when finished on time, 0 otherwise.
    """
    if task.status == TaskStatus.COMPLETED:
        return 100 if is_completed_on_time(task) else 0

    total = task.deadline - task.created_at
    if total <= 0:
        return 0

    if now is None:
        now = now_ms()

    remaining = task.deadline - now
    return _round_half_up(max(0.0, min(100.0, remaining / total * 100)))


def consistency_label(score: int) -> str:
    if score >= 80:
        return "On Track"
    if score >= 50:
        return "Needs Attention"
    return "At Risk"
