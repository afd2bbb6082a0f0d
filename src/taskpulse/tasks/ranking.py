# src/taskpulse/tasks/ranking.py

from __future__ import annotations

"""
Ranked view projection.

Turns the raw task collection into a score-ordered, analytics-annotated view.

The projection is memoized on the *identity* of the collection object:
- calling it again with the same object returns the cached view (no re-sort),
- any new collection object triggers a recompute, even if it compares equal.

The repository hands out a new sequence object on every mutation, so the view
always reflects the latest membership while UI ticks stay cheap.

Not thread-safe: intended for a single event loop.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .scoring import compute_consistency_score, compute_score, consistency_label, is_overdue, now_ms
from .task_models import Priority, ScoredTask, Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RankedView:
    ranked: tuple[ScoredTask, ...]
    pending: tuple[ScoredTask, ...]
    completed: tuple[ScoredTask, ...]
    consistency_score: int


@dataclass(slots=True, frozen=True)
class TaskStats:
    """Dashboard counters derived from a RankedView."""

    pending: int
    completed: int
    high_priority: int
    overdue: int
    consistency_score: int
    consistency_label: str


def rank_tasks(tasks: Sequence[Task], now: int | None = None) -> RankedView:
    """Uncached projection. Ties keep their input order (sorted() is stable)."""
    if now is None:
        now = now_ms()

    scored = [ScoredTask.from_task(task, compute_score(task, now)) for task in tasks]
    ranked = tuple(sorted(scored, key=lambda t: t.score, reverse=True))

    return RankedView(
        ranked=ranked,
        pending=tuple(t for t in ranked if t.status == TaskStatus.PENDING),
        completed=tuple(t for t in ranked if t.status == TaskStatus.COMPLETED),
        consistency_score=compute_consistency_score(tasks, now),
    )


class RankedViewProjector:
    """Single-entry memo over rank_tasks keyed on collection identity."""

    def __init__(self) -> None:
        # Holding the source keeps its id() from being reused by another object.
        self._source: Sequence[Task] | None = None
        self._view: RankedView | None = None
        self.recomputations = 0

    def project(self, tasks: Sequence[Task], now: int | None = None) -> RankedView:
        if self._view is not None and tasks is self._source:
            return self._view

        view = rank_tasks(tasks, now)
        self._source = tasks
        self._view = view
        self.recomputations += 1
        logger.debug("Ranked view recomputed: %d tasks", len(view.ranked))
        return view

    def invalidate(self) -> None:
        self._source = None
        self._view = None


_default_projector = RankedViewProjector()


def select_ranked_tasks(tasks: Sequence[Task], now: int | None = None) -> tuple[ScoredTask, ...]:
    return _default_projector.project(tasks, now).ranked


def select_pending(tasks: Sequence[Task], now: int | None = None) -> tuple[ScoredTask, ...]:
    return _default_projector.project(tasks, now).pending


def select_completed(tasks: Sequence[Task], now: int | None = None) -> tuple[ScoredTask, ...]:
    return _default_projector.project(tasks, now).completed


def select_consistency_score(tasks: Sequence[Task], now: int | None = None) -> int:
    return _default_projector.project(tasks, now).consistency_score


def summarize(view: RankedView, now: int | None = None) -> TaskStats:
    if now is None:
        now = now_ms()

    return TaskStats(
        pending=len(view.pending),
        completed=len(view.completed),
        high_priority=sum(1 for t in view.pending if t.priority == Priority.HIGH),
        overdue=sum(1 for t in view.pending if is_overdue(t, now)),
        consistency_score=view.consistency_score,
        consistency_label=consistency_label(view.consistency_score),
    )
