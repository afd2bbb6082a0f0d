# src/taskpulse/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def from_raw(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.MEDIUM


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - a task may flip between the two states any number of times;
      completed_at follows the flips (set on COMPLETED, cleared on PENDING).
    """

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"

    @classmethod
    def from_raw(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.PENDING


@dataclass(slots=True, frozen=True)
class Subtask:
    id: str
    title: str
    is_completed: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Subtask:
        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title", "")),
            is_completed=bool(raw.get("isCompleted", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "isCompleted": self.is_completed}


@dataclass(slots=True, frozen=True)
class Task:
    """
    A user task as read from the task repository.

    All instants are epoch milliseconds.
    """

    id: str
    title: str
    description: str
    priority: Priority
    deadline: int
    status: TaskStatus
    created_at: int

    tags: frozenset[str] = frozenset()
    subtasks: tuple[Subtask, ...] = ()
    completed_at: int | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        """Build a Task from a repository record (camelCase keys)."""
        status = TaskStatus.from_raw(raw.get("status"))
        completed_raw = raw.get("completedAt")
        completed_at = int(completed_raw) if completed_raw is not None else None
        if status != TaskStatus.COMPLETED:
            # completedAt never survives a revert
            completed_at = None

        return cls(
            id=str(raw["id"]),
            title=str(raw.get("title", "")),
            description=str(raw.get("description", "") or ""),
            priority=Priority.from_raw(raw.get("priority")),
            deadline=int(raw["deadline"]),
            status=status,
            created_at=int(raw["createdAt"]),
            tags=frozenset(str(t) for t in (raw.get("tags") or ())),
            subtasks=tuple(Subtask.from_dict(s) for s in (raw.get("subtasks") or ())),
            completed_at=completed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "deadline": self.deadline,
            "status": self.status.value,
            "createdAt": self.created_at,
            "tags": sorted(self.tags),
            "subtasks": [s.to_dict() for s in self.subtasks],
        }
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        return out


@dataclass(slots=True, frozen=True)
class ScoredTask(Task):
    """A Task annotated with its transient urgency score."""

    score: float = 0.0

    @classmethod
    def from_task(cls, task: Task, score: float) -> ScoredTask:
        values = {f.name: getattr(task, f.name) for f in fields(Task)}
        return cls(**values, score=score)


# --------------------------------------------------------------------------------------
# Pure transitions used by the mutation handlers.
# --------------------------------------------------------------------------------------


def mark_completed(task: Task, now_ms: int) -> Task:
    return replace(task, status=TaskStatus.COMPLETED, completed_at=int(now_ms))


def revert_to_pending(task: Task) -> Task:
    return replace(task, status=TaskStatus.PENDING, completed_at=None)


def toggle_status(task: Task, now_ms: int) -> Task:
    if task.status == TaskStatus.PENDING:
        return mark_completed(task, now_ms)
    return revert_to_pending(task)


def toggle_subtask(task: Task, subtask_id: str) -> Task:
    """Flip one subtask; unknown ids leave the task unchanged."""
    subtasks = tuple(
        replace(s, is_completed=not s.is_completed) if s.id == subtask_id else s
        for s in task.subtasks
    )
    return replace(task, subtasks=subtasks)


def subtask_progress(subtasks: Iterable[Subtask]) -> float:
    """Completion percentage in [0, 100]; 0 for an empty list."""
    items = list(subtasks)
    if not items:
        return 0.0
    done = sum(1 for s in items if s.is_completed)
    return done / len(items) * 100
