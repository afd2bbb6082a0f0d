"""Task prioritization and temporal notification engine."""

from .tasks.notifications import cancel_task_notifications, schedule_task_notifications
from .tasks.ranking import select_completed, select_consistency_score, select_pending, select_ranked_tasks
from .tasks.scoring import compute_consistency_score, compute_score, compute_time_health
from .tasks.task_models import Priority, ScoredTask, Subtask, Task, TaskStatus

__all__ = [
    "Priority",
    "ScoredTask",
    "Subtask",
    "Task",
    "TaskStatus",
    "compute_score",
    "compute_consistency_score",
    "compute_time_health",
    "select_ranked_tasks",
    "select_pending",
    "select_completed",
    "select_consistency_score",
    "schedule_task_notifications",
    "cancel_task_notifications",
]
