# src/taskpulse/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..tasks.lifecycle import TaskLifecycle
from ..tasks.notifications import NotificationScheduler
from ..tasks.ranking import RankedViewProjector
from .ports import NotificationService, TaskSource


@dataclass(slots=True)
class AppState:
    settings: Settings

    task_source: TaskSource
    notifications: NotificationService
    scheduler: NotificationScheduler
    lifecycle: TaskLifecycle
    projector: RankedViewProjector
