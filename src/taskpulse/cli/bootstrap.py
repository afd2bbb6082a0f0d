# src/taskpulse/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (task source / delivery service).
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings, get_settings
from ..core.ports import NotificationService
from ..core.state import AppState
from ..notify.local import LocalNotificationService
from ..tasks.lifecycle import TaskLifecycle
from ..tasks.notifications import NotificationScheduler
from ..tasks.ranking import RankedViewProjector
from ..tasks.task_file import JsonTaskSource

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
        *,
        settings: Settings | None = None,
        tasks_path: str | Path | None = None,
        notifications: NotificationService | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if notifications is None:
        notifications = LocalNotificationService()

    scheduler = NotificationScheduler(
        notifications,
        channel_id=settings.channel_id,
        channel_name=settings.channel_name,
        reminder_lead_minutes=settings.reminder_lead_minutes,
    )

    source = JsonTaskSource(tasks_path if tasks_path is not None else settings.tasks_path)
    logger.debug("Task source: %s", source.path)

    return AppState(
        settings=settings,
        task_source=source,
        notifications=notifications,
        scheduler=scheduler,
        lifecycle=TaskLifecycle(scheduler),
        projector=RankedViewProjector(),
    )
