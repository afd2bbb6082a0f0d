# src/taskpulse/tasks/notifications.py

from __future__ import annotations

"""
Task notification scheduler.

Per task there are two independent timers, each addressed by a deterministic id:
- "<task_id>-reminder": lead time (1 hour by default) before the deadline,
- "<task_id>-deadline": exactly at the deadline, flagged to fire while the
  device is suspended.

The scheduler keeps no local copy of what it scheduled: the delivery service is
the source of truth. Every call is best-effort: failures are logged and swallowed
so notification scheduling never fails the task mutation it accompanies.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass

from ..core.ports import (
    ChannelConfig,
    Importance,
    NotificationPayload,
    NotificationService,
    PermissionStatus,
    TimestampTrigger,
)
from .scoring import MS_PER_HOUR, now_ms
from .task_models import Task

logger = logging.getLogger(__name__)

CHANNEL_ID = "task-reminders"
CHANNEL_NAME = "Task Reminders"

REMINDER_SUFFIX = "-reminder"
DEADLINE_SUFFIX = "-deadline"


def reminder_id(task_id: str) -> str:
    return f"{task_id}{REMINDER_SUFFIX}"


def deadline_id(task_id: str) -> str:
    return f"{task_id}{DEADLINE_SUFFIX}"


@dataclass(slots=True, frozen=True)
class PlannedTrigger:
    payload: NotificationPayload
    trigger: TimestampTrigger


def plan_triggers(
        task: Task,
        *,
        now: int,
        channel_id: str = CHANNEL_ID,
        reminder_lead_ms: int = MS_PER_HOUR,
) -> list[PlannedTrigger]:
    """
    Compute the triggers a task needs right now.

    A timer whose fire time is not strictly in the future is skipped.
    """
    planned: list[PlannedTrigger] = []

    reminder_time = task.deadline - reminder_lead_ms
    if reminder_time > now:
        planned.append(
            PlannedTrigger(
                payload=NotificationPayload(
                    id=reminder_id(task.id),
                    title="⏰ Task Due Soon",
                    body=f'"{task.title}" is due in {_describe_lead(reminder_lead_ms)}',
                    channel_id=channel_id,
                ),
                trigger=TimestampTrigger(timestamp=reminder_time),
            )
        )
    else:
        logger.debug("Reminder for task %s already past; skipped", task.id)

    if task.deadline > now:
        planned.append(
            PlannedTrigger(
                payload=NotificationPayload(
                    id=deadline_id(task.id),
                    title="🔔 Task Deadline Reached",
                    body=f'"{task.title}" is due right now!',
                    channel_id=channel_id,
                ),
                trigger=TimestampTrigger(timestamp=task.deadline, allow_while_idle=True),
            )
        )
    else:
        logger.debug("Deadline for task %s already past; skipped", task.id)

    return planned


def _describe_lead(lead_ms: int) -> str:
    minutes = lead_ms // 60_000
    if minutes and minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    return "1 minute" if minutes == 1 else f"{minutes} minutes"


async def _best_effort(what: str, call: Awaitable[object]) -> None:
    try:
        await call
    except asyncio.CancelledError:
        raise
    except Exception:
        logger.exception("%s failed", what)


class NotificationScheduler:
    """Schedules and cancels the reminder/deadline triggers of tasks."""

    def __init__(
            self,
            service: NotificationService,
            *,
            channel_id: str = CHANNEL_ID,
            channel_name: str = CHANNEL_NAME,
            reminder_lead_minutes: int = 60,
    ) -> None:
        self._service = service
        self._channel_id = channel_id
        self._channel_name = channel_name
        self._reminder_lead_ms = max(0, int(reminder_lead_minutes)) * 60_000

    async def bootstrap(self) -> None:
        """One-time setup: ask for permission and create the notification channel."""
        await _best_effort("request_permission", self._service.request_permission())
        await _best_effort(
            "create_channel",
            self._service.create_channel(
                ChannelConfig(id=self._channel_id, name=self._channel_name, importance=Importance.HIGH)
            ),
        )

    async def _permission_granted(self) -> bool:
        try:
            status = await self._service.request_permission()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("request_permission failed")
            return False

        try:
            return status is not None and int(status) >= PermissionStatus.AUTHORIZED
        except (TypeError, ValueError):
            logger.warning("Unrecognised permission status %r; treating as denied", status)
            return False

    async def schedule(self, task: Task, now: int | None = None) -> None:
        """
        Submit the task's reminder and deadline triggers.

        Not additive: callers changing a deadline must cancel() first.
        """
        if not await self._permission_granted():
            logger.info("Notification permission not granted; task %s left unscheduled", task.id)
            return

        if now is None:
            now = now_ms()

        planned = plan_triggers(
            task,
            now=now,
            channel_id=self._channel_id,
            reminder_lead_ms=self._reminder_lead_ms,
        )
        if not planned:
            return

        await asyncio.gather(
            *(
                _best_effort(
                    f"create_trigger_notification id={p.payload.id}",
                    self._service.create_trigger_notification(p.payload, p.trigger),
                )
                for p in planned
            )
        )
        logger.debug("Task %s: %d trigger(s) submitted", task.id, len(planned))

    async def cancel(self, task_id: str) -> None:
        """Cancel both triggers; absent or already-fired ids are fine."""
        await asyncio.gather(
            _best_effort(
                f"cancel_trigger_notification id={reminder_id(task_id)}",
                self._service.cancel_trigger_notification(reminder_id(task_id)),
            ),
            _best_effort(
                f"cancel_trigger_notification id={deadline_id(task_id)}",
                self._service.cancel_trigger_notification(deadline_id(task_id)),
            ),
        )

    async def reschedule(self, task: Task, now: int | None = None) -> None:
        await self.cancel(task.id)
        await self.schedule(task, now)


async def schedule_task_notifications(service: NotificationService, task: Task) -> None:
    await NotificationScheduler(service).schedule(task)


async def cancel_task_notifications(service: NotificationService, task_id: str) -> None:
    await NotificationScheduler(service).cancel(task_id)
