# src/taskpulse/notify/local.py

from __future__ import annotations

"""
In-process notification delivery service.

Implements the NotificationService port for local runs (CLI "watch") and demos:
- triggers are stored by id; creating an existing id replaces it (upsert),
- cancelling an unknown or already-fired id is a no-op,
- a polling loop fires due triggers through an injected callback.

It does not survive process exit, so there is no suspended-state delivery;
allow_while_idle is recorded but has no effect here.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.ports import ChannelConfig, NotificationPayload, PermissionStatus, TimestampTrigger
from ..tasks.scoring import now_ms

logger = logging.getLogger(__name__)

DeliverFn = Callable[[NotificationPayload], Awaitable[None]]


@dataclass(slots=True, frozen=True)
class TriggerEntry:
    payload: NotificationPayload
    trigger: TimestampTrigger


class LocalNotificationService:
    """
    Only pending triggers are kept: an entry is dropped as soon as it fires or
    is cancelled, so memory tracks the live schedule, not every id ever seen.
    """

    def __init__(self, *, permission: PermissionStatus = PermissionStatus.AUTHORIZED) -> None:
        self.permission = permission
        self.channels: dict[str, ChannelConfig] = {}
        self._pending: dict[str, TriggerEntry] = {}
        self.fired_count = 0
        self.cancelled_count = 0

    async def request_permission(self) -> PermissionStatus:
        return self.permission

    async def create_channel(self, config: ChannelConfig) -> str:
        self.channels[config.id] = config
        return config.id

    async def create_trigger_notification(
            self,
            payload: NotificationPayload,
            trigger: TimestampTrigger,
    ) -> str:
        if payload.channel_id not in self.channels:
            logger.warning("Trigger %s targets unknown channel %s", payload.id, payload.channel_id)
        self._pending[payload.id] = TriggerEntry(payload=payload, trigger=trigger)
        logger.debug("Trigger %s set for %s", payload.id, trigger.timestamp)
        return payload.id

    async def cancel_trigger_notification(self, notification_id: str) -> None:
        if self._pending.pop(notification_id, None) is None:
            return
        self.cancelled_count += 1
        logger.debug("Trigger %s cancelled", notification_id)

    def pending_ids(self) -> list[str]:
        return sorted(self._pending)

    def get(self, notification_id: str) -> TriggerEntry | None:
        """Pending trigger for the id, or None once fired/cancelled/never set."""
        return self._pending.get(notification_id)

    async def fire_due(self, deliver: DeliverFn, now: int | None = None) -> list[NotificationPayload]:
        """
        Fire every pending trigger whose instant has been reached, earliest first.

        A trigger whose delivery callback raises is still consumed: one-shot
        notifications are never retried.
        """
        if now is None:
            now = now_ms()

        due = sorted(
            (e for e in self._pending.values() if e.trigger.timestamp <= now),
            key=lambda e: (e.trigger.timestamp, e.payload.id),
        )

        fired: list[NotificationPayload] = []
        for entry in due:
            if self._pending.get(entry.payload.id) is not entry:
                # cancelled or replaced by an earlier delivery callback
                continue
            del self._pending[entry.payload.id]
            self.fired_count += 1
            try:
                await deliver(entry.payload)
            except Exception:
                logger.exception("deliver failed id=%s", entry.payload.id)
                continue
            fired.append(entry.payload)
            logger.info("Fired %s", entry.payload.id)
        return fired

    async def run_delivery_loop(self, deliver: DeliverFn, *, interval_seconds: float = 15.0) -> None:
        """
        Poll for due triggers every interval_seconds.

        To stop the loop, cancel the coroutine/task.
        """
        sleep_s = max(0.01, float(interval_seconds))
        while True:
            try:
                await self.fire_due(deliver)
            except Exception:
                logger.exception("fire_due failed")
            await asyncio.sleep(sleep_s)
