# src/taskpulse/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
The delivery service (OS notification API, local loop, test fake) and the task
repository stay swappable, and tests can inject deterministic fakes.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Protocol

from ..tasks.task_models import Task


class PermissionStatus(IntEnum):
    """Delivery permission; anything below AUTHORIZED means "do not schedule"."""

    NOT_DETERMINED = -1
    DENIED = 0
    AUTHORIZED = 1
    PROVISIONAL = 2


class Importance(StrEnum):
    DEFAULT = "default"
    HIGH = "high"


@dataclass(slots=True, frozen=True)
class ChannelConfig:
    id: str
    name: str
    importance: Importance = Importance.HIGH
    sound: str = "default"


@dataclass(slots=True, frozen=True)
class NotificationPayload:
    id: str
    title: str
    body: str
    channel_id: str


@dataclass(slots=True, frozen=True)
class TimestampTrigger:
    """
    Absolute fire instant (epoch ms).

    allow_while_idle asks the service for best-effort delivery while the
    device is in a low-power suspended state.
    """

    timestamp: int
    allow_while_idle: bool = False


class NotificationService(Protocol):
    """
    Notification delivery service.

    Creating a trigger with an id that is already pending replaces it (upsert).
    Cancelling an absent or already-fired id is a no-op.
    """

    async def request_permission(self) -> PermissionStatus: ...

    async def create_channel(self, config: ChannelConfig) -> str: ...

    async def create_trigger_notification(
            self,
            payload: NotificationPayload,
            trigger: TimestampTrigger,
    ) -> str: ...

    async def cancel_trigger_notification(self, notification_id: str) -> None: ...


class TaskSource(Protocol):
    """Read-only view of the task repository. The core never writes to it."""

    def list_tasks(self) -> Sequence[Task]: ...
