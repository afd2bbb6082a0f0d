# src/taskpulse/tasks/lifecycle.py

"""
Mutation handlers: keep device-level notifications consistent with task writes.

Called by the mutation layer right after the repository write succeeds:
- created (PENDING)      -> schedule
- edited                 -> cancel, then schedule (ordered)
- marked COMPLETED       -> cancel
- reverted to PENDING    -> schedule from the current deadline
- deleted                -> cancel

Handlers return immediately; the notification work runs as a background asyncio
task. A slow or failing delivery service never blocks or fails the mutation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Sequence
from typing import Any

from .notifications import NotificationScheduler
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskLifecycle:
    def __init__(self, scheduler: NotificationScheduler) -> None:
        self._scheduler = scheduler
        # Strong refs: the event loop only keeps weak references to tasks.
        self._jobs: set[asyncio.Task[None]] = set()
        # Latest job per task id; a new job for the same task runs after it.
        self._tail: dict[str, asyncio.Task[None]] = {}

    @property
    def pending_jobs(self) -> int:
        return len(self._jobs)

    def _spawn(self, task_id: str, name: str, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        previous = self._tail.get(task_id)
        job = asyncio.get_running_loop().create_task(self._run_after(previous, coro), name=name)
        self._jobs.add(job)
        self._tail[task_id] = job
        job.add_done_callback(lambda j: self._on_job_done(task_id, j))
        return job

    @staticmethod
    async def _run_after(previous: asyncio.Task[None] | None, coro: Coroutine[Any, Any, None]) -> None:
        if previous is not None and not previous.done():
            # Outcome of the earlier job is handled by its own done-callback.
            try:
                await asyncio.wait([previous])
            except asyncio.CancelledError:
                coro.close()
                raise
        await coro

    def _on_job_done(self, task_id: str, job: asyncio.Task[None]) -> None:
        self._jobs.discard(job)
        if self._tail.get(task_id) is job:
            del self._tail[task_id]
        if job.cancelled():
            return
        exc = job.exception()
        if exc is not None:
            logger.error("Notification job %s failed", job.get_name(), exc_info=exc)

    def on_created(self, task: Task) -> asyncio.Task[None] | None:
        if task.status != TaskStatus.PENDING:
            return None
        return self._spawn(task.id, f"schedule:{task.id}", self._scheduler.schedule(task))

    def on_updated(self, task: Task) -> asyncio.Task[None]:
        if task.status == TaskStatus.PENDING:
            return self._spawn(task.id, f"reschedule:{task.id}", self._scheduler.reschedule(task))
        return self._spawn(task.id, f"cancel:{task.id}", self._scheduler.cancel(task.id))

    def on_status_toggled(self, task: Task) -> asyncio.Task[None]:
        """`task` is the record *after* the toggle."""
        if task.status == TaskStatus.COMPLETED:
            return self._spawn(task.id, f"cancel:{task.id}", self._scheduler.cancel(task.id))
        return self._spawn(task.id, f"schedule:{task.id}", self._scheduler.schedule(task))

    def on_deleted(self, task_id: str) -> asyncio.Task[None]:
        return self._spawn(task_id, f"cancel:{task_id}", self._scheduler.cancel(task_id))

    async def drain(self) -> None:
        """Wait for every outstanding notification job (shutdown, tests)."""
        while self._jobs:
            await asyncio.gather(*list(self._jobs), return_exceptions=True)

    def reconcile(self, previous: Sequence[Task], current: Sequence[Task]) -> int:
        """
        Diff two snapshots of the repository and fire the matching handlers.

        Used when mutations are observed from outside (e.g. a re-read task file)
        rather than performed through the mutation layer. Returns the number of
        handlers fired.
        """
        before = {t.id: t for t in previous}
        after = {t.id: t for t in current}
        fired = 0

        for task_id, task in after.items():
            old = before.get(task_id)
            if old is None:
                if self.on_created(task) is not None:
                    fired += 1
            elif old != task:
                if old.status != task.status:
                    self.on_status_toggled(task)
                else:
                    self.on_updated(task)
                fired += 1

        for task_id in before.keys() - after.keys():
            self.on_deleted(task_id)
            fired += 1

        return fired
