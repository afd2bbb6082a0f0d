# src/taskpulse/cli/main.py

"""
CLI entrypoint.

Commands:
- rank:  print the ranked view of the task file with scores, time health and stats,
- watch: schedule notifications for the task file on the local delivery service and
  print them as they fire; the file is re-read every delivery interval and edits
  are reconciled into cancel/schedule calls.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
from collections.abc import Sequence
from datetime import datetime

from ..config import get_settings
from ..core.ports import NotificationPayload
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..notify.local import LocalNotificationService
from ..tasks.ranking import summarize
from ..tasks.scoring import compute_time_health, now_ms
from ..tasks.task_models import ScoredTask, Task, subtask_progress
from .bootstrap import create_initial_state

logger = logging.getLogger(__name__)


def _fmt_ms(ts_ms: int) -> str:
    return datetime.fromtimestamp(ts_ms / 1000).strftime("%b-%d %a %H:%M")


def _format_row(task: ScoredTask, now: int) -> str:
    health = compute_time_health(task, now)
    line = (
        f"{task.score:9.1f}  {task.priority.value:<6}  {health:3d}%  "
        f"{_fmt_ms(task.deadline)}  {task.title}"
    )
    if task.subtasks:
        line += f"  [{subtask_progress(task.subtasks):.0f}% of {len(task.subtasks)} subtasks]"
    return line


def cmd_rank(state: AppState) -> int:
    now = now_ms()
    tasks = state.task_source.list_tasks()
    view = state.projector.project(tasks, now)
    stats = summarize(view, now)

    print("    SCORE  PRIO    HEALTH DEADLINE          TITLE")
    for task in view.ranked:
        print(_format_row(task, now))

    print()
    print(
        f"Pending: {stats.pending} ({stats.completed} done)  High priority: {stats.high_priority}  "
        f"Overdue: {stats.overdue}"
    )
    print(f"On-time consistency: {stats.consistency_score}% ({stats.consistency_label})")
    return 0


async def _print_notification(payload: NotificationPayload) -> None:
    print(f"[{_fmt_ms(now_ms())}] {payload.title}: {payload.body}")


async def watch(state: AppState) -> None:
    settings = state.settings
    await state.scheduler.bootstrap()

    previous: Sequence[Task] = ()
    delivery: asyncio.Task[None] | None = None
    service = state.notifications
    if isinstance(service, LocalNotificationService):
        delivery = asyncio.create_task(
            service.run_delivery_loop(_print_notification, interval_seconds=settings.delivery_interval_seconds)
        )

    try:
        while True:
            try:
                current = state.task_source.list_tasks()
            except Exception:
                logger.exception("Failed to read tasks from %s", settings.tasks_path)
                current = previous

            if current is not previous:
                fired = state.lifecycle.reconcile(previous, current)
                logger.info("Task file changed: %d notification update(s)", fired)
                previous = current

            await asyncio.sleep(settings.delivery_interval_seconds)
    finally:
        if delivery is not None:
            delivery.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await delivery
        await state.lifecycle.drain()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taskpulse", description="Task urgency ranking and reminders.")
    parser.add_argument("--tasks", help="Path to the tasks JSON file (default: TASKPULSE_TASKS_PATH).")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("rank", help="Print tasks ordered by urgency score.")
    sub.add_parser("watch", help="Schedule reminders and print them as they fire.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    log_file = setup_logging(settings)

    logger.info("Starting %s (log: %s)...", settings.app_name, log_file)
    state = create_initial_state(settings=settings, tasks_path=args.tasks)

    if args.command == "rank":
        return cmd_rank(state)

    try:
        asyncio.run(watch(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
