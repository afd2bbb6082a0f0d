# src/taskpulse/tasks/task_file.py

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from .task_models import Task

logger = logging.getLogger(__name__)


class JsonTaskSource:
    """
    Read-only task source over a JSON file holding a list of task records.

    list_tasks() re-reads the file only when its mtime changes and otherwise
    returns the same tuple object, so identity-keyed projections stay cached.
    Malformed records are skipped with a warning.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._mtime_ns: int | None = None
        self._tasks: tuple[Task, ...] = ()

    @property
    def path(self) -> Path:
        return self._path

    def list_tasks(self) -> Sequence[Task]:
        try:
            mtime_ns = self._path.stat().st_mtime_ns
        except FileNotFoundError:
            if self._mtime_ns is not None or self._tasks:
                self._mtime_ns = None
                self._tasks = ()
            return self._tasks

        if mtime_ns == self._mtime_ns:
            return self._tasks

        self._tasks = self._load()
        self._mtime_ns = mtime_ns
        return self._tasks

    def _load(self) -> tuple[Task, ...]:
        raw = json.loads(self._path.read_text("utf-8"))
        if isinstance(raw, dict):
            raw = raw.get("tasks", [])
        if not isinstance(raw, list):
            raise ValueError(f"{self._path}: expected a list of tasks")

        out: list[Task] = []
        for i, record in enumerate(raw):
            if not isinstance(record, dict):
                logger.warning("Skipping non-object task record #%d in %s", i, self._path)
                continue
            try:
                out.append(Task.from_dict(record))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed task record #%d in %s", i, self._path, exc_info=True)
        logger.info("Loaded %d tasks from %s", len(out), self._path)
        return tuple(out)
