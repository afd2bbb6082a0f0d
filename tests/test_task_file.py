# tests/test_task_file.py

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from taskpulse.tasks.ranking import RankedViewProjector
from taskpulse.tasks.task_file import JsonTaskSource

from .conftest import HOUR, NOW


def _write(path: Path, records, mtime_ns: int) -> None:
    path.write_text(json.dumps(records), "utf-8")
    os.utime(path, ns=(mtime_ns, mtime_ns))


def _rec(task_id: str, **extra):
    rec = {
        "id": task_id,
        "title": task_id,
        "description": "",
        "priority": "LOW",
        "deadline": NOW + HOUR,
        "status": "PENDING",
        "createdAt": NOW - HOUR,
        "tags": [],
        "subtasks": [],
    }
    rec.update(extra)
    return rec


def test_missing_file_yields_no_tasks(tmp_path: Path) -> None:
    assert JsonTaskSource(tmp_path / "nope.json").list_tasks() == ()


def test_unchanged_file_returns_same_collection(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    _write(path, [_rec("a"), _rec("b")], 1_000_000_000)
    source = JsonTaskSource(path)
    projector = RankedViewProjector()

    first = source.list_tasks()
    projector.project(first, NOW)
    second = source.list_tasks()
    projector.project(second, NOW)

    assert second is first
    assert projector.recomputations == 1


def test_changed_file_returns_new_collection(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    _write(path, [_rec("a")], 1_000_000_000)
    source = JsonTaskSource(path)
    first = source.list_tasks()

    _write(path, [_rec("a"), _rec("b")], 2_000_000_000)
    second = source.list_tasks()

    assert second is not first
    assert [t.id for t in second] == ["a", "b"]


def test_malformed_records_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    bad = _rec("bad")
    del bad["createdAt"]
    _write(path, {"tasks": [_rec("ok"), bad, "junk"]}, 1_000_000_000)

    assert [t.id for t in JsonTaskSource(path).list_tasks()] == ["ok"]


def test_non_list_document_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    _write(path, "hello", 1_000_000_000)
    with pytest.raises(ValueError):
        JsonTaskSource(path).list_tasks()
