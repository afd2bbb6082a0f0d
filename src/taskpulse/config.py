# src/taskpulse/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; settings are built on first use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKPULSE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path

    # ---- Notifications ----
    channel_id: str
    channel_name: str
    reminder_lead_minutes: int
    delivery_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskpulse").strip() or "taskpulse"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskpulse"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")

        channel_id = _env(_k("CHANNEL_ID"), "task-reminders").strip() or "task-reminders"
        channel_name = _env(_k("CHANNEL_NAME"), "Task Reminders")
        reminder_lead_minutes = max(0, _env_int(_k("REMINDER_LEAD_MINUTES"), 60))
        delivery_interval_seconds = max(0.5, _env_float(_k("DELIVERY_INTERVAL_SECONDS"), 15.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            channel_id=channel_id,
            channel_name=channel_name,
            reminder_lead_minutes=reminder_lead_minutes,
            delivery_interval_seconds=delivery_interval_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Local .env never overrides variables already set in the environment.
    load_dotenv(override=False)
    return Settings.from_env()
