# src/taskpulse/logging_setup.py

"""
Logging for the CLI.

Console: short lines for the interactive user. Background work (the delivery
loop and lifecycle jobs) runs on every poll, so on the console it only speaks
up at WARNING+ unless the console itself is at DEBUG; third-party loggers only
at WARNING+.

File: everything at DEBUG under settings.data_dir/<app_name>.log.

setup_logging() may be called more than once (tests, repeated main()); it only
replaces the handlers it installed itself.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings

APP_LOGGER = "taskpulse"

# Loggers that emit on every poll / every mutation.
BACKGROUND_LOGGERS = (
    "taskpulse.notify",
    "taskpulse.tasks.lifecycle",
    "taskpulse.tasks.notifications",
)

_HANDLER_MARK = "_taskpulse_handler"


def _is_under(name: str, prefix: str) -> bool:
    return name == prefix or name.startswith(prefix + ".")


class _ConsoleFilter(logging.Filter):
    def __init__(self, console_level: int) -> None:
        super().__init__()
        self._verbose = console_level <= logging.DEBUG

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if any(_is_under(name, p) for p in BACKGROUND_LOGGERS):
            return self._verbose or record.levelno >= logging.WARNING
        if _is_under(name, APP_LOGGER):
            return True
        return record.levelno >= logging.WARNING


def console_level_for(settings: Settings) -> int:
    level = logging.getLevelName(str(settings.log_level).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Settings, *, console_level: int | None = None) -> Path:
    """Install console + file handlers on the root logger; returns the log file path."""
    if console_level is None:
        console_level = console_level_for(settings)

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    log_file = settings.data_dir / f"{settings.app_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        if getattr(h, _HANDLER_MARK, False):
            root.removeHandler(h)
            h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(asctime)s %(levelname)-7s %(message)s", datefmt="%H:%M:%S"))
    console.addFilter(_ConsoleFilter(console_level))

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    for h in (console, file_handler):
        setattr(h, _HANDLER_MARK, True)
        root.addHandler(h)

    logging.captureWarnings(True)
    return log_file
