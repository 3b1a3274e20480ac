# src/todo_reminder/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "todo.log"

# Console thresholds for our own loggers that would otherwise talk over the REPL.
# - reminder_scanner ticks every 30s from its own thread; reminders reach the
#   user through the printer, not the log.
# - task_store failures already come back as the command reply; the traceback
#   stays in the file.
_CONSOLE_THRESHOLDS: dict[str, int] = {
    "todo_reminder.tasks.reminder_scanner": logging.WARNING,
    "todo_reminder.tasks.task_store": logging.CRITICAL,
}


class _ConsoleFilter(logging.Filter):
    """Per-logger console thresholds; anything outside todo_reminder needs WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if not name.startswith("todo_reminder."):
            return record.levelno >= logging.WARNING
        for prefix, threshold in _CONSOLE_THRESHOLDS.items():
            if name.startswith(prefix):
                return record.levelno >= threshold
        return True


def console_level_from_name(level_name: str) -> int:
    level = logging.getLevelName(str(level_name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(
    *,
    log_dir: str | Path,
    console_level: int = logging.INFO,
) -> Path:
    """
    Console on stderr (filtered, so the prompt stays readable) + DEBUG file log
    under log_dir. Replaces any handlers already on the root logger.

    Returns the log file path so the caller can point the user at it.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
