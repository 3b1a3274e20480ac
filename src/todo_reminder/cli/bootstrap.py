# src/todo_reminder/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires the TaskStore and the ReminderScanner into AppState,
- does the startup load of the task file.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..core.ports import ReminderSink
from ..core.state import AppState
from ..tasks.errors import IOFailure
from ..tasks.reminder_scanner import ReminderScanner
from ..tasks.task_models import Reminder
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _log_reminder(reminder: Reminder) -> None:
    logger.info("%s", reminder.message())


def create_initial_state(
    *,
    settings: Settings | None = None,
    on_reminder: ReminderSink | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If on_reminder is None, reminders only go to the log.
    """
    if settings is None:
        settings = get_settings()

    store = TaskStore(settings.tasks_path)
    scanner = ReminderScanner(
        store,
        on_reminder or _log_reminder,
        interval_seconds=settings.reminder_interval_seconds,
        dedupe=settings.reminder_dedupe,
    )
    return AppState(settings=settings, task_store=store, scanner=scanner)


def load_tasks(state: AppState) -> str | None:
    """
    Startup load. Returns a user-facing error message, or None on success.

    A failed load leaves the store empty; the app keeps running.
    """
    try:
        state.task_store.load()
    except IOFailure as e:
        return str(e)
    return None
