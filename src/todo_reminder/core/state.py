# src/todo_reminder/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..tasks.reminder_scanner import ReminderScanner
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    """
    Application context: owns the one TaskStore and the one ReminderScanner.

    Passed explicitly to the presentation layer; nothing reads it from a global.
    """

    settings: Settings
    task_store: TaskStore
    scanner: ReminderScanner
