# src/todo_reminder/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) between the task core and its collaborators.

The scanner depends on Protocols instead of the concrete store, and the
presentation layer subscribes to reminders through a plain callable.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Reminder, Task


class TaskSource(Protocol):
    """Read-only view the reminder scanner needs."""

    def snapshot(self) -> list[Task]: ...


ReminderSink = Callable[["Reminder"], None]
# Must not block: the scanner calls it from its own thread.
