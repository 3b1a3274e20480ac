# src/todo_reminder/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import time


@dataclass(slots=True, frozen=True)
class Task:
    """
    One to-do item.

    Never mutated in place: state changes build a new value that replaces
    the old one at the same position in the store.
    """

    text: str
    scheduled_time: time | None = None
    completed: bool = False

    def with_completed(self, completed: bool) -> Task:
        return replace(self, completed=completed)

    def toggled(self) -> Task:
        return self.with_completed(not self.completed)

    def display_text(self) -> str:
        base = ("✔ " if self.completed else "") + self.text
        if self.scheduled_time is None:
            return base
        return f"{base} [{self.scheduled_time.strftime('%H:%M')}]"


@dataclass(slots=True, frozen=True)
class Reminder:
    """Notification event emitted by the reminder scanner."""

    text: str
    time: time | None

    def message(self) -> str:
        if self.time is None:
            return f"⏰ Reminder: {self.text}"
        return f"⏰ Reminder: {self.text} at {self.time.strftime('%H:%M')}"
