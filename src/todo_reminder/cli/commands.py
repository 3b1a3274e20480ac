# src/todo_reminder/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.errors import InvalidIndex, TaskError
from ..tasks.task_models import Task

# Handlers get the untouched rest of the line after the command name, so
# task text keeps its inner spacing.
CommandHandler = Callable[[AppState, str], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        TaskError from a handler is turned into its message: no user mistake
        or I/O failure ends the session.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, rest)
        except TaskError as e:
            logger.info("/%s rejected: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_position(rest: str) -> int | None:
    """1-based number typed by the user -> 0-based index (None = nothing selected)."""
    words = rest.split()
    if not words:
        return None
    try:
        n = int(words[0])
    except ValueError:
        return None
    return n - 1 if n > 0 else None


def format_tasks(numbered: list[tuple[int, Task]], empty: str = "No tasks.") -> str:
    """Render (store position, task) pairs; the shown number is always position + 1."""
    if not numbered:
        return empty
    return "\n".join(f"{pos + 1}. {t.display_text()}" for pos, t in numbered)


def cmd_help(state: AppState, rest: str) -> str:
    return registry.build_help()


def cmd_list(state: AppState, rest: str) -> str:
    return format_tasks(list(enumerate(state.task_store.snapshot())))


def cmd_add(state: AppState, rest: str) -> str:
    task = state.task_store.add(rest)
    return f"Added: {task.display_text()}"


def cmd_remove(state: AppState, rest: str) -> str:
    index = parse_position(rest)
    if index is None:
        raise InvalidIndex("Select a task to remove: /remove <n>.")
    task = state.task_store.remove(index)
    return f"Removed: {task.text}"


def cmd_done(state: AppState, rest: str) -> str:
    index = parse_position(rest)
    if index is None:
        raise InvalidIndex("Select a task: /done <n>.")
    task = state.task_store.toggle_completion(index)
    return f"{'Completed' if task.completed else 'Reopened'}: {task.text}"


def cmd_schedule(state: AppState, rest: str) -> str:
    """
    /schedule 18:00 Call mom   -> reminder at 18:00 today and every day it stays open
    """
    parts = rest.split(maxsplit=1)
    if len(parts) < 2:
        return "Usage: /schedule <HH:mm> <task text>."
    task = state.task_store.schedule(parts[1], parts[0])
    return f"Scheduled: {task.display_text()}"


def cmd_search(state: AppState, rest: str) -> str:
    # Hits keep their list numbers, so /remove and /done act on what was shown.
    hits = state.task_store.search(rest)
    if not rest.strip():
        return format_tasks(hits)
    return format_tasks(hits, empty=f"No tasks match {rest.strip()!r}.")


def cmd_status(state: AppState, rest: str) -> str:
    return (
        "Status:\n"
        f"  Tasks file: {state.task_store.path}\n"
        f"  Tasks: {len(state.task_store)}\n"
        f"  Reminders: {state.scanner.state.value} "
        f"(every {state.scanner.interval_seconds:g}s, "
        f"dedupe {'ON' if state.settings.reminder_dedupe else 'OFF'})"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register("remove", cmd_remove, help_text="Remove a task: /remove <n>.", aliases=["rm", "del"])
registry.register("done", cmd_done, help_text="Mark a task done / not done: /done <n>.", aliases=["toggle"])
registry.register("schedule", cmd_schedule, help_text="Add a task with a reminder: /schedule <HH:mm> <text>.")
registry.register("search", cmd_search, help_text="Search tasks: /search <text> (empty = reload all).")
registry.register("status", cmd_status, help_text="Show tasks file and reminder settings.")
