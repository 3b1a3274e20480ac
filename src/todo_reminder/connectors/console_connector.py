# src/todo_reminder/connectors/console_connector.py

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..tasks.task_models import Reminder

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleReminderPrinter:
    """
    Presentation side of reminders.

    push() is the scanner callback: it only enqueues, so the scanner never
    waits on the console. A daemon thread drains the queue and prints.
    """

    def __init__(self, write: Callable[[str], None] = _print_ts) -> None:
        self._write = write
        self._queue: queue.Queue[Reminder | None] = queue.Queue()
        self._thread: threading.Thread | None = None

    def push(self, reminder: Reminder) -> None:
        self._queue.put_nowait(reminder)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="reminder-printer", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 2.0) -> None:
        if self._thread is None:
            return
        self._queue.put_nowait(None)
        self._thread.join(timeout=timeout)
        self._thread = None

    def drain(self) -> int:
        """Print everything queued right now (used when no printer thread runs)."""
        n = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return n
            if item is not None:
                self._show(item)
                n += 1

    def _show(self, reminder: Reminder) -> None:
        try:
            self._write(reminder.message())
        except Exception:
            logger.exception("Failed to display reminder %r", reminder.text)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is None:
                return
            self._show(item)


def run_console_loop(state: AppState, *, read_line: Callable[[str], str] | None = None) -> None:
    read = read_line or input
    logger.info("Console connector started (tasks=%d).", len(state.task_store))
    app_name = state.settings.app_name
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.")

    while True:
        try:
            user_input = read("> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a new task.
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            reply = command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console connector finished.")
