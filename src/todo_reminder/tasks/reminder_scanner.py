# src/todo_reminder/tasks/reminder_scanner.py

from __future__ import annotations

"""
Reminder scanner.

A small polling loop that, every interval_seconds (starting immediately):
- truncates "now" to the whole minute,
- picks incomplete tasks whose scheduled time equals that minute,
- hands a Reminder to the injected callback.

Matching is by exact minute, not "time has passed". With a 30 s interval a
task usually matches on two consecutive ticks and fires on both, unless
dedupe is enabled.

Display (popup, console line, ...) belongs to the presentation layer, not the scanner.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from datetime import datetime, time
from enum import StrEnum

from ..core.ports import ReminderSink, TaskSource
from .task_models import Reminder, Task

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0


class ScannerState(StrEnum):
    STOPPED = "stopped"
    RUNNING = "running"


def _truncate_to_minute(now: datetime | time) -> time:
    if isinstance(now, datetime):
        now = now.time()
    return now.replace(second=0, microsecond=0, tzinfo=None)


def due_reminders(tasks: list[Task], minute: time) -> list[tuple[int, Reminder]]:
    """Pure matching step: (position, reminder) for every task due at `minute`."""
    out: list[tuple[int, Reminder]] = []
    for pos, task in enumerate(tasks):
        if task.scheduled_time is None or task.completed:
            continue
        if task.scheduled_time == minute:
            out.append((pos, Reminder(text=task.text, time=task.scheduled_time)))
    return out


class ReminderScanner:
    """
    Periodic scanner over a TaskStore.

    States: STOPPED -> start() -> RUNNING -> stop() -> STOPPED.
    Calling start() while running cancels the old schedule and begins a fresh
    one (first tick immediately).
    """

    def __init__(
        self,
        store: TaskSource,
        on_reminder: ReminderSink,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
        dedupe: bool = False,
    ) -> None:
        self._store = store
        self._on_reminder = on_reminder
        self._interval = max(0.5, float(interval_seconds))
        self._clock = clock
        self._dedupe = dedupe

        # dedupe bookkeeping: minute of the last scan + what already fired in it
        self._fired_minute: time | None = None
        self._fired: set[tuple[int, str, time | None]] = set()

        self._lock = threading.Lock()
        self._runner: _LoopRunner | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def state(self) -> ScannerState:
        with self._lock:
            return ScannerState.RUNNING if self._runner is not None else ScannerState.STOPPED

    def scan(self, now: datetime | time | None = None) -> list[Reminder]:
        """Run one tick. Returns the reminders that were emitted."""
        minute = _truncate_to_minute(self._clock() if now is None else now)
        matches = due_reminders(self._store.snapshot(), minute)

        if self._dedupe:
            if minute != self._fired_minute:
                self._fired_minute = minute
                self._fired.clear()
            fresh = []
            for pos, reminder in matches:
                key = (pos, reminder.text, reminder.time)
                if key in self._fired:
                    continue
                self._fired.add(key)
                fresh.append((pos, reminder))
            matches = fresh

        emitted: list[Reminder] = []
        for pos, reminder in matches:
            try:
                self._on_reminder(reminder)
            except Exception:
                logger.exception("Reminder callback failed position=%s text=%r", pos, reminder.text)
                continue
            emitted.append(reminder)
            logger.debug("Reminder emitted position=%s text=%r at=%s", pos, reminder.text, minute)
        return emitted

    def start(self) -> None:
        with self._lock:
            old, self._runner = self._runner, None
        if old is not None:
            logger.info("Reminder scanner restart: cancelling previous schedule.")
            old.stop()
            old.join(timeout=5.0)

        runner = _LoopRunner.spawn(self)
        with self._lock:
            self._runner = runner
        logger.info("Reminder scanner started (interval=%.1fs dedupe=%s).", self._interval, self._dedupe)

    def stop(self) -> None:
        with self._lock:
            runner, self._runner = self._runner, None
        if runner is None:
            return
        runner.stop()
        runner.join(timeout=5.0)
        logger.info("Reminder scanner stopped.")


async def run_reminder_loop(scanner: ReminderScanner, stop_event: asyncio.Event) -> None:
    """
    Tick immediately, then every scanner.interval_seconds until stop_event is set.

    A failing tick is logged and the schedule continues.
    """
    while not stop_event.is_set():
        try:
            scanner.scan()
        except Exception:
            logger.exception("Reminder scan failed")

        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=scanner.interval_seconds)


class _LoopRunner:
    """Background thread with its own event loop running run_reminder_loop."""

    def __init__(
        self,
        thread: threading.Thread,
        loop: asyncio.AbstractEventLoop,
        stop_event: asyncio.Event,
    ) -> None:
        self.thread = thread
        self.loop = loop
        self.stop_event = stop_event

    @classmethod
    def spawn(cls, scanner: ReminderScanner) -> _LoopRunner:
        ready = threading.Event()
        holder: dict[str, object] = {}

        def runner() -> None:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            stop_event = asyncio.Event()

            holder["loop"] = loop
            holder["stop_event"] = stop_event
            ready.set()

            try:
                loop.run_until_complete(run_reminder_loop(scanner, stop_event))
            finally:
                with contextlib.suppress(Exception):
                    loop.close()

        t = threading.Thread(target=runner, name="reminder-scanner", daemon=True)
        t.start()

        if not ready.wait(timeout=5.0):
            raise RuntimeError("Reminder scanner thread did not initialize.")

        loop = holder["loop"]
        stop_event = holder["stop_event"]
        assert isinstance(loop, asyncio.AbstractEventLoop)
        assert isinstance(stop_event, asyncio.Event)
        return cls(thread=t, loop=loop, stop_event=stop_event)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            # Loop already closed: the thread is on its way out.
            logger.debug("Reminder loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)
