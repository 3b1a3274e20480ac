# tests/test_reminder_scanner.py

from __future__ import annotations

import asyncio
from datetime import datetime, time

import pytest

from todo_reminder.tasks.reminder_scanner import (
    ReminderScanner,
    ScannerState,
    due_reminders,
    run_reminder_loop,
)
from todo_reminder.tasks.task_models import Reminder, Task
from todo_reminder.tasks.task_store import TaskStore

from .fakes import FixedClock, ListSource, RecordingSink

STANDUP = Task("Standup", time(9, 0), False)


def _at(hh: int, mm: int, ss: int = 0, us: int = 0) -> datetime:
    return datetime(2024, 5, 6, hh, mm, ss, us)


def test_fires_on_matching_minute() -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(ListSource([STANDUP]), sink)

    emitted = scanner.scan(_at(9, 0, 42, 500))

    assert emitted == [Reminder("Standup", time(9, 0))]
    assert sink.received == emitted


def test_silent_on_other_minute_and_when_completed() -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(ListSource([STANDUP, Task("Done", time(9, 0), True), Task("Free")]), sink)

    assert scanner.scan(_at(9, 1)) == []
    assert [r.text for r in scanner.scan(_at(9, 0))] == ["Standup"]


def test_past_time_does_not_fire() -> None:
    scanner = ReminderScanner(ListSource([STANDUP]), RecordingSink())
    assert scanner.scan(_at(10, 0)) == []


def test_repeats_within_minute_without_dedupe() -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(ListSource([STANDUP]), sink)

    scanner.scan(_at(9, 0, 5))
    scanner.scan(_at(9, 0, 35))

    assert len(sink.received) == 2


def test_dedupe_fires_once_per_minute() -> None:
    sink = RecordingSink()
    source = ListSource([STANDUP, STANDUP])
    scanner = ReminderScanner(source, sink, dedupe=True)

    scanner.scan(_at(9, 0, 5))
    scanner.scan(_at(9, 0, 35))
    # Both duplicates fire once (different positions).
    assert len(sink.received) == 2

    scanner.scan(_at(9, 1))
    scanner.scan(_at(9, 0, 10))
    # Minute rolled over and back: marks were reset.
    assert len(sink.received) == 4


def test_uses_clock_when_now_is_omitted() -> None:
    clock = FixedClock(_at(9, 0, 59))
    scanner = ReminderScanner(ListSource([STANDUP]), RecordingSink(), clock=clock)
    assert len(scanner.scan()) == 1
    clock.now = _at(9, 1)
    assert scanner.scan() == []


def test_callback_failure_does_not_stop_scan() -> None:
    seen: list[str] = []

    def flaky(reminder: Reminder) -> None:
        seen.append(reminder.text)
        if reminder.text == "first":
            raise RuntimeError("display failed")

    source = ListSource([Task("first", time(9, 0)), Task("second", time(9, 0))])
    emitted = ReminderScanner(source, flaky).scan(_at(9, 0))

    assert seen == ["first", "second"]
    assert [r.text for r in emitted] == ["second"]


def test_due_reminders_reports_positions() -> None:
    tasks = [Task("a"), STANDUP, Task("b", time(9, 0), True), Task("c", time(9, 0))]
    assert [pos for pos, _ in due_reminders(tasks, time(9, 0))] == [1, 3]


def test_scans_live_store(store: TaskStore) -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(store, sink)
    store.schedule("Standup", "9:00")

    assert len(scanner.scan(_at(9, 0))) == 1
    store.toggle_completion(0)
    assert scanner.scan(_at(9, 0)) == []


def test_interval_has_a_floor() -> None:
    assert ReminderScanner(ListSource([]), RecordingSink(), interval_seconds=0).interval_seconds == 0.5


@pytest.mark.asyncio
async def test_loop_ticks_immediately_and_stops() -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(
        ListSource([STANDUP]), sink, interval_seconds=0.5, clock=FixedClock(_at(9, 0))
    )
    stop = asyncio.Event()

    runner = asyncio.create_task(run_reminder_loop(scanner, stop))
    await asyncio.sleep(0.05)
    assert len(sink.received) == 1

    stop.set()
    await asyncio.wait_for(runner, timeout=1.0)
    assert runner.done()


def test_start_stop_state_machine() -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(ListSource([STANDUP]), sink, clock=FixedClock(_at(9, 0)))
    assert scanner.state is ScannerState.STOPPED

    scanner.start()
    try:
        assert scanner.state is ScannerState.RUNNING
        # First tick runs right away, not after the 30s interval.
        assert sink.event.wait(timeout=2.0)
    finally:
        scanner.stop()

    assert scanner.state is ScannerState.STOPPED
    scanner.stop()
    assert scanner.state is ScannerState.STOPPED


def test_restart_replaces_previous_schedule() -> None:
    sink = RecordingSink()
    scanner = ReminderScanner(ListSource([STANDUP]), sink, clock=FixedClock(_at(9, 0)))

    scanner.start()
    try:
        assert sink.event.wait(timeout=2.0)
        first_thread = scanner._runner.thread  # noqa: SLF001
        sink.event.clear()

        scanner.start()
        assert sink.event.wait(timeout=2.0)
        assert scanner.state is ScannerState.RUNNING
        assert not first_thread.is_alive()
    finally:
        scanner.stop()
