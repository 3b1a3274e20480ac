# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_reminder.core.state import AppState
from todo_reminder.tasks.reminder_scanner import ReminderScanner
from todo_reminder.tasks.task_store import TaskStore

from .fakes import RecordingSink


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI layer.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tasks_path=tmp_path / "tasks.txt",
        reminder_interval_seconds=30.0,
        reminder_dedupe=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_path)


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, sink: RecordingSink) -> AppState:
    """AppState wired with a real file-backed store and a recording reminder sink."""
    return AppState(
        settings=settings,
        task_store=store,
        scanner=ReminderScanner(store, sink, interval_seconds=settings.reminder_interval_seconds),
    )
