# src/todo_reminder/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import os
import threading
from datetime import time
from pathlib import Path

from .errors import InvalidIndex, IOFailure, ValidationError
from .task_codec import deserialize_task, parse_clock, serialize_task
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Ordered task list backed by a flat text file.

    Storage model:
    - one task per line (see task_codec), file order == list order
    - every mutation rewrites the whole file (tmp file + os.replace)

    Thread-safety:
    - a single RLock guards the in-memory list; the reminder scanner and the
      console thread both go through it
    """

    def __init__(self, path: str | Path = "tasks.txt") -> None:
        self._path = Path(path)
        self._tasks: list[Task] = []
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    # ---- read-only accessors ----

    def snapshot(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def get(self, index: int | None) -> Task:
        with self._lock:
            self._check_index(index)
            assert index is not None
            return self._tasks[index]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    # ---- persistence ----

    def _read_persisted(self) -> list[Task]:
        if not self._path.exists():
            return []
        try:
            raw = self._path.read_text("utf-8")
        except OSError as e:
            logger.exception("Failed to read tasks from %s", self._path)
            raise IOFailure(f"Error loading tasks: {e}") from e
        return [deserialize_task(line) for line in raw.splitlines() if line.strip()]

    def load(self) -> list[Task]:
        """
        Replace the in-memory list with the persisted one.

        A missing file is not an error: the store just starts empty.
        """
        with self._lock:
            tasks = self._read_persisted()
            self._tasks = tasks
            logger.info("Loaded %d tasks from %s", len(tasks), self._path)
            return list(tasks)

    def save(self, tasks: list[Task] | None = None) -> None:
        with self._lock:
            items = list(self._tasks) if tasks is None else list(tasks)
            payload = "".join(serialize_task(t) + "\n" for t in items)
            tmp = self._path.with_name(self._path.name + ".tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp.write_text(payload, "utf-8")
                os.replace(tmp, self._path)
            except OSError as e:
                with contextlib.suppress(OSError):
                    tmp.unlink()
                logger.exception("Failed to save tasks to %s", self._path)
                raise IOFailure(f"Error saving tasks: {e}") from e
            logger.debug("Saved %d tasks to %s", len(items), self._path)

    # ---- mutations (each one persists immediately) ----

    def _check_index(self, index: int | None) -> None:
        if index is None:
            raise InvalidIndex("Select a task first.")
        if not 0 <= index < len(self._tasks):
            raise InvalidIndex(f"No task at position {index}.")

    def add(self, text: str) -> Task:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Please enter a task.")

        task = Task(text=text)
        with self._lock:
            self._tasks.append(task)
            logger.debug("Task added text=%r", text)
            self.save()
        return task

    def schedule(self, text: str, when: str | time) -> Task:
        text = (text or "").strip()
        if not text:
            raise ValidationError("Please enter a task.")
        scheduled = when if isinstance(when, time) else parse_clock(when)

        task = Task(text=text, scheduled_time=scheduled)
        with self._lock:
            self._tasks.append(task)
            logger.debug("Task scheduled text=%r at=%s", text, scheduled)
            self.save()
        return task

    def remove(self, index: int | None) -> Task:
        with self._lock:
            self._check_index(index)
            assert index is not None
            task = self._tasks.pop(index)
            logger.debug("Task removed index=%s text=%r", index, task.text)
            self.save()
        return task

    def toggle_completion(self, index: int | None) -> Task:
        with self._lock:
            self._check_index(index)
            assert index is not None
            task = self._tasks[index].toggled()
            self._tasks[index] = task
            logger.debug("Task toggled index=%s completed=%s", index, task.completed)
            self.save()
        return task

    # ---- queries ----

    def filter(self, query: str) -> list[Task]:
        """
        Case-insensitive substring search over the persisted tasks.

        An empty query reloads everything from the file (and refreshes the
        in-memory list), so the result always mirrors what is on disk.
        """
        return [task for _, task in self.search(query)]

    def search(self, query: str) -> list[tuple[int, Task]]:
        """
        Same as filter(), but each hit carries its position in the store.

        Positions are file positions, which equal store positions once the
        last mutation was saved, so they can be passed to remove() and
        toggle_completion().
        """
        needle = (query or "").strip().lower()
        if not needle:
            return list(enumerate(self.load()))

        with self._lock:
            persisted = self._read_persisted()
        return [(pos, t) for pos, t in enumerate(persisted) if needle in t.text.lower()]
