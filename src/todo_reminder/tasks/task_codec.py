# src/todo_reminder/tasks/task_codec.py

from __future__ import annotations

"""
Line format for the task file.

One task per line, three tab-separated fields:

    <"1"|"0"> TAB <text> TAB <"HH:MM:SS" or empty>

Reading is tolerant: missing fields fall back to defaults and an unparseable
time just leaves the task unscheduled.
"""

import re
from datetime import time

from .errors import InvalidTimeFormat
from .task_models import Task

FIELD_SEP = "\t"
TAB_REPLACEMENT = "  "

# 24-hour clock, single-digit hour allowed ("9:30"), minutes always two digits.
_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def _clean_text(text: str) -> str:
    # A record must stay on one line.
    return " ".join(text.replace(FIELD_SEP, TAB_REPLACEMENT).splitlines())


def serialize_task(task: Task) -> str:
    flag = "1" if task.completed else "0"
    when = task.scheduled_time.isoformat() if task.scheduled_time is not None else ""
    return f"{flag}{FIELD_SEP}{_clean_text(task.text)}{FIELD_SEP}{when}"


def _parse_stored_time(raw: str) -> time | None:
    raw = raw.strip()
    if not raw:
        return None
    try:
        return time.fromisoformat(raw)
    except ValueError:
        return None


def deserialize_task(line: str) -> Task:
    parts = line.rstrip("\r\n").split(FIELD_SEP)
    completed = parts[0] == "1"
    text = parts[1] if len(parts) > 1 else ""
    scheduled = _parse_stored_time(parts[2]) if len(parts) > 2 else None
    return Task(text=text, scheduled_time=scheduled, completed=completed)


def parse_clock(raw: str) -> time:
    """
    Parse a user-entered 24-hour "H:mm" / "HH:mm" value.

    Raises InvalidTimeFormat for anything else (including "25:00" or "9:5").
    """
    m = _CLOCK_RE.match((raw or "").strip())
    if not m:
        raise InvalidTimeFormat(f"Invalid time format: {raw!r}. Use HH:mm (e.g. 18:00).")
    hour, minute = int(m.group(1)), int(m.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(f"Invalid time format: {raw!r}. Use HH:mm (e.g. 18:00).")
    return time(hour, minute)
