# src/todo_reminder/tasks/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for errors the presentation layer reports to the user."""


class ValidationError(TaskError, ValueError):
    """Empty or blank user input."""


class InvalidTimeFormat(ValidationError):
    """Schedule time is not a 24-hour H:mm clock value."""


class InvalidIndex(TaskError, IndexError):
    """No task selected, or the position is out of range."""


class IOFailure(TaskError, OSError):
    """Reading or writing the task file failed."""
