"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Reminder)
- task_codec.py: one-line text format + user time parsing
- task_store.py: flat-file backed ordered task list
- reminder_scanner.py: periodic scan that emits reminders for the current minute
- errors.py: error kinds surfaced to the presentation layer
"""
