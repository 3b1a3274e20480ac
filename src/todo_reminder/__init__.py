"""Console to-do list with scheduled reminders."""

__version__ = "0.1.0"
