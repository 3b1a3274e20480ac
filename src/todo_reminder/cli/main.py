# src/todo_reminder/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the reminder scanner in a
background thread, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
import signal

from ..cli.bootstrap import create_initial_state, load_tasks
from ..config import get_settings
from ..connectors.console_connector import ConsoleReminderPrinter, run_console_loop
from ..logging_setup import console_level_from_name, setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.data_dir,
        console_level=console_level_from_name(settings.log_level),
    )
    logger.info("Starting %s (full log: %s)...", settings.app_name, log_file)

    printer = ConsoleReminderPrinter()
    state = create_initial_state(settings=settings, on_reminder=printer.push)

    err = load_tasks(state)
    if err:
        print(err)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        raise KeyboardInterrupt

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Not in the main thread, or the platform has no SIGTERM.
        pass

    printer.start()
    state.scanner.start()
    try:
        run_console_loop(state)
    except KeyboardInterrupt:
        pass
    finally:
        state.scanner.stop()
        printer.stop()
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
