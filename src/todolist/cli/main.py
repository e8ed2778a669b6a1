# src/todolist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the background loop that owns
the task store, loads the list, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging
from concurrent.futures import TimeoutError as FutureTimeoutError

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.loop_runner import LoopRunner, start_loop_in_background
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState, runner: LoopRunner) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    timeout = float(getattr(state.settings, "flush_timeout_seconds", 10.0))
    try:
        if not runner.run(state.task_store.flush(), timeout=timeout):
            logger.warning("Last changes could not be saved; they will be lost on exit.")
    except FutureTimeoutError:
        logger.error("Timed out after %.1fs waiting for the task list to be saved.", timeout)
    except Exception:
        logger.exception("Failed to flush task list.")

    runner.stop()
    runner.join(timeout=timeout)

    try:
        kv = state.kv_store
        if hasattr(kv, "close"):
            kv.close()
    except Exception:
        logger.debug("Storage close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    log_dir = getattr(settings, "data_dir", ".local/todolist")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "todolist"))

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)
    runner = start_loop_in_background()

    try:
        outcome = runner.run(state.task_store.load())
        logger.info("Task list ready (%s).", outcome.value)
        run_console_loop(state, runner)
    finally:
        _shutdown(state, runner)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
