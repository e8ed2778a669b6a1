# src/todolist/connectors/console_connector.py

from __future__ import annotations

import logging
import threading

from ..cli.commands import registry as command_registry
from ..cli.commands import render
from ..core.loop_runner import LoopRunner
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import SessionMode, Task

logger = logging.getLogger(__name__)


def _prompt(state: AppState) -> str:
    # Mirrors the input button: "+" adds, "✓" saves the task being edited.
    return "✓ " if state.session.mode == SessionMode.EDITING else "+ "


def handle_line(state: AppState, line: str, emit) -> str | None:
    """Route one input line. Runs on the loop thread (see run_console_loop)."""
    if line.startswith("/"):
        return command_registry.handle(state, line, emit=emit)

    if task_api.add_or_update(state, line):
        return None
    if state.session.mode == SessionMode.EDITING:
        return "Text is empty; still editing."
    return None


def run_console_loop(state: AppState, runner: LoopRunner) -> None:
    logger.info("Console connector started.")

    # Set from the loop thread by the observer, read here after each command.
    changed = threading.Event()
    added: list[Task] = []

    def _on_change(_tasks) -> None:
        changed.set()

    def _on_added(task: Task) -> None:
        added.append(task)

    unsubscribe = runner.call(state.task_store.subscribe, _on_change)
    unsubscribe_added = runner.call(state.task_store.on_task_added, _on_added)

    def emit(text: str) -> None:
        print(text, flush=True)

    print(runner.call(render, state))
    print("Type a task and press Enter. Use /help for commands. Use /exit to quit.\n")

    try:
        while True:
            try:
                line = input(runner.call(_prompt, state)).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not line and runner.call(lambda: state.session.mode) == SessionMode.ADDING:
                continue

            try:
                reply = runner.call(handle_line, state, line, emit)
            except Exception:
                logger.exception("Console command handler crashed.")
                reply = "Internal error while handling that input."

            for task in added[:]:
                print(f"[+] Added: {task.text}")
                added.remove(task)

            if reply:
                print(reply)

            if changed.is_set():
                changed.clear()
                print(runner.call(render, state))
    finally:
        runner.call(unsubscribe)
        runner.call(unsubscribe_added)

    logger.info("Console connector finished.")
