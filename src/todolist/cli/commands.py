# src/todolist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import SessionMode, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /done, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Any other text adds a task (or saves the task being edited).")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task_list(tasks: Sequence[Task], *, title: str = "", editing_id: str | None = None) -> str:
    lines = [title] if title else []
    if not tasks:
        lines.append("  (no tasks yet)")
    for i, t in enumerate(tasks, start=1):
        mark = "x" if t.completed else " "
        suffix = "  (editing)" if t.id == editing_id else ""
        lines.append(f"  {i}. [{mark}] {t.text}{suffix}")
    return "\n".join(lines)


def render(state: AppState) -> str:
    return format_task_list(
        state.task_store.tasks,
        title=str(getattr(state.settings, "app_title", "") or ""),
        editing_id=state.session.active_task_id,
    )


def _task_at(state: AppState, args: list[str]) -> Task | str:
    """Resolve a 1-based list position; returns the task or a usage/error message."""
    if not args:
        return "Give a task number, e.g. /done 2."
    try:
        pos = int(args[0])
    except ValueError:
        return f"Not a task number: {args[0]!r}."
    tasks = state.task_store.tasks
    if pos < 1 or pos > len(tasks):
        return f"No task #{pos}." if tasks else "The list is empty."
    return tasks[pos - 1]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args)
    if isinstance(task, str):
        return task
    task_api.toggle_completion(state, task.id)
    now = state.task_store.get_task(task.id)
    return f"Marked {'done' if now is not None and now.completed else 'not done'}: {task.text}"


def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    task = _task_at(state, args)
    if isinstance(task, str):
        return task
    task_api.start_edit(state, task)
    if emit:
        emit(f"Current text: {task.text}")
    return "Type the new text and press Enter (blank input keeps editing)."


def cmd_del(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args)
    if isinstance(task, str):
        return task
    task_api.delete(state, task.id)
    return f"Deleted: {task.text}"


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    settings = state.settings
    mode = "editing" if state.session.mode == SessionMode.EDITING else "adding"
    err = store.last_persist_error
    return (
        "Status:\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} key={store.key}\n"
        f"  Tasks: {len(store)} ({store.completed_count} done)\n"
        f"  Input mode: {mode}\n"
        f"  Unsaved changes: {'yes' if store.has_unsaved_changes else 'no'}\n"
        f"  Last save error: {err if err is not None else 'none'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done N.", aliases=["toggle", "t"])
registry.register("edit", cmd_edit, help_text="Edit a task's text: /edit N.", aliases=["e"])
registry.register("del", cmd_del, help_text="Delete a task: /del N.", aliases=["rm", "delete"])
registry.register("status", cmd_status, help_text="Show storage and list status.")
