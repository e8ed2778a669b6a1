# src/todolist/tasks/task_api.py

"""
Presentation intents.

Each helper maps one user action onto the core (state.task_store /
state.session), so front ends never touch the task list directly.
"""

from __future__ import annotations

from ..core.state import AppState
from .task_models import Task


def add_or_update(state: AppState, text: str) -> bool:
    """The input box "submit": add a task, or finish editing one."""
    state.session.set_draft(text)
    return state.session.commit()


def toggle_completion(state: AppState, task_id: str) -> bool:
    return state.task_store.toggle_completion(task_id)


def start_edit(state: AppState, task: Task) -> None:
    state.session.begin_edit(task)


def delete(state: AppState, task_id: str) -> bool:
    return state.task_store.delete_task(task_id)
