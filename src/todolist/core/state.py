# src/todolist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.edit_session import EditSession
from ..tasks.task_store import TaskStore
from .ports import KeyValueStore


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: Any

    kv_store: KeyValueStore
    task_store: TaskStore
    session: EditSession
