# src/todolist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the configured key-value backend, TaskStore and EditSession into AppState.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import STORAGE_BACKENDS, get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.file_store import FileKeyValueStore
from ..storage.memory_store import InMemoryKeyValueStore
from ..storage.sqlite_store import SqliteKeyValueStore
from ..tasks.edit_session import EditSession
from ..tasks.task_store import DEFAULT_STORAGE_KEY, TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)


def create_kv_store(settings) -> KeyValueStore:
    backend = str(getattr(settings, "storage_backend", "sqlite") or "sqlite").lower()
    if backend not in STORAGE_BACKENDS:
        logger.warning("Unknown storage backend %r; using sqlite.", backend)
        backend = "sqlite"

    if backend == "memory":
        logger.warning("Using in-memory storage: tasks will not survive a restart.")
        return InMemoryKeyValueStore()

    raw_path = getattr(settings, "storage_path", None)
    if backend == "file":
        return FileKeyValueStore(Path(raw_path) if raw_path else Path(settings.data_dir) / "kv")
    return SqliteKeyValueStore(Path(raw_path) if raw_path else Path(settings.data_dir) / "storage.sqlite3")


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The task list is NOT loaded here; await state.task_store.load() on the loop that owns it.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kv_store = create_kv_store(settings)
    task_store = TaskStore(
        kv_store,
        key=getattr(settings, "storage_key", DEFAULT_STORAGE_KEY),
        backup_corrupt=bool(getattr(settings, "backup_corrupt", True)),
    )
    return AppState(
        settings=settings,
        kv_store=kv_store,
        task_store=task_store,
        session=EditSession(task_store),
    )
