# tests/conftest.py

from __future__ import annotations

import asyncio
from pathlib import Path
from types import SimpleNamespace

import pytest

from todolist.cli.bootstrap import create_initial_state
from todolist.core.state import AppState
from todolist.storage.memory_store import InMemoryKeyValueStore
from todolist.tasks.task_ids import TaskIdGenerator
from todolist.tasks.task_store import TaskStore

from .fakes import FrozenClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todolist-test",
        app_title="Test List",
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "storage.sqlite3",
        storage_key="tasks",
        backup_corrupt=True,
        flush_timeout_seconds=2.0,
    )


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def store(kv: InMemoryKeyValueStore) -> TaskStore:
    """Loaded TaskStore with a frozen clock so ids are predictable: "1000", "1001", ..."""
    s = TaskStore(kv, id_generator=TaskIdGenerator(clock=FrozenClock(1.0)))
    asyncio.run(s.load())
    return s


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    st = create_initial_state(settings=settings)
    asyncio.run(st.task_store.load())
    return st
