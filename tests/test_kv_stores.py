# tests/test_kv_stores.py

from __future__ import annotations

import os
import stat
import sys
from pathlib import Path

import pytest

from todolist.storage.file_store import FileKeyValueStore
from todolist.storage.memory_store import InMemoryKeyValueStore
from todolist.storage.sqlite_store import SqliteKeyValueStore


@pytest.fixture(params=["memory", "sqlite", "file"])
def kv_store(request, tmp_path: Path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    if request.param == "sqlite":
        return SqliteKeyValueStore(tmp_path / "kv.sqlite3")
    return FileKeyValueStore(tmp_path / "kv")


@pytest.mark.asyncio
async def test_get_set_overwrite(kv_store) -> None:
    assert await kv_store.get("tasks") is None

    await kv_store.set("tasks", b"[1]")
    assert await kv_store.get("tasks") == b"[1]"

    await kv_store.set("tasks", b"[]")
    assert await kv_store.get("tasks") == b"[]"
    assert await kv_store.get("other") is None


@pytest.mark.asyncio
async def test_keys_are_independent(kv_store) -> None:
    await kv_store.set("tasks", b"a")
    await kv_store.set("tasks.corrupt", b"b")
    await kv_store.set("weird/key with spaces", "ünïcode".encode("utf-8"))

    assert await kv_store.get("tasks") == b"a"
    assert await kv_store.get("tasks.corrupt") == b"b"
    assert (await kv_store.get("weird/key with spaces")).decode("utf-8") == "ünïcode"


@pytest.mark.asyncio
async def test_sqlite_values_survive_reopen(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "kv.sqlite3"
    first = SqliteKeyValueStore(db)
    await first.set("tasks", b"persisted")

    second = SqliteKeyValueStore(db)
    assert await second.get("tasks") == b"persisted"
    assert second.count_keys() == 1


@pytest.mark.asyncio
async def test_file_store_writes_atomically_into_one_file(tmp_path: Path) -> None:
    store = FileKeyValueStore(tmp_path / "kv")
    await store.set("tasks", b"[]")

    path = store.path_for("tasks")
    assert path.read_bytes() == b"[]"
    assert sorted(p.name for p in (tmp_path / "kv").iterdir()) == [path.name]
    if sys.platform != "win32":
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
