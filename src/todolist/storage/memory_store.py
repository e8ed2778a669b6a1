# src/todolist/storage/memory_store.py

from __future__ import annotations


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore. Nothing survives the process; used by tests and the 'memory' backend."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def keys(self) -> list[str]:
        return sorted(self._data)

    def close(self) -> None:
        return
