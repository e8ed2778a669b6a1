# src/todolist/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol


class KeyValueStore(Protocol):
    """
    Async byte-string key-value storage.

    get() returns None when the key was never written.
    set() overwrites the whole value; implementations must not expose partial writes.
    """

    def get(self, key: str) -> Awaitable[bytes | None]: ...

    def set(self, key: str, value: bytes) -> Awaitable[None]: ...
