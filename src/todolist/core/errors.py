# src/todolist/core/errors.py

"""
Error taxonomy for the task list core.

- CorruptDataError: stored bytes could not be decoded into a task list.
  TaskStore.load() recovers by starting empty.
- PersistFailure: a write to the key-value store failed.
  TaskStore keeps memory authoritative and records the failure.

Blank input on add/update is not an error at all: the operation is a silent
no-op that returns None/False.
"""

from __future__ import annotations


class TodoError(Exception):
    """Base class for todolist errors."""


class CorruptDataError(TodoError):
    """Stored task list is not a valid serialization."""


class PersistFailure(TodoError):
    """Writing the task list snapshot to storage failed."""

    def __init__(self, key: str, revision: int, message: str = "") -> None:
        self.key = key
        self.revision = revision
        super().__init__(message or f"Failed to persist key={key!r} revision={revision}")
