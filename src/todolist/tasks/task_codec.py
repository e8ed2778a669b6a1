# src/todolist/tasks/task_codec.py

"""
Serialization of the task list.

Format: a UTF-8 JSON array of {"id": str, "text": str, "completed": bool}.
decode_tasks(encode_tasks(tasks)) == list(tasks) for every valid list.

Decoding is all-or-nothing: one bad record makes the whole value corrupt.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from ..core.errors import CorruptDataError
from .task_models import Task


def encode_tasks(tasks: Iterable[Task]) -> bytes:
    records = [t.to_record() for t in tasks]
    return json.dumps(records, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def is_encodable(s: str) -> bool:
    """False for strings UTF-8 cannot carry (lone surrogates from \\udXXX escapes)."""
    try:
        s.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _record_to_task(raw: Any, index: int) -> Task:
    if not isinstance(raw, dict):
        raise CorruptDataError(f"record #{index} is not an object")

    tid = raw.get("id")
    # Older data may carry numeric ids; bool is an int subclass and is rejected.
    if isinstance(tid, int) and not isinstance(tid, bool):
        tid = str(tid)
    if not isinstance(tid, str) or not tid or not is_encodable(tid):
        raise CorruptDataError(f"record #{index} has no valid id")

    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        raise CorruptDataError(f"record #{index} (id={tid}) has no text")
    if not is_encodable(text):
        raise CorruptDataError(f"record #{index} (id={tid}) has text with lone surrogates")

    completed = raw.get("completed")
    if not isinstance(completed, bool):
        raise CorruptDataError(f"record #{index} (id={tid}) has no boolean 'completed'")

    return Task(id=tid, text=text.strip(), completed=completed)


def decode_tasks(raw: bytes | str) -> list[Task]:
    """Parse stored bytes into tasks or raise CorruptDataError."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptDataError("stored task list is not valid UTF-8") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"stored task list is not valid JSON: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and pathological nesting.
        raise CorruptDataError(f"stored task list cannot be parsed: {type(e).__name__}") from e

    if not isinstance(data, list):
        raise CorruptDataError(f"stored task list must be a JSON array, got {type(data).__name__}")

    tasks: list[Task] = []
    seen: set[str] = set()
    for i, item in enumerate(data):
        task = _record_to_task(item, i)
        if task.id in seen:
            raise CorruptDataError(f"duplicate task id {task.id!r}")
        seen.add(task.id)
        tasks.append(task)
    return tasks
