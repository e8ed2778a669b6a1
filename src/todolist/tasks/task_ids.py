# src/todolist/tasks/task_ids.py

from __future__ import annotations

import time
from collections.abc import Callable, Iterable

# Millisecond timestamps stay well under this; longer digit strings are foreign ids.
MAX_NUMERIC_ID_DIGITS = 19


class TaskIdGenerator:
    """
    Time-derived task ids.

    Ids are the wall clock in milliseconds as a decimal string. If the clock
    has not moved (or went backwards), the last value is bumped by one, so ids
    strictly increase for the lifetime of the generator.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def next_id(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return str(candidate)

    def observe(self, ids: Iterable[str]) -> None:
        """Account for ids that already exist (e.g. loaded from storage)."""
        for raw in ids:
            # Non-ASCII digits and very long runs can never equal a generated id.
            if raw.isascii() and raw.isdigit() and len(raw) <= MAX_NUMERIC_ID_DIGITS:
                self._last = max(self._last, int(raw))
