# src/todolist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class SessionMode(StrEnum):
    """Input box mode: appending a new task or rewriting an existing one."""

    ADDING = "adding"
    EDITING = "editing"


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    text: str
    completed: bool = False

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}
