# src/todolist/tasks/edit_session.py

"""
Edit session: the single input buffer shared by "add" and "edit" modes.

States:
- ADDING  (active_task_id is None): commit appends a new task.
- EDITING (active_task_id set):     commit rewrites that task's text.

A commit with a blank (or unencodable) draft changes nothing, and the draft
is left in place for correction (the session also stays in EDITING if it
was there).
The session is never persisted.
"""

from __future__ import annotations

import logging

from .task_codec import is_encodable
from .task_models import SessionMode, Task
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class EditSession:
    def __init__(self, task_store: TaskStore) -> None:
        self._store = task_store
        self.active_task_id: str | None = None
        self.draft_text: str = ""

    @property
    def mode(self) -> SessionMode:
        return SessionMode.ADDING if self.active_task_id is None else SessionMode.EDITING

    def begin_edit(self, task: Task) -> None:
        self.active_task_id = task.id
        self.draft_text = task.text
        logger.debug("Editing task id=%s", task.id)

    def set_draft(self, text: str) -> None:
        self.draft_text = text

    def commit(self) -> bool:
        """Apply the draft. Returns True if the task list changed."""
        if self.active_task_id is None:
            if self._store.add_task(self.draft_text) is None:
                return False
            self.draft_text = ""
            return True

        if not self.draft_text.strip() or not is_encodable(self.draft_text):
            return False

        target = self.active_task_id
        if self._store.update_task(target, self.draft_text):
            self._reset()
            return True

        # The edited task was deleted while the session was open.
        logger.info("Edit target id=%s no longer exists; back to add mode", target)
        self._reset()
        return False

    def _reset(self) -> None:
        self.active_task_id = None
        self.draft_text = ""
