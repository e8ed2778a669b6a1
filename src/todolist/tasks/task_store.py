# src/todolist/tasks/task_store.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from enum import StrEnum

from ..core.errors import CorruptDataError, PersistFailure
from ..core.ports import KeyValueStore
from .task_codec import decode_tasks, encode_tasks, is_encodable
from .task_ids import TaskIdGenerator
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"

TaskListener = Callable[[tuple[Task, ...]], None]
TaskAddedListener = Callable[[Task], None]


class LoadOutcome(StrEnum):
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"
    UNAVAILABLE = "unavailable"


class TaskStore:
    """
    Authoritative ordered task list backed by a key-value store.

    Mutations change memory immediately and then schedule a background write
    of the whole list on the running event loop. Each write carries the
    snapshot taken at mutation time plus a revision number; writes are
    serialized and a snapshot older than the last written one is dropped, so
    storage always ends at the most recent mutation.

    Nothing is scheduled before the first load() completes, or without a
    running loop (plain sync callers); the pending revision is then written by
    load() (merge) or the next flush()/persist().

    Storage faults never escape: load() starts empty, persist() logs and
    records a PersistFailure.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        id_generator: TaskIdGenerator | None = None,
        backup_corrupt: bool = True,
    ) -> None:
        self._kv = kv_store
        self._key = key
        self._ids = id_generator or TaskIdGenerator()
        self._backup_corrupt = backup_corrupt

        self._tasks: list[Task] = []
        self._ready = False

        self._revision = 0
        self._persisted_revision = 0
        self._write_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[bool]] = set()

        self._listeners: list[TaskListener] = []
        self._added_listeners: list[TaskAddedListener] = []

        self.last_load_error: CorruptDataError | None = None
        self.last_persist_error: PersistFailure | None = None

    # ---- queries ----

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def tasks(self) -> tuple[Task, ...]:
        # Tasks added before load() finished stay hidden until the merge.
        return tuple(self._tasks) if self._ready else ()

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    @property
    def has_unsaved_changes(self) -> bool:
        return self._persisted_revision < self._revision

    def get_task(self, task_id: str) -> Task | None:
        if not self._ready:
            return None
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def __len__(self) -> int:
        return len(self._tasks) if self._ready else 0

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    # ---- observers ----

    def subscribe(self, listener: TaskListener) -> Callable[[], None]:
        """Call listener with a fresh snapshot after every change. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._remove(self._listeners, listener)

    def on_task_added(self, listener: TaskAddedListener) -> Callable[[], None]:
        """Call listener with each newly added task (cosmetic hooks such as an add animation)."""
        self._added_listeners.append(listener)
        return lambda: self._remove(self._added_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener: object) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def _notify(self) -> None:
        snapshot = self.tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Task list listener failed: %r", listener)

    def _notify_added(self, task: Task) -> None:
        for listener in list(self._added_listeners):
            try:
                listener(task)
            except Exception:
                logger.exception("Task added listener failed: %r", listener)

    # ---- loading ----

    async def load(self) -> LoadOutcome:
        """
        Read the stored list and install it.

        The first load merges: tasks created before it finished are kept
        after the stored ones (and written back). Later loads replace.
        Never raises.
        """
        loaded: list[Task] = []
        try:
            raw = await self._kv.get(self._key)
        except Exception:
            logger.exception("Failed to read task list key=%r; starting empty", self._key)
            outcome = LoadOutcome.UNAVAILABLE
        else:
            if raw is None:
                outcome = LoadOutcome.MISSING
            else:
                try:
                    loaded = decode_tasks(raw)
                    outcome = LoadOutcome.LOADED
                except CorruptDataError as e:
                    self.last_load_error = e
                    logger.error("Stored task list key=%r is corrupt (%s); starting empty", self._key, e)
                    outcome = LoadOutcome.CORRUPT
                    await self._backup(raw)

        try:
            self._install(loaded)
        except Exception as e:
            logger.exception("Failed to install task list key=%r; starting empty", self._key)
            err = CorruptDataError(f"stored task list cannot be installed: {type(e).__name__}")
            err.__cause__ = e
            self.last_load_error = err
            self._tasks = []
            self._ready = True
            self._persisted_revision = self._revision
            outcome = LoadOutcome.CORRUPT
            self._notify()
        logger.info("Task list load key=%s outcome=%s total=%d", self._key, outcome.value, len(self._tasks))
        return outcome

    def _install(self, loaded: list[Task]) -> None:
        known = {t.id for t in loaded}
        self._ids.observe(known)

        early: list[Task] = []
        if not self._ready:
            for t in self._tasks:
                if t.id in known:
                    # Stored data already uses this id; the early task gets a fresh one.
                    t = Task(id=self._ids.next_id(), text=t.text, completed=t.completed)
                early.append(t)
            self._ids.observe(t.id for t in early)

        self._tasks = loaded + early
        self._ready = True

        if early:
            logger.info("Merged %d task(s) created before load finished", len(early))
            self._schedule_persist()
        else:
            # What we hold now is exactly what storage holds (or nothing worth writing).
            self._persisted_revision = self._revision
        self._notify()

    async def _backup(self, raw: bytes) -> None:
        if not self._backup_corrupt:
            return
        backup_key = f"{self._key}.corrupt"
        try:
            await self._kv.set(backup_key, bytes(raw))
            logger.warning("Corrupt task list copied to key=%r", backup_key)
        except Exception:
            logger.exception("Failed to back up corrupt task list to key=%r", backup_key)

    # ---- mutations ----

    def add_task(self, text: str) -> Task | None:
        clean = (text or "").strip()
        if not clean or not is_encodable(clean):
            logger.debug("add_task ignored: blank or unencodable text")
            return None

        task = Task(id=self._ids.next_id(), text=clean, completed=False)
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)
        self._changed()
        self._notify_added(task)
        return task

    def update_task(self, task_id: str, new_text: str) -> bool:
        clean = (new_text or "").strip()
        idx = self._index_of(task_id)
        if idx is None or not clean or not is_encodable(clean):
            logger.debug("update_task ignored id=%s found=%s", task_id, idx is not None)
            return False

        old = self._tasks[idx]
        self._tasks[idx] = Task(id=old.id, text=clean, completed=old.completed)
        logger.debug("Task updated id=%s", task_id)
        self._changed()
        return True

    def toggle_completion(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("toggle_completion ignored: unknown id=%s", task_id)
            return False

        old = self._tasks[idx]
        self._tasks[idx] = Task(id=old.id, text=old.text, completed=not old.completed)
        logger.debug("Task toggled id=%s completed=%s", task_id, not old.completed)
        self._changed()
        return True

    def delete_task(self, task_id: str) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("delete_task ignored: unknown id=%s", task_id)
            return False

        del self._tasks[idx]
        logger.debug("Task deleted id=%s", task_id)
        self._changed()
        return True

    def _index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def _changed(self) -> None:
        self._schedule_persist()
        self._notify()

    # ---- persistence ----

    def _schedule_persist(self) -> None:
        self._revision += 1
        revision = self._revision
        if not self._ready:
            # Writing now could clobber the stored list before load() has read it.
            logger.debug("Task list not loaded yet; revision=%d deferred", revision)
            return
        payload = self._encode_snapshot(revision)
        if payload is None:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; revision=%d waits for flush()", revision)
            return

        task = loop.create_task(self._write(revision, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _encode_snapshot(self, revision: int) -> bytes | None:
        try:
            return encode_tasks(self._tasks)
        except Exception as e:
            failure = PersistFailure(self._key, revision, "task list cannot be encoded")
            failure.__cause__ = e
            self.last_persist_error = failure
            logger.exception("Failed to encode task list key=%r revision=%d", self._key, revision)
            return None

    async def _write(self, revision: int, payload: bytes) -> bool:
        async with self._write_lock:
            if revision <= self._persisted_revision:
                logger.debug("Skipping stale snapshot revision=%d (persisted=%d)", revision, self._persisted_revision)
                return True
            try:
                await self._kv.set(self._key, payload)
            except Exception as e:
                failure = PersistFailure(self._key, revision)
                failure.__cause__ = e
                self.last_persist_error = failure
                logger.exception("Failed to persist task list key=%r revision=%d", self._key, revision)
                return False

            self._persisted_revision = revision
            logger.debug("Persisted task list key=%s revision=%d bytes=%d", self._key, revision, len(payload))
            return True

    async def persist(self) -> bool:
        """Write the current list now. Returns False (after logging) if the write failed."""
        if self._persisted_revision >= self._revision:
            # Force a write even when nothing changed since the last one.
            self._revision += 1
        payload = self._encode_snapshot(self._revision)
        if payload is None:
            return False
        return await self._write(self._revision, payload)

    async def flush(self) -> bool:
        """Wait for scheduled writes and make sure the latest revision is stored."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
        if self.has_unsaved_changes:
            payload = self._encode_snapshot(self._revision)
            if payload is None:
                return False
            return await self._write(self._revision, payload)
        return True
