# tests/test_edit_session.py

from __future__ import annotations

from todolist.tasks.edit_session import EditSession
from todolist.tasks.task_models import SessionMode, Task
from todolist.tasks.task_store import TaskStore


def test_commit_in_add_mode_appends_and_clears_draft(store: TaskStore) -> None:
    session = EditSession(store)
    session.set_draft("  Buy milk ")

    assert session.commit() is True

    assert [t.text for t in store.tasks] == ["Buy milk"]
    assert session.mode == SessionMode.ADDING
    assert session.draft_text == ""


def test_set_draft_keeps_text_verbatim(store: TaskStore) -> None:
    session = EditSession(store)
    session.set_draft("  spaced  ")

    assert session.draft_text == "  spaced  "


def test_blank_commit_in_add_mode_keeps_draft(store: TaskStore) -> None:
    session = EditSession(store)
    session.set_draft("   ")

    assert session.commit() is False

    assert store.tasks == ()
    assert session.draft_text == "   "
    assert session.active_task_id is None


def test_edit_commit_updates_in_place_and_returns_to_add_mode(store: TaskStore) -> None:
    session = EditSession(store)
    a = store.add_task("a")
    b = store.add_task("b")
    assert a and b
    store.toggle_completion(a.id)

    session.begin_edit(store.get_task(a.id))  # type: ignore[arg-type]
    assert session.mode == SessionMode.EDITING
    assert session.active_task_id == a.id
    assert session.draft_text == "a"

    session.set_draft("alpha")
    assert session.commit() is True

    assert store.tasks == (Task(id=a.id, text="alpha", completed=True), b)
    assert session.mode == SessionMode.ADDING
    assert session.draft_text == ""


def test_blank_commit_in_edit_mode_stays_editing(store: TaskStore) -> None:
    session = EditSession(store)
    a = store.add_task("a")
    assert a is not None
    session.begin_edit(a)
    session.set_draft("  ")

    assert session.commit() is False

    assert store.tasks == (a,)
    assert session.mode == SessionMode.EDITING
    assert session.active_task_id == a.id
    assert session.draft_text == "  "


def test_commit_after_target_deleted_resets_session(store: TaskStore) -> None:
    session = EditSession(store)
    a = store.add_task("a")
    assert a is not None
    session.begin_edit(a)
    store.delete_task(a.id)
    session.set_draft("rewritten")

    assert session.commit() is False

    assert store.tasks == ()
    assert session.mode == SessionMode.ADDING
    assert session.draft_text == ""


def test_begin_edit_switches_target(store: TaskStore) -> None:
    session = EditSession(store)
    a = store.add_task("a")
    b = store.add_task("b")
    assert a and b

    session.begin_edit(a)
    session.set_draft("half-typed")
    session.begin_edit(b)

    assert session.active_task_id == b.id
    assert session.draft_text == "b"


def test_unencodable_draft_in_edit_mode_stays_editing(store: TaskStore) -> None:
    task = store.add_task("keep")
    assert task is not None
    session = EditSession(store)
    session.begin_edit(task)
    session.set_draft("bad \udcff")

    assert session.commit() is False

    assert session.mode == SessionMode.EDITING
    assert session.active_task_id == task.id
    assert store.tasks == (task,)
