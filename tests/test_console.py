# tests/test_console.py

from __future__ import annotations

import builtins

from todolist.connectors.console_connector import run_console_loop
from todolist.core.loop_runner import start_loop_in_background
from todolist.tasks.task_codec import decode_tasks
from todolist.tasks.task_store import LoadOutcome


def test_loop_runner_runs_calls_and_stops() -> None:
    runner = start_loop_in_background()
    try:
        assert runner.call(lambda a, b: a + b, 2, 3) == 5
    finally:
        runner.stop()
        runner.join(timeout=5.0)

    assert not runner.thread.is_alive()


def test_console_session_persists_through_background_loop(state, monkeypatch, capsys) -> None:
    lines = iter(["Buy milk", "Walk dog", "/done 1", "/edit 1", "Buy oat milk", "/del 2", "/exit"])
    monkeypatch.setattr(builtins, "input", lambda prompt="": next(lines))

    runner = start_loop_in_background()
    try:
        assert runner.run(state.task_store.load()) == LoadOutcome.MISSING
        run_console_loop(state, runner)
        assert runner.run(state.task_store.flush(), timeout=5.0) is True
        stored = runner.run(state.kv_store.get("tasks"))
    finally:
        runner.stop()
        runner.join(timeout=5.0)

    tasks = decode_tasks(stored)
    assert [(t.text, t.completed) for t in tasks] == [("Buy oat milk", True)]

    out = capsys.readouterr().out
    assert "Test List" in out
    assert "[+] Added: Buy milk" in out
    assert "Current text: Buy milk" in out
    assert "  1. [x] Buy oat milk" in out


def test_console_exits_on_eof(state, monkeypatch) -> None:
    def _eof(prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", _eof)

    runner = start_loop_in_background()
    try:
        runner.run(state.task_store.load())
        run_console_loop(state, runner)
    finally:
        runner.stop()
        runner.join(timeout=5.0)
