# src/todolist/core/loop_runner.py

"""
Background event loop for the task store.

Why a thread:
- the console REPL is blocking (input()),
- TaskStore persists asynchronously and needs a loop that keeps running
  while the console waits for the next line.

Every intent is submitted to the loop thread, so the task list is only
ever touched from that one thread.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LoopRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def run(self, coro: Awaitable[T], timeout: float | None = None) -> T:
        """Run a coroutine on the loop thread and wait for its result."""
        fut = asyncio.run_coroutine_threadsafe(_as_coroutine(coro), self.loop)
        return fut.result(timeout=timeout)

    def call(self, fn: Callable[..., T], *args: Any, timeout: float | None = None, **kwargs: Any) -> T:
        """Run a plain callable on the loop thread (inside the running loop) and wait for it."""

        async def _invoke() -> T:
            return fn(*args, **kwargs)

        return self.run(_invoke(), timeout=timeout)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal loop stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


async def _as_coroutine(aw: Awaitable[T]) -> T:
    return await aw


async def _idle_until(stop_event: asyncio.Event) -> None:
    await stop_event.wait()
    # Let fire-and-forget writes scheduled just before stop() finish.
    pending = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
    if pending:
        logger.debug("Waiting for %d pending task(s) before stopping the loop", len(pending))
        await asyncio.gather(*pending, return_exceptions=True)


def start_loop_in_background(name: str = "todolist-loop") -> LoopRunner:
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_idle_until(stop_event))
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_default_executor())
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=name, daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        raise RuntimeError("Background event loop did not initialize")

    logger.debug("Background loop thread started.")
    return LoopRunner(thread=t, loop=loop, stop_event=stop_event)
