"""Cooperative task scheduling on a private event loop, with timers and a worker pool."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Coroutine
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Any, TypeVar

__all__ = ["run", "schedule", "sleep", "submit", "THREAD_POOL_SIZE"]

T = TypeVar("T")

#: Number of worker threads used by :func:`submit`.
THREAD_POOL_SIZE = 20

_loop: asyncio.AbstractEventLoop | None = None
_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _default_loop() -> asyncio.AbstractEventLoop:
    global _loop
    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
    return _loop


def _thread_pool() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=THREAD_POOL_SIZE, thread_name_prefix="clice-worker"
            )
        return _executor


def _close_all(coroutines: tuple[Any, ...]) -> None:
    for coroutine in coroutines:
        if asyncio.iscoroutine(coroutine):
            coroutine.close()


def schedule(coroutine: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
    """Schedule a coroutine and return its task.

    Inside a running event loop the task is created on that loop; otherwise it
    is queued on the default loop and starts when :func:`run` is called.
    """
    if not asyncio.iscoroutine(coroutine):
        raise TypeError(f"schedule() expects a coroutine, got {type(coroutine).__name__}")
    loop = _running_loop() or _default_loop()
    return loop.create_task(coroutine)


def run(*args: Coroutine[Any, Any, Any]) -> tuple[Any, ...]:
    """Run the default loop until every scheduled task has finished.

    The given coroutines are scheduled first; their results are returned as a
    tuple in argument order. Without arguments the loop simply drains the
    tasks already scheduled and an empty tuple is returned.
    """
    global _loop
    if _running_loop() is not None:
        _close_all(args)
        raise RuntimeError("run() cannot be called while an event loop is running")
    for coroutine in args:
        if not asyncio.iscoroutine(coroutine):
            _close_all(args)
            raise TypeError(f"run() expects coroutines, got {type(coroutine).__name__}")

    loop = _default_loop()
    try:
        tasks = [loop.create_task(coroutine) for coroutine in args]
        # Finished tasks may have scheduled new ones, so drain until nothing is left.
        while pending := {task for task in asyncio.all_tasks(loop) if not task.done()}:
            loop.run_until_complete(asyncio.wait(pending))
        loop.run_until_complete(loop.shutdown_asyncgens())
    finally:
        loop.close()
        _loop = None

    return tuple(task.result() for task in tasks)


async def sleep(milliseconds: float | timedelta) -> None:
    """Suspend the current task for the given number of milliseconds."""
    if isinstance(milliseconds, timedelta):
        seconds = milliseconds.total_seconds()
    else:
        seconds = milliseconds / 1000
    if seconds < 0:
        raise ValueError("sleep duration must not be negative")
    await asyncio.sleep(seconds)


async def submit(work: Callable[[], T]) -> T:
    """Run a callable on the worker pool and return its result."""
    if not callable(work):
        raise TypeError(f"submit() expects a callable, got {type(work).__name__}")
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_thread_pool(), work)