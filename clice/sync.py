"""Synchronisation primitives and gathering helpers for cooperative tasks."""

from __future__ import annotations

import asyncio
import os
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

__all__ = ["Event", "Lock", "gather", "gather_range"]

T = TypeVar("T")


class Event:
    """A flag that tasks can wait on until it is set."""

    def __init__(self) -> None:
        self._ready = False
        self._waiters: list[asyncio.Future[None]] = []

    def set(self) -> None:
        """Set the flag and wake every task waiting on it."""
        self._ready = True
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    def clear(self) -> None:
        """Reset the flag; later waiters block until the next :meth:`set`."""
        self._ready = False

    def is_set(self) -> bool:
        return self._ready

    async def wait(self) -> None:
        """Return once the flag is set."""
        if self._ready:
            return
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def __await__(self):
        return self.wait().__await__()


class _Guard:
    """Ownership of a :class:`Lock`; releasing it hands the lock to the next waiter."""

    def __init__(self, lock: Lock) -> None:
        self._lock: Lock | None = lock

    def release(self) -> None:
        if self._lock is not None:
            lock, self._lock = self._lock, None
            lock.release()

    def __enter__(self) -> _Guard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class Lock:
    """A first-come, first-served mutual exclusion lock for tasks."""

    def __init__(self) -> None:
        self._locked = False
        self._waiters: deque[asyncio.Future[None]] = deque()

    def locked(self) -> bool:
        return self._locked

    async def acquire(self) -> _Guard:
        """Wait until the lock is free, take it, and return a guard that releases it."""
        if not self._locked:
            self._locked = True
            return _Guard(self)

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The lock was already handed over to us; pass it on.
                self.release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise
        # Ownership was handed over by release(); the lock stays marked as taken.
        return _Guard(self)

    def release(self) -> None:
        """Release the lock, passing it to the longest waiting task if any."""
        if not self._locked:
            raise RuntimeError("release() called on an unlocked lock")
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._locked = False

    async def __aenter__(self) -> Lock:
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.release()


async def gather(*args: Awaitable[Any]) -> tuple[Any, ...]:
    """Run the awaitables concurrently and return their results in argument order."""
    return tuple(await asyncio.gather(*args))


async def gather_range(
    values: Iterable[T],
    coroutine: Callable[[T], Awaitable[Any]],
    concurrency: int | None = None,
) -> bool:
    """Run ``coroutine`` for every value, at most ``concurrency`` at a time.

    Values are taken in order. If any call returns a false result, every
    other running call is cancelled and ``False`` is returned; otherwise
    ``True``.
    """
    if concurrency is None:
        concurrency = os.cpu_count() or 1
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    iterator = iter(values)
    workers: list[asyncio.Task[None]] = []
    failed = False

    async def worker() -> None:
        nonlocal failed
        for value in iterator:
            if not await coroutine(value):
                failed = True
                current = asyncio.current_task()
                for other in workers:
                    if other is not current:
                        other.cancel()
                return

    workers.extend(asyncio.create_task(worker()) for _ in range(concurrency))

    try:
        _, pending = await asyncio.wait(workers, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in workers:
            task.cancel()
        raise

    for task in pending:
        task.cancel()
    if pending:
        await asyncio.wait(pending)

    for task in workers:
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()

    return not failed