"""Asynchronous file access carried out on the worker pool."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from datetime import timedelta
from functools import partial

from clice.tasks import submit

__all__ = [
    "Mode",
    "Stats",
    "FileHandle",
    "to_flags",
    "open_file",
    "read_file",
    "write_file",
    "stat",
]

_CHUNK_SIZE = 4096


class Mode(enum.Flag):
    """How a file is opened."""

    READ = enum.auto()
    WRITE = enum.auto()
    READ_WRITE = enum.auto()
    CREATE = enum.auto()
    APPEND = enum.auto()
    TRUNCATE = enum.auto()
    EXCLUSIVE = enum.auto()


_FLAG_MAP = {
    Mode.READ: os.O_RDONLY,
    Mode.WRITE: os.O_WRONLY,
    Mode.READ_WRITE: os.O_RDWR,
    Mode.CREATE: os.O_CREAT,
    Mode.APPEND: os.O_APPEND,
    Mode.TRUNCATE: os.O_TRUNC,
    Mode.EXCLUSIVE: os.O_EXCL,
}


@dataclass(frozen=True)
class Stats:
    """File status; ``mtime`` is truncated to whole seconds."""

    mtime: timedelta


def to_flags(mode: Mode) -> int:
    """Translate a :class:`Mode` into ``os.open`` flags."""
    flags = getattr(os, "O_BINARY", 0)
    for member, flag in _FLAG_MAP.items():
        if member in mode:
            flags |= flag
    return flags


class FileHandle:
    """An open file descriptor; closed by :meth:`close` or on leaving a ``with`` block."""

    def __init__(self, fd: int) -> None:
        self._fd = fd

    @property
    def fileno(self) -> int:
        return self._fd

    @property
    def closed(self) -> bool:
        return self._fd == -1

    def _checked(self) -> int:
        if self._fd == -1:
            raise ValueError("I/O operation on closed file")
        return self._fd

    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; an empty result means end of file."""
        fd = self._checked()
        return await submit(partial(os.read, fd, size))

    async def write(self, data: bytes) -> None:
        """Write all of ``data`` at the current position."""
        fd = self._checked()
        view = memoryview(data)
        while view:
            written = await submit(partial(os.write, fd, view))
            view = view[written:]

    def close(self) -> None:
        if self._fd != -1:
            fd, self._fd = self._fd, -1
            os.close(fd)

    def __enter__(self) -> FileHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    async def __aenter__(self) -> FileHandle:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


async def open_file(path: str | os.PathLike[str], mode: Mode = Mode.READ) -> FileHandle:
    """Open ``path`` with the given mode."""
    fd = await submit(partial(os.open, os.fspath(path), to_flags(mode), 0o666))
    return FileHandle(fd)


async def read_file(path: str | os.PathLike[str], mode: Mode = Mode.READ) -> bytes:
    """Return the whole content of ``path``."""
    chunks: list[bytes] = []
    with await open_file(path, mode) as handle:
        while chunk := await handle.read(_CHUNK_SIZE):
            chunks.append(chunk)
    return b"".join(chunks)


async def write_file(
    path: str | os.PathLike[str],
    data: bytes,
    mode: Mode = Mode.WRITE | Mode.CREATE | Mode.TRUNCATE,
) -> None:
    """Write ``data`` to ``path``; by default the file is created or truncated."""
    with await open_file(path, mode) as handle:
        await handle.write(data)


async def stat(path: str | os.PathLike[str]) -> Stats:
    """Return the modification time of ``path``."""
    result = await submit(partial(os.stat, os.fspath(path)))
    seconds = result.st_mtime_ns // 1_000_000_000
    return Stats(mtime=timedelta(milliseconds=seconds * 1000))