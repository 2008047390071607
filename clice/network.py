"""Framed JSON messages over standard streams or a TCP connection."""

from __future__ import annotations

import asyncio
import contextlib
import json
import re
import sys
from collections.abc import Awaitable, Callable
from typing import Any

__all__ = ["MessageReader", "encode_message", "listen", "listen_tcp", "write"]

Callback = Callable[[Any], Awaitable[None]]

_HEADER = re.compile(rb"Content-Length: (\d+)\r\n\r\n")
_READ_SIZE = 65536

_writer: asyncio.StreamWriter | None = None


class MessageReader:
    """Splits a byte stream into ``Content-Length`` framed JSON messages."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, data: bytes) -> list[Any]:
        """Add received bytes and return every message that is now complete."""
        self._buffer += data
        messages: list[Any] = []
        while True:
            match = _HEADER.match(self._buffer)
            if match is None:
                if b"\r\n\r\n" in self._buffer:
                    raise ValueError(f"malformed message header: {bytes(self._buffer[:64])!r}")
                break
            length = int(match.group(1))
            start = match.end()
            if len(self._buffer) - start < length:
                break
            body = bytes(self._buffer[start : start + length])
            del self._buffer[: start + length]
            try:
                messages.append(json.loads(body))
            except ValueError as error:
                raise ValueError(f"unexpected JSON input: {body!r}") from error
        return messages


def encode_message(value: Any) -> bytes:
    """Serialise ``value`` as compact JSON preceded by its header."""
    body = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return f"Content-Length: {len(body)}\r\n\r\n".encode("ascii") + body


async def write(value: Any) -> None:
    """Send a JSON value to the connected client."""
    if _writer is None:
        raise RuntimeError("no client connection")
    _writer.write(encode_message(value))
    await _writer.drain()


async def _serve(
    reader: asyncio.StreamReader, writer: asyncio.StreamWriter, callback: Callback
) -> None:
    global _writer
    _writer = writer
    messages = MessageReader()
    pending: set[asyncio.Task[None]] = set()
    try:
        while chunk := await reader.read(_READ_SIZE):
            for message in messages.feed(chunk):
                task = asyncio.ensure_future(callback(message))
                pending.add(task)
                task.add_done_callback(pending.discard)
        if pending:
            await asyncio.gather(*pending)
    finally:
        _writer = None
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()


async def listen(callback: Callback) -> None:
    """Serve messages read from stdin, answering on stdout, until end of input."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(reader), sys.stdin.buffer
    )
    transport, protocol = await loop.connect_write_pipe(
        asyncio.streams.FlowControlMixin, sys.stdout.buffer
    )
    writer = asyncio.StreamWriter(transport, protocol, reader, loop)
    await _serve(reader, writer, callback)


async def listen_tcp(ip: str, port: int, callback: Callback) -> None:
    """Accept one client on ``ip:port`` and serve its messages until it disconnects."""
    loop = asyncio.get_running_loop()
    finished: asyncio.Future[None] = loop.create_future()
    accepted = False

    async def on_connection(
        reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        nonlocal accepted
        if accepted:
            writer.close()
            return
        accepted = True
        try:
            await _serve(reader, writer, callback)
        except BaseException as error:
            if not finished.done():
                finished.set_exception(error)
            raise
        else:
            if not finished.done():
                finished.set_result(None)

    server = await asyncio.start_server(on_connection, ip, port, backlog=1)
    try:
        await finished
    finally:
        server.close()
        await server.wait_closed()