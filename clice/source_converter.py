"""Conversion between byte offsets, editor positions and file URIs."""

from __future__ import annotations

import enum
import os
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = [
    "PositionEncoding",
    "Position",
    "Range",
    "LocalSourceRange",
    "SourceConverter",
    "to_uri",
    "to_path",
]

_URI_SAFE = frozenset(b"-_./")
_HEX = frozenset(b"0123456789abcdefABCDEF")


class PositionEncoding(enum.Enum):
    """The unit in which the ``character`` of a :class:`Position` is counted."""

    UTF8 = "utf-8"
    UTF16 = "utf-16"
    UTF32 = "utf-32"


@dataclass(frozen=True, order=True)
class Position:
    """A zero-based line and character position."""

    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """A span between two positions."""

    start: Position
    end: Position


@dataclass(frozen=True)
class LocalSourceRange:
    """A span of byte offsets inside one file."""

    begin: int
    end: int


def _as_bytes(content: str | bytes) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else bytes(content)


def _codepoints(data: bytes) -> Iterator[tuple[int, int]]:
    """Yield the UTF-8 and UTF-16 lengths of each code point in ``data``.

    Bytes that cannot start a sequence are counted as single characters.
    """
    index = 0
    size = len(data)
    while index < size:
        byte = data[index]
        if byte < 0x80:
            yield 1, 1
            index += 1
            continue
        length = 8 - ((~byte) & 0xFF).bit_length()
        if length < 2 or length > 4:
            yield 1, 1
            index += 1
            continue
        index += length
        yield length, 2 if length == 4 else 1


class SourceConverter:
    """Converts between byte offsets and positions in a given encoding."""

    def __init__(self, kind: PositionEncoding = PositionEncoding.UTF16) -> None:
        self.kind = kind

    def __repr__(self) -> str:
        return f"SourceConverter({self.kind})"

    def remeasure(self, content: str | bytes) -> int:
        """Return the length of ``content`` in units of the converter's encoding."""
        data = _as_bytes(content)
        if self.kind is PositionEncoding.UTF8:
            return len(data)
        if self.kind is PositionEncoding.UTF16:
            return sum(utf16 for _, utf16 in _codepoints(data))
        return sum(1 for _ in _codepoints(data))

    def to_position(self, content: str | bytes, offset: int) -> Position:
        """Return the position of the byte ``offset`` in the UTF-8 ``content``."""
        data = _as_bytes(content)
        if offset < 0 or offset > len(data):
            raise ValueError(f"offset {offset} is out of range")
        line_start = data.rfind(b"\n", 0, offset) + 1
        line = data.count(b"\n", 0, offset)
        column = offset - line_start
        character = self.remeasure(data[line_start:offset]) if column > 0 else 0
        return Position(line, character)

    def to_range(self, source_range: LocalSourceRange, content: str | bytes) -> Range:
        """Return the range covering the byte offsets of ``source_range``."""
        data = _as_bytes(content)
        return Range(
            start=self.to_position(data, source_range.begin),
            end=self.to_position(data, source_range.end),
        )

    def to_offset(self, content: str | bytes, position: Position) -> int:
        """Return the byte offset in the UTF-8 ``content`` of ``position``."""
        data = _as_bytes(content)
        if position.line < 0 or position.character < 0:
            raise ValueError(f"invalid position {position}")

        start = 0
        for _ in range(position.line):
            newline = data.find(b"\n", start)
            if newline < 0:
                raise ValueError(f"line {position.line} is out of range")
            start = newline + 1

        line_end = data.find(b"\n", start)
        line = data[start:] if line_end < 0 else data[start:line_end]
        if position.character > len(line):
            raise ValueError(f"character {position.character} is out of range")

        if self.kind is PositionEncoding.UTF8:
            return start + position.character

        offset = start
        remaining = position.character
        for utf8, utf16 in _codepoints(line):
            if remaining == 0:
                break
            step = utf16 if self.kind is PositionEncoding.UTF16 else 1
            if remaining < step:
                raise ValueError(f"character {position.character} splits a code point")
            remaining -= step
            offset += utf8
        if remaining:
            raise ValueError(f"character {position.character} is out of range")
        return offset


def to_uri(fspath: str | os.PathLike[str]) -> str:
    """Return the ``file://`` URI of an absolute path."""
    path = os.fspath(fspath)
    if not os.path.isabs(path):
        raise ValueError(f"path is not absolute: {path!r}")

    parts = ["file://"]
    if os.name == "nt":
        parts.append("/")
    for byte in os.fsencode(path):
        if byte == ord("\\"):
            parts.append("/")
        elif (byte < 0x80 and chr(byte).isalnum()) or byte in _URI_SAFE:
            parts.append(chr(byte))
        else:
            parts.append(f"%{byte:02X}")
    return "".join(parts)


def _decode_percent(text: str) -> bytes:
    data = text.encode("utf-8", "surrogateescape")
    result = bytearray()
    index = 0
    size = len(data)
    while index < size:
        byte = data[index]
        if (
            byte == ord("%")
            and index + 2 < size
            and data[index + 1] in _HEX
            and data[index + 2] in _HEX
        ):
            result.append(int(data[index + 1 : index + 3], 16))
            index += 3
            continue
        result.append(byte)
        index += 1
    return bytes(result)


def to_path(uri: str) -> str:
    """Return the real file-system path named by a ``file://`` URI.

    Raises ``ValueError`` for a URI of another form and ``OSError`` when the
    path does not exist.
    """
    prefix = "file:///" if os.name == "nt" else "file://"
    if not uri.startswith(prefix):
        raise ValueError(f"not a file URI: {uri!r}")
    decoded = os.fsdecode(_decode_percent(uri[len(prefix):]))
    return os.path.realpath(decoded, strict=True)