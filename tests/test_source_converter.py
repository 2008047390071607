import os

import pytest

from clice.source_converter import (
    LocalSourceRange,
    Position,
    PositionEncoding,
    Range,
    SourceConverter,
    to_path,
    to_uri,
)

SAMPLES = [
    "",
    "int x = 1;\n",
    "line one\nline two\n\nlast",
    "caf\u00e9 = \u4e2d\u6587;\nx",
    "emoji \U0001F600 here\n\U0001F600\U0001F600 end",
]

ENCODINGS = list(PositionEncoding)


def _boundaries(text):
    offsets = [0]
    total = 0
    for char in text:
        total += len(char.encode("utf-8"))
        offsets.append(total)
    return offsets


@pytest.mark.parametrize("text", SAMPLES)
def test_remeasure_utf8_is_byte_length(text):
    converter = SourceConverter(PositionEncoding.UTF8)
    assert converter.remeasure(text) == len(text.encode("utf-8"))


@pytest.mark.parametrize("text", SAMPLES)
def test_remeasure_utf32_counts_code_points(text):
    converter = SourceConverter(PositionEncoding.UTF32)
    assert converter.remeasure(text) == len(text)


@pytest.mark.parametrize("text", SAMPLES)
def test_remeasure_utf16_counts_code_units(text):
    converter = SourceConverter(PositionEncoding.UTF16)
    assert converter.remeasure(text) == len(text.encode("utf-16-le")) // 2


def test_astral_code_point_takes_two_utf16_units():
    text = "\U0001F600"
    assert SourceConverter(PositionEncoding.UTF16).remeasure(text) == 2
    assert SourceConverter(PositionEncoding.UTF32).remeasure(text) == 1


def test_start_of_content_is_origin():
    converter = SourceConverter()
    assert converter.to_position("", 0) == Position(0, 0)
    assert converter.to_position("abc", 0) == Position(0, 0)


@pytest.mark.parametrize("encoding", ENCODINGS)
@pytest.mark.parametrize("text", SAMPLES)
def test_offset_position_round_trip(encoding, text):
    converter = SourceConverter(encoding)
    for offset in _boundaries(text):
        position = converter.to_position(text, offset)
        assert converter.to_offset(text, position) == offset


@pytest.mark.parametrize("encoding", ENCODINGS)
def test_position_after_newline_starts_line(encoding):
    converter = SourceConverter(encoding)
    text = SAMPLES[2]
    data = text.encode("utf-8")
    for offset, byte in enumerate(data):
        if byte == ord("\n"):
            position = converter.to_position(text, offset + 1)
            assert position.character == 0
            assert position.line == text[: offset + 1].count("\n")


@pytest.mark.parametrize("encoding", ENCODINGS)
def test_positions_are_monotonic(encoding):
    converter = SourceConverter(encoding)
    text = SAMPLES[4]
    positions = [converter.to_position(text, offset) for offset in _boundaries(text)]
    assert positions == sorted(positions)
    assert len(set(positions)) == len(positions)


def test_bytes_and_str_agree():
    converter = SourceConverter()
    text = SAMPLES[3]
    data = text.encode("utf-8")
    for offset in _boundaries(text):
        assert converter.to_position(text, offset) == converter.to_position(data, offset)


def test_to_range_uses_both_ends():
    converter = SourceConverter(PositionEncoding.UTF32)
    text = SAMPLES[4]
    ends = _boundaries(text)
    source_range = LocalSourceRange(begin=ends[2], end=ends[-1])
    result = converter.to_range(source_range, text)
    assert result == Range(
        start=converter.to_position(text, ends[2]),
        end=converter.to_position(text, ends[-1]),
    )


def test_offset_beyond_content_raises():
    with pytest.raises(ValueError):
        SourceConverter().to_position("abc", 4)


def test_line_out_of_range_raises():
    with pytest.raises(ValueError):
        SourceConverter().to_offset("one\ntwo", Position(2, 0))


def test_character_out_of_range_raises():
    with pytest.raises(ValueError):
        SourceConverter(PositionEncoding.UTF8).to_offset("ab\ncd", Position(0, 3))


def test_character_inside_surrogate_pair_raises():
    with pytest.raises(ValueError):
        SourceConverter(PositionEncoding.UTF16).to_offset("\U0001F600x", Position(0, 1))


def test_uri_round_trip(tmp_path):
    target = tmp_path / "a b+c.cpp"
    target.write_text("int main() {}\n")
    uri = to_uri(str(target))
    assert uri.startswith("file://")
    assert " " not in uri
    assert "%20" in uri
    assert to_path(uri) == os.path.realpath(target)


def test_uri_of_directory_round_trip(tmp_path):
    assert to_path(to_uri(tmp_path)) == os.path.realpath(tmp_path)


def test_relative_path_is_rejected():
    with pytest.raises(ValueError):
        to_uri("relative/path.cpp")


def test_non_file_uri_is_rejected():
    with pytest.raises(ValueError):
        to_path("http://example.com/a.cpp")


def test_missing_file_raises(tmp_path):
    uri = to_uri(str(tmp_path / "missing.cpp"))
    with pytest.raises(OSError):
        to_path(uri)