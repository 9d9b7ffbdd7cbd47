"""Tests for the content reader and writer."""

from __future__ import annotations

import os

import pytest

from hubfs.content import ContentReader, ContentWriter
from hubfs.fs.exceptions import UnsupportedOperationError


class TestContentReaderLines:
    def test_split_on_newline(self):
        reader = ContentReader(b"a\nb\nc", encoding="utf-8")
        assert reader.lines == ["a", "b", "c"]
        assert reader.data is None

    def test_custom_delimiter(self):
        reader = ContentReader(b"a;b", encoding="utf-8", delimiter=";")
        assert reader.read() == ["a", "b"]

    def test_read_all_does_not_advance(self):
        reader = ContentReader(b"a\nb", encoding="utf-8")
        reader.read()
        assert reader.position == 0

    def test_read_count_advances(self):
        reader = ContentReader(b"a\nb\nc", encoding="utf-8")
        assert reader.read(2) == ["a", "b"]
        assert reader.read(2) == ["c"]
        assert reader.read(2) == []
        assert reader.position == 3


class TestContentReaderBytes:
    def test_raw(self):
        reader = ContentReader(b"\x00\x01\x02")
        assert reader.data == b"\x00\x01\x02"
        assert reader.lines is None
        assert reader.read(2) == b"\x00\x01"


class TestContentReaderSeek:
    @pytest.mark.parametrize(
        ("offset", "whence", "expected"),
        [
            pytest.param(2, os.SEEK_SET, 2, id="set"),
            pytest.param(1, os.SEEK_END, 4, id="end"),
            pytest.param(99, os.SEEK_SET, 5, id="clamp-high"),
            pytest.param(-3, os.SEEK_SET, 0, id="clamp-low"),
        ],
    )
    def test_seek(self, offset: int, whence: int, expected: int):
        reader = ContentReader(b"abcde")
        assert reader.seek(offset, whence) == expected

    def test_seek_current(self):
        reader = ContentReader(b"abcde")
        reader.read(2)
        assert reader.seek(1, os.SEEK_CUR) == 3
        assert reader.read(1) == b"d"

    def test_bad_whence(self):
        with pytest.raises(ValueError):
            ContentReader(b"abc").seek(0, 7)


class TestContentReaderClose:
    def test_read_after_close(self):
        reader = ContentReader(b"abc")
        reader.close()
        with pytest.raises(ValueError):
            reader.read()

    def test_context_manager(self):
        with ContentReader(b"abc") as reader:
            assert reader.read(1) == b"a"
        assert reader.data is None


class TestContentWriter:
    def test_strings_get_newlines(self):
        written: list[bytes] = []
        writer = ContentWriter(written.append)
        assert writer.write(["a", "b"]) == 4
        writer.close()
        assert written == [b"a\nb\n"]

    def test_single_string(self):
        writer = ContentWriter(lambda data: None)
        writer.write("héllo")
        assert writer.buffer == "héllo\n".encode()

    def test_bytes_and_ints(self):
        writer = ContentWriter(lambda data: None)
        writer.write(b"ab")
        writer.write([0x63, b"d"])
        assert writer.buffer == b"abcd"

    def test_rejects_other_types(self):
        writer = ContentWriter(lambda data: None)
        with pytest.raises(TypeError):
            writer.write([1.5])

    def test_seek_unsupported(self):
        with pytest.raises(UnsupportedOperationError):
            ContentWriter(lambda data: None).seek(0)

    def test_close_once(self):
        written: list[bytes] = []
        writer = ContentWriter(written.append)
        writer.write(b"x")
        writer.close()
        writer.close()
        assert written == [b"x"]

    def test_write_after_close(self):
        writer = ContentWriter(lambda data: None)
        writer.close()
        with pytest.raises(ValueError):
            writer.write(b"x")

    def test_context_manager_flushes(self):
        written: list[bytes] = []
        with ContentWriter(written.append) as writer:
            writer.write("line")
        assert written == [b"line\n"]

    def test_error_discards(self):
        written: list[bytes] = []
        with pytest.raises(RuntimeError):
            with ContentWriter(written.append) as writer:
                writer.write("line")
                raise RuntimeError("abort")
        assert written == []
