"""Unit tests for the byte and word helpers."""
import io

import pytest

from jpeg_segments.binio import (
    peek,
    read_bytes,
    read_u8,
    read_u16,
    read_u16le,
    stream_size,
    write_u8,
    write_u16,
    write_u16le,
)
from jpeg_segments.errors import StructuralError, TruncatedStreamError


class TestReadHelpers:
    """Tests for the read helpers."""

    def test_read_u8(self):
        f = io.BytesIO(b"\x42")
        assert read_u8(f) == 0x42

    def test_read_u8_max(self):
        f = io.BytesIO(b"\xFF")
        assert read_u8(f) == 255

    def test_read_u16_big_endian(self):
        """Test read_u16 is big-endian."""
        f = io.BytesIO(b"\x12\x34")
        assert read_u16(f) == 0x1234

    def test_read_u16le(self):
        """Test read_u16le is little-endian."""
        f = io.BytesIO(b"\x12\x34")
        assert read_u16le(f) == 0x3412

    def test_read_u16_max(self):
        f = io.BytesIO(b"\xFF\xFF")
        assert read_u16(f) == 65535

    def test_read_u8_truncated(self):
        f = io.BytesIO(b"")
        with pytest.raises(TruncatedStreamError):
            read_u8(f)

    def test_read_u16_truncated(self):
        """A short read is a structural error and an EOFError."""
        f = io.BytesIO(b"\x00\x00\x00")
        f.seek(2)
        with pytest.raises(StructuralError) as excinfo:
            read_u16(f)
        assert isinstance(excinfo.value, EOFError)
        assert excinfo.value.offset == 2
        assert excinfo.value.raw == b"\x00"

    def test_read_bytes_advances(self):
        f = io.BytesIO(b"abcdef")
        assert read_bytes(f, 4) == b"abcd"
        assert f.tell() == 4


class TestPeek:
    """Tests for peek and stream_size."""

    def test_peek_keeps_position(self):
        f = io.BytesIO(b"\x00\xFF\xD8\x01")
        f.seek(1)
        assert peek(f, ">BB") == (0xFF, 0xD8)
        assert f.tell() == 1

    def test_peek_truncated_restores_position(self):
        f = io.BytesIO(b"\xFF")
        with pytest.raises(TruncatedStreamError):
            peek(f, ">BB")
        assert f.tell() == 0

    def test_stream_size_keeps_position(self):
        f = io.BytesIO(b"12345")
        f.seek(3)
        assert stream_size(f) == 5
        assert f.tell() == 3


class TestWriteHelpers:
    """Tests for the write helpers."""

    def test_write_words(self):
        out = io.BytesIO()
        write_u8(out, 0xFF)
        write_u16(out, 0x1234)
        write_u16le(out, 0x1234)
        assert out.getvalue() == b"\xFF\x12\x34\x34\x12"
