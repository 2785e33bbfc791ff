"""Byte and word helpers over seekable binary streams.

Marker lengths are big-endian words; the start-of-frame dimensions are read
and written little-endian so they round-trip exactly as stored.
"""
from __future__ import annotations

import os
import struct
from typing import BinaryIO, Tuple

from .errors import TruncatedStreamError


def tell(f: BinaryIO) -> int:
    """Return the current position of ``f``."""
    return f.tell()


def stream_size(f: BinaryIO) -> int:
    """Return the total length of ``f`` without moving its position."""
    here = f.tell()
    size = f.seek(0, os.SEEK_END)
    f.seek(here, os.SEEK_SET)
    return size


def read_bytes(f: BinaryIO, size: int) -> bytes:
    pos = f.tell()
    data = f.read(size)
    if len(data) != size:
        raise TruncatedStreamError(
            "Unexpected length while reading %d bytes, got %d" % (size, len(data)),
            pos, data)
    return data


def read_u8(f: BinaryIO) -> int:
    return read_bytes(f, 1)[0]


def read_u16(f: BinaryIO) -> int:
    b = read_bytes(f, 2)
    return (b[0] << 8) | b[1]


def read_u16le(f: BinaryIO) -> int:
    b = read_bytes(f, 2)
    return b[0] | (b[1] << 8)


def peek(f: BinaryIO, fmt: str) -> Tuple:
    """Unpack ``fmt`` at the current position, leaving the position unchanged."""
    pos = f.tell()
    try:
        data = read_bytes(f, struct.calcsize(fmt))
    finally:
        f.seek(pos, os.SEEK_SET)
    return struct.unpack(fmt, data)


def write_bytes(sink: BinaryIO, data: bytes) -> None:
    sink.write(data)


def write_u8(sink: BinaryIO, value: int) -> None:
    sink.write(struct.pack(">B", value))


def write_u16(sink: BinaryIO, value: int) -> None:
    sink.write(struct.pack(">H", value))


def write_u16le(sink: BinaryIO, value: int) -> None:
    sink.write(struct.pack("<H", value))
