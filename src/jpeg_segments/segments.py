"""Typed segment records and the marker-to-parser dispatch table.

Every record is immutable once parsed. ``parse`` expects the stream to sit on
the 0xFF prefix of its marker and leaves it on the prefix of the next one;
``serialize`` writes back exactly the bytes that were consumed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import BinaryIO, Callable, Mapping, Optional, Tuple, Union

from .binio import (
    read_bytes, read_u8, read_u16, read_u16le, tell,
    write_bytes, write_u8, write_u16, write_u16le,
)
from .errors import InvariantViolation, StructuralError
from .markers import (
    APP0, APPLICATION_MARKERS, DHT, DQT, EOI, FIXED_SIZE_MARKERS, FRAME_MARKERS,
    MARKER_PREFIX, SOI, SOS, marker_name,
)
from .scan import extract_scan_data

logger = logging.getLogger(__name__)

JFIF_IDENTIFIER = b"JFIF\x00"
# 0 = no units, 1 = dots per inch, 2 = dots per cm
JFIF_UNITS = (0, 1, 2)
# identifier(5) + version(2) + units(1) + densities(4) + thumbnail dims(2)
JFIF_HEADER_SIZE = 14
# precision(1) + height(2) + width(2) + component count(1)
FRAME_HEADER_SIZE = 6
# table info(1) + symbol counts(16)
HUFFMAN_HEADER_SIZE = 17
MAX_HUFFMAN_SYMBOLS = 256
MAX_LENGTH = 0xFFFF

OPAQUE_MARKERS = (APPLICATION_MARKERS - {APP0}) | {DQT}


def _preview(data: Optional[bytes], limit: int = 16) -> str:
    if data is None:
        return "None"
    text = data[:limit].hex()
    if len(data) > limit:
        text += "..."
    return "[%d]%s" % (len(data), text)


def _read_marker(f: BinaryIO, expected) -> Tuple[int, int]:
    """Consume the prefix and marker byte, returning (offset, marker)."""
    pos = tell(f)
    raw = read_bytes(f, 2)
    if raw[0] != MARKER_PREFIX:
        raise StructuralError("Invalid marker prefix", pos, raw)
    if raw[1] not in expected:
        raise StructuralError("Unexpected marker %s" % marker_name(raw[1]), pos, raw)
    return pos, raw[1]


def _read_length(f: BinaryIO, pos: int, marker: int, header_size: int = 0) -> int:
    # the length word counts itself, so the payload is length - 2
    length = read_u16(f)
    if length < 2:
        raise StructuralError(
            "%s declares length %d, shorter than its own length field"
            % (marker_name(marker), length), pos)
    if length - 2 < header_size:
        raise StructuralError(
            "%s declares length %d, too short for its %d-byte header"
            % (marker_name(marker), length, header_size), pos)
    return length


def _valid_length(length: int, payload_size: int) -> bool:
    return 2 <= length <= MAX_LENGTH and length - 2 == payload_size


class _Located:
    """Accessors shared by every segment record."""

    def marker_id(self) -> int:
        return self.marker

    def offset(self) -> int:
        return self.pos

    def name(self) -> str:
        return marker_name(self.marker)

    def span(self) -> int:
        """Bytes consumed from the stream by this segment's parser."""
        return self.encoded_length()

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class MarkerSegment(_Located):
    """Start-of-image or end-of-image: two bytes, no length, no payload."""

    marker: int
    pos: int = 0

    def validate(self) -> bool:
        return self.marker in FIXED_SIZE_MARKERS

    def payload(self) -> Optional[bytes]:
        return None

    def encoded_length(self) -> int:
        return 2

    def describe(self) -> str:
        return "<%s:%d>" % (self.name(), self.pos)

    @classmethod
    def parse(cls, f: BinaryIO) -> "MarkerSegment":
        pos, marker = _read_marker(f, FIXED_SIZE_MARKERS)
        return cls(marker, pos)

    def serialize(self, sink: BinaryIO) -> None:
        write_u8(sink, MARKER_PREFIX)
        write_u8(sink, self.marker)


@dataclass(frozen=True)
class OpaqueSegment(_Located):
    """Length-delimited segment kept as raw bytes (APP1..APP15, DQT)."""

    marker: int
    pos: int
    length: int
    data: bytes

    def validate(self) -> bool:
        return self.marker in OPAQUE_MARKERS and _valid_length(self.length, len(self.data))

    def payload(self) -> Optional[bytes]:
        return self.data

    def encoded_length(self) -> int:
        return self.length + 2

    def describe(self) -> str:
        return "<%s:%d[%d] data=%s>" % (self.name(), self.pos, self.length, _preview(self.data))

    @classmethod
    def parse(cls, f: BinaryIO) -> "OpaqueSegment":
        pos, marker = _read_marker(f, OPAQUE_MARKERS)
        length = _read_length(f, pos, marker)
        data = read_bytes(f, length - 2)
        return cls(marker, pos, length, data)

    def serialize(self, sink: BinaryIO) -> None:
        write_u8(sink, MARKER_PREFIX)
        write_u8(sink, self.marker)
        write_u16(sink, self.length)
        write_bytes(sink, self.data)


@dataclass(frozen=True)
class JfifSegment(_Located):
    """APP0 segment carrying the JFIF header and an optional RGB thumbnail."""

    pos: int
    length: int
    identifier: bytes
    version: Tuple[int, int]
    units: int
    x_density: int
    y_density: int
    x_thumbnail: int
    y_thumbnail: int
    thumbnail: bytes = b""
    marker: int = field(default=APP0, init=False)

    @property
    def thumbnail_size(self) -> int:
        return 3 * self.x_thumbnail * self.y_thumbnail

    def validate(self) -> bool:
        return (self.identifier == JFIF_IDENTIFIER
                and self.units in JFIF_UNITS
                and len(self.version) == 2
                and len(self.thumbnail) == self.thumbnail_size
                and _valid_length(self.length, JFIF_HEADER_SIZE + len(self.thumbnail)))

    def payload(self) -> Optional[bytes]:
        return self.thumbnail

    def encoded_length(self) -> int:
        return self.length + 2

    def describe(self) -> str:
        return ("<%s:%d[%d] %r Version=%d.%d Units=%d Xdensity=%d Ydensity=%d "
                "Xthumbnail=%d Ythumbnail=%d Data=%s>" % (
                    self.name(), self.pos, self.length, self.identifier,
                    self.version[0], self.version[1], self.units,
                    self.x_density, self.y_density,
                    self.x_thumbnail, self.y_thumbnail, _preview(self.thumbnail)))

    @classmethod
    def parse(cls, f: BinaryIO) -> "JfifSegment":
        pos, _ = _read_marker(f, (APP0,))
        length = _read_length(f, pos, APP0, JFIF_HEADER_SIZE)
        identifier = read_bytes(f, 5)
        if identifier != JFIF_IDENTIFIER:
            raise InvariantViolation(
                "Invalid APP0 identifier", "jfif-identifier",
                {"identifier": identifier}, pos)
        version = (read_u8(f), read_u8(f))
        units = read_u8(f)
        if units not in JFIF_UNITS:
            raise InvariantViolation(
                "Invalid APP0 density units", "jfif-units", {"units": units}, pos)
        x_density = read_u16(f)
        y_density = read_u16(f)
        x_thumbnail = read_u8(f)
        y_thumbnail = read_u8(f)

        thumbnail_size = 3 * x_thumbnail * y_thumbnail
        if length - 2 - JFIF_HEADER_SIZE != thumbnail_size:
            raise StructuralError(
                "APP0 declares length %d but a %dx%d thumbnail needs %d"
                % (length, x_thumbnail, y_thumbnail,
                   2 + JFIF_HEADER_SIZE + thumbnail_size), pos)
        thumbnail = read_bytes(f, thumbnail_size)
        return cls(pos, length, identifier, version, units, x_density, y_density,
                   x_thumbnail, y_thumbnail, thumbnail)

    def serialize(self, sink: BinaryIO) -> None:
        write_u8(sink, MARKER_PREFIX)
        write_u8(sink, self.marker)
        write_u16(sink, self.length)
        write_bytes(sink, self.identifier)
        write_u8(sink, self.version[0])
        write_u8(sink, self.version[1])
        write_u8(sink, self.units)
        write_u16(sink, self.x_density)
        write_u16(sink, self.y_density)
        write_u8(sink, self.x_thumbnail)
        write_u8(sink, self.y_thumbnail)
        write_bytes(sink, self.thumbnail)


@dataclass(frozen=True)
class FrameSegment(_Located):
    """Start-of-frame header; the per-component table is left opaque.

    Height and width are read as little-endian words and written back the
    same way, so they round-trip unchanged but appear byte-swapped.
    """

    marker: int
    pos: int
    length: int
    precision: int
    height: int
    width: int
    component_count: int
    data: bytes

    def validate(self) -> bool:
        return (self.marker in FRAME_MARKERS
                and _valid_length(self.length, FRAME_HEADER_SIZE + len(self.data)))

    def payload(self) -> Optional[bytes]:
        return self.data

    def encoded_length(self) -> int:
        return self.length + 2

    def describe(self) -> str:
        return "<%s:%d[%d] b/px=%d (H%d x W%d) %d:data=%s>" % (
            self.name(), self.pos, self.length, self.precision,
            self.height, self.width, self.component_count, _preview(self.data))

    @classmethod
    def parse(cls, f: BinaryIO) -> "FrameSegment":
        pos, marker = _read_marker(f, FRAME_MARKERS)
        length = _read_length(f, pos, marker, FRAME_HEADER_SIZE)
        precision = read_u8(f)
        height = read_u16le(f)
        width = read_u16le(f)
        component_count = read_u8(f)
        data = read_bytes(f, length - 2 - FRAME_HEADER_SIZE)
        return cls(marker, pos, length, precision, height, width, component_count, data)

    def serialize(self, sink: BinaryIO) -> None:
        write_u8(sink, MARKER_PREFIX)
        write_u8(sink, self.marker)
        write_u16(sink, self.length)
        write_u8(sink, self.precision)
        write_u16le(sink, self.height)
        write_u16le(sink, self.width)
        write_u8(sink, self.component_count)
        write_bytes(sink, self.data)


@dataclass(frozen=True)
class HuffmanSegment(_Located):
    """DHT segment holding exactly one table; the symbols stay opaque."""

    pos: int
    length: int
    table_info: int
    counts: bytes
    data: bytes
    marker: int = field(default=DHT, init=False)

    @property
    def table_class(self) -> int:
        # 0 = DC, 1 = AC
        return (self.table_info >> 4) & 0x0F

    @property
    def table_id(self) -> int:
        return self.table_info & 0x0F

    @property
    def symbol_count(self) -> int:
        return sum(self.counts)

    def validate(self) -> bool:
        return (len(self.counts) == 16
                and self.symbol_count <= MAX_HUFFMAN_SYMBOLS
                and len(self.data) == self.symbol_count
                and _valid_length(self.length, HUFFMAN_HEADER_SIZE + len(self.data)))

    def payload(self) -> Optional[bytes]:
        return self.data

    def encoded_length(self) -> int:
        return self.length + 2

    def describe(self) -> str:
        return "<%s:%d[%d] %02x %s data=%s>" % (
            self.name(), self.pos, self.length, self.table_info,
            list(self.counts), _preview(self.data))

    @classmethod
    def parse(cls, f: BinaryIO) -> "HuffmanSegment":
        pos, _ = _read_marker(f, (DHT,))
        length = _read_length(f, pos, DHT, HUFFMAN_HEADER_SIZE)
        table_info = read_u8(f)
        counts = read_bytes(f, 16)
        total = sum(counts)
        if total > MAX_HUFFMAN_SYMBOLS:
            raise InvariantViolation(
                "Too many Huffman symbols", "huffman-symbol-limit",
                {"symbols": total, "limit": MAX_HUFFMAN_SYMBOLS}, pos)
        available = length - 2 - HUFFMAN_HEADER_SIZE
        if available != total:
            raise InvariantViolation(
                "Huffman symbol counts disagree with the declared length",
                "huffman-symbol-count", {"symbols": total, "payload": available}, pos)
        data = read_bytes(f, total)
        return cls(pos, length, table_info, counts, data)

    def serialize(self, sink: BinaryIO) -> None:
        write_u8(sink, MARKER_PREFIX)
        write_u8(sink, self.marker)
        write_u16(sink, self.length)
        write_u8(sink, self.table_info)
        write_bytes(sink, self.counts)
        write_bytes(sink, self.data)


@dataclass(frozen=True)
class ScanComponent:
    component_id: int
    # upper 4 bits = DC table, lower 4 bits = AC table
    selector: int

    @property
    def dc_table(self) -> int:
        return (self.selector >> 4) & 0x0F

    @property
    def ac_table(self) -> int:
        return self.selector & 0x0F


@dataclass(frozen=True)
class ScanSegment(_Located):
    """Start-of-scan header followed by its raw entropy-coded bytes.

    ``data`` holds the header tail (spectral selection, approximation) and
    ``image`` the scan bytes found up to the end-of-image marker. The encoded
    length covers the header only; ``span`` adds the scan bytes.
    """

    pos: int
    length: int
    components: Tuple[ScanComponent, ...]
    data: bytes
    image: bytes
    marker: int = field(default=SOS, init=False)

    def validate(self) -> bool:
        return (len(self.components) <= 0xFF
                and _valid_length(self.length, 1 + 2 * len(self.components) + len(self.data)))

    def payload(self) -> Optional[bytes]:
        return self.data

    def encoded_length(self) -> int:
        return self.length + 2

    def span(self) -> int:
        return self.length + 2 + len(self.image)

    def describe(self) -> str:
        components = ", ".join("%d:%02x" % (c.component_id, c.selector) for c in self.components)
        return "<%s:%d[%d] components[%d](%s) data=%s><IMAGE[%d]>" % (
            self.name(), self.pos, self.length, len(self.components), components,
            _preview(self.data), len(self.image))

    @classmethod
    def parse(cls, f: BinaryIO) -> "ScanSegment":
        pos, _ = _read_marker(f, (SOS,))
        length = _read_length(f, pos, SOS, 1)
        count = read_u8(f)
        available = length - 2 - 1
        if 2 * count > available:
            raise InvariantViolation(
                "Scan component count does not fit the declared length",
                "scan-components", {"components": count, "available": available}, pos)
        components = tuple(ScanComponent(read_u8(f), read_u8(f)) for _ in range(count))
        data = read_bytes(f, available - 2 * count)
        image = extract_scan_data(f)
        return cls(pos, length, components, data, image)

    def serialize(self, sink: BinaryIO) -> None:
        write_u8(sink, MARKER_PREFIX)
        write_u8(sink, self.marker)
        write_u16(sink, self.length)
        write_u8(sink, len(self.components))
        for component in self.components:
            write_u8(sink, component.component_id)
            write_u8(sink, component.selector)
        write_bytes(sink, self.data)
        write_bytes(sink, self.image)


Segment = Union[MarkerSegment, OpaqueSegment, JfifSegment, FrameSegment,
                HuffmanSegment, ScanSegment]


def _build_parsers():
    parsers = {
        SOI: MarkerSegment.parse,
        EOI: MarkerSegment.parse,
        APP0: JfifSegment.parse,
        DHT: HuffmanSegment.parse,
        SOS: ScanSegment.parse,
    }
    for marker in OPAQUE_MARKERS:
        parsers[marker] = OpaqueSegment.parse
    for marker in FRAME_MARKERS:
        parsers[marker] = FrameSegment.parse
    return parsers


PARSERS: Mapping[int, Callable[[BinaryIO], Segment]] = MappingProxyType(_build_parsers())


def describe(segment: Segment) -> str:
    return segment.describe()
