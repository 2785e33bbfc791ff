"""Byte-level comparison of two encodings of an image, and hex dumps."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .container import JpegContainer
from .segments import Segment


@dataclass(frozen=True)
class ByteDifference:
    offset: int
    # None when the offset lies past the end of that buffer
    expected: Optional[int]
    actual: Optional[int]
    segment: Optional[Segment]

    def __str__(self) -> str:
        def fmt(v):
            return "--" if v is None else "%02x" % v
        return "%5d %08x %s %s @ %s" % (self.offset, self.offset, fmt(self.expected),
                                        fmt(self.actual), self.segment)


def compare(container: JpegContainer, original: bytes, rewritten: bytes) -> List[ByteDifference]:
    """List every offset where ``rewritten`` differs from ``original``.

    Each difference is mapped to the segment of ``container`` (decoded from
    ``original``) that owns the offset. A length mismatch adds one entry at the
    first offset past the shorter buffer.
    """
    a = np.frombuffer(original, dtype=np.uint8)
    b = np.frombuffer(rewritten, dtype=np.uint8)
    common = min(a.size, b.size)

    offsets = np.flatnonzero(a[:common] != b[:common])
    diffs = [ByteDifference(int(o), int(a[o]), int(b[o]), container.segment_at(int(o)))
             for o in offsets]

    if a.size != b.size:
        diffs.append(ByteDifference(
            common,
            int(a[common]) if common < a.size else None,
            int(b[common]) if common < b.size else None,
            container.segment_at(common)))
    return diffs


def hexdump(data: bytes, title: str = "") -> str:
    """Render ``data`` sixteen bytes per row, offset first, printable text last.

    Every byte is preceded by one space and short rows are padded so the text
    column always starts at the same place.
    """
    lines = ["******** %s (%d)" % (title, len(data))]
    for offset in range(0, len(data), 16):
        part = data[offset:offset + 16]
        text = "".join(chr(c) if 0x20 <= c <= 0x7E else "." for c in part)
        row = "%08x" % offset + "".join(" %02x" % c for c in part)
        lines.append("%-56s |%-16s|" % (row, text))
    lines.append("%08x = %d" % (len(data), len(data)))
    return "\n".join(lines) + "\n"
