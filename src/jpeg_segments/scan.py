"""Extraction of the entropy-coded bytes that follow a start-of-scan header.

Inside entropy-coded data a literal 0xFF is always followed by a 0x00 stuffing
byte, a restart marker (0xD0-0xD7) or another 0xFF fill byte. Bytes are read one
at a time and classified in pairs so that none of those sequences ends the scan;
only 0xFF 0xD9 (end of image) does, and the stream is then rewound so those two
bytes are parsed again as the terminal segment.
"""
from __future__ import annotations

import logging
import os
from typing import BinaryIO

from .errors import TruncatedStreamError
from .markers import EOI, MARKER_PREFIX, RESTART_MARKERS, STUFFING, marker_name

logger = logging.getLogger(__name__)


def _next_byte(f: BinaryIO, start: int, image: bytearray) -> int:
    byte = f.read(1)
    if not byte:
        raise TruncatedStreamError(
            "Stream ended inside scan data after %d bytes without %s"
            % (len(image), marker_name(EOI)), start, bytes(image[-8:]))
    return byte[0]


def extract_scan_data(f: BinaryIO) -> bytes:
    """Consume scan data up to, not including, the next end-of-image marker.

    Returns the consumed bytes; ``f`` is left positioned on the 0xFF of the
    end-of-image marker.
    """
    start = f.tell()
    image = bytearray()
    pending_prefix = False

    while True:
        byte = _next_byte(f, start, image)

        if not pending_prefix:
            if byte == MARKER_PREFIX:
                pending_prefix = True
            else:
                image.append(byte)
            continue

        if byte == EOI:
            f.seek(-2, os.SEEK_CUR)
            logger.debug("Scan data at offset %d: %d bytes", start, len(image))
            return bytes(image)

        # the held-back 0xFF belongs to the scan data
        image.append(MARKER_PREFIX)
        if byte == MARKER_PREFIX:
            # fill byte, the new 0xFF may still open a marker
            continue

        if byte != STUFFING and byte not in RESTART_MARKERS:
            logger.debug("Marker %s inside scan data at offset %d kept as data",
                         marker_name(byte), f.tell() - 2)
        image.append(byte)
        pending_prefix = False
