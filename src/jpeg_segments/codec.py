"""Sequential decoding of a JPEG stream into segments, and the reverse."""
from __future__ import annotations

import io
import logging
import os
import struct
from pathlib import Path
from typing import BinaryIO, Union

from .binio import peek, stream_size, tell
from .container import JpegContainer
from .errors import EncodeError, StructuralError
from .markers import EOI, MARKER_PREFIX, SOI, marker_info, marker_name
from .segments import PARSERS

logger = logging.getLogger(__name__)


def decode(f: BinaryIO) -> JpegContainer:
    """Parse every segment from the start of ``f`` up to the end-of-image marker.

    Args:
        f: Seekable binary stream; decoding always starts at offset 0.

    Returns:
        JpegContainer with the segments in stream order. Bytes left after the
        end-of-image marker are not decoded; ``trailing_data`` reports them.
    """
    size = stream_size(f)
    f.seek(0, os.SEEK_SET)
    container = JpegContainer(size=size)

    while True:
        pos = tell(f)
        prefix, marker = peek(f, ">BB")
        raw = bytes([prefix, marker])
        if prefix != MARKER_PREFIX:
            raise StructuralError("Invalid marker prefix", pos, raw)
        parser = PARSERS.get(marker)
        if parser is None:
            raise StructuralError("Unknown marker %s" % marker_name(marker), pos, raw)
        if not container.segments and marker != SOI:
            raise StructuralError("Stream does not start with %s" % marker_name(SOI), pos, raw)
        if container.segments and marker == SOI:
            raise StructuralError("Unexpected second %s" % marker_name(SOI), pos, raw)

        segment = parser(f)
        logger.debug("Found %s: %s", marker_info(marker), segment.describe())
        container.segments.append(segment)
        if marker == EOI:
            break

    container.end = tell(f)
    if container.trailing_data:
        logger.warning("%d bytes of trailing data after %s at offset %d",
                       container.trailing_size, marker_name(EOI), container.end)
    else:
        logger.debug("Stream data exhausted at offset %d", container.end)
    return container


def decode_bytes(data: bytes) -> JpegContainer:
    return decode(io.BytesIO(data))


def encode(container: JpegContainer, sink: BinaryIO) -> None:
    """Write every segment of ``container`` to ``sink`` in order."""
    for segment in container.segments:
        if not segment.validate():
            raise EncodeError("Refusing to write invalid segment %s" % segment.describe(),
                              segment.offset())
        try:
            segment.serialize(sink)
        except struct.error as e:
            raise EncodeError("Cannot write %s: %s" % (segment.describe(), e),
                              segment.offset()) from e


def encode_bytes(container: JpegContainer) -> bytes:
    buf = io.BytesIO()
    encode(container, buf)
    return buf.getvalue()


def load(path: Union[str, Path]) -> JpegContainer:
    """Decode the JPEG file at ``path``."""
    with open(path, "rb") as f:
        size = stream_size(f)
        logger.info("Loading %s: %d bytes", path, size)
        container = decode(f)
    container.path = str(path)
    return container


def save_to(container: JpegContainer, path: Union[str, Path]) -> None:
    """Encode ``container`` into a new file at ``path``.

    The whole image is encoded in memory first, so a failure leaves no file.
    """
    data = encode_bytes(container)
    with open(path, "wb") as f:
        f.write(data)
    logger.info("Saved %d segments to %s: %d bytes", len(container.segments), path, len(data))


def save(container: JpegContainer) -> None:
    # Writing back over the source path is not supported yet.
    logger.info("save(%s): nothing written", container.path)
