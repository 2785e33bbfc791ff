"""Exceptions raised while decoding or encoding a JPEG segment stream."""
from __future__ import annotations

from typing import Any, Dict, Optional


class JpegSegmentError(ValueError):
    """Subclass of ValueError with the following additional properties:

    msg: The unformatted error message
    offset: Absolute stream offset where the problem was found (or None)
    raw: The offending bytes, possibly empty
    """

    def __init__(self, msg: str, offset: Optional[int] = None, raw: bytes = b""):
        errmsg = msg
        if offset is not None:
            errmsg = "%s: offset %d" % (errmsg, offset)
        if raw:
            errmsg = "%s (bytes %s)" % (errmsg, raw.hex())
        ValueError.__init__(self, errmsg)
        self.msg = msg
        self.offset = offset
        self.raw = bytes(raw)


class StructuralError(JpegSegmentError):
    """Wrong prefix byte, unknown marker, inconsistent length or short stream."""


class TruncatedStreamError(StructuralError, EOFError):
    """The stream ended before a segment was complete."""


class InvariantViolation(JpegSegmentError):
    """A segment parsed cleanly but its fields break a format rule.

    invariant: Short name of the broken rule
    values: The field values that broke it
    """

    def __init__(
        self,
        msg: str,
        invariant: str,
        values: Optional[Dict[str, Any]] = None,
        offset: Optional[int] = None,
    ):
        self.invariant = invariant
        self.values = dict(values or {})
        details = ", ".join("%s=%r" % item for item in self.values.items())
        if details:
            msg = "%s [%s: %s]" % (msg, invariant, details)
        else:
            msg = "%s [%s]" % (msg, invariant)
        super().__init__(msg, offset)


class EncodeError(JpegSegmentError):
    """A segment cannot be written back out as-is."""
