"""Lossless reading and rewriting of JPEG/JFIF marker segments."""
from .codec import decode, decode_bytes, encode, encode_bytes, load, save, save_to
from .container import JpegContainer, segment_at
from .errors import (
    EncodeError, InvariantViolation, JpegSegmentError, StructuralError, TruncatedStreamError,
)
from .inject import Rational, inject
from .segments import (
    FrameSegment, HuffmanSegment, JfifSegment, MarkerSegment, OpaqueSegment,
    ScanComponent, ScanSegment, Segment, describe,
)

__all__ = [
    'decode', 'decode_bytes', 'encode', 'encode_bytes', 'load', 'save', 'save_to',
    'JpegContainer', 'segment_at', 'describe', 'inject', 'Rational',
    'JpegSegmentError', 'StructuralError', 'TruncatedStreamError',
    'InvariantViolation', 'EncodeError',
    'Segment', 'MarkerSegment', 'OpaqueSegment', 'JfifSegment', 'FrameSegment',
    'HuffmanSegment', 'ScanComponent', 'ScanSegment',
]
