# -----------------------------------------------------------------
# |segment name|marker value |has length|description              |
# -----------------------------------------------------------------
# |SOI         |0xFFD8       |No        | start of image          |
# |EOI         |0xFFD9       |No        | end of image            |
# |APP0..APP15 |0xFFE0-0xFFEF|Yes       | application data (JFIF) |
# |DQT         |0xFFDB       |Yes       | quantization table      |
# |SOF0..SOF15 |0xFFC0-0xFFCF|Yes       | frame header            |
# |DHT         |0xFFC4       |Yes       | huffman table           |
# |SOS         |0xFFDA       |Yes       | start of scan           |
# -----------------------------------------------------------------
# Markers without a length are 2 bytes long.
# A length word follows every other marker and counts its own 2 bytes.
from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Mapping, Optional

MARKER_PREFIX = 0xFF

SOI = 0xD8
EOI = 0xD9

APP0 = 0xE0
APP1 = 0xE1
APP2 = 0xE2
APP3 = 0xE3
APP4 = 0xE4
APP5 = 0xE5
APP6 = 0xE6
APP7 = 0xE7
APP8 = 0xE8
APP9 = 0xE9
APP10 = 0xEA
APP11 = 0xEB
APP12 = 0xEC
APP13 = 0xED
APP14 = 0xEE
APP15 = 0xEF

DQT = 0xDB

SOF0 = 0xC0  # baseline DCT
SOF1 = 0xC1
SOF2 = 0xC2  # progressive DCT
SOF3 = 0xC3
SOF5 = 0xC5
SOF6 = 0xC6
SOF7 = 0xC7
SOF9 = 0xC9
SOF10 = 0xCA
SOF11 = 0xCB
SOF13 = 0xCD
SOF14 = 0xCE
SOF15 = 0xCF

DHT = 0xC4
SOS = 0xDA

# Known to the format but not decodable here; named for diagnostics only.
JPG = 0xC8
DAC = 0xCC
DNL = 0xDC
DRI = 0xDD
DHP = 0xDE
EXP = 0xDF
COM = 0xFE
TEM = 0x01
RST0 = 0xD0
JPG0 = 0xF0

STUFFING = 0x00


class MarkerFamily(enum.Enum):
    IMAGE_BOUNDARY = "image boundary"
    APPLICATION = "application data"
    QUANTIZATION = "quantization table"
    FRAME = "frame header"
    HUFFMAN = "huffman table"
    SCAN = "start of scan"


APPLICATION_MARKERS = frozenset(range(APP0, APP15 + 1))

# SOF9 is left out: it is named but never decoded.
FRAME_MARKERS = frozenset([
    SOF0, SOF1, SOF2, SOF3, SOF5, SOF6, SOF7,
    SOF10, SOF11, SOF13, SOF14, SOF15,
])

RESTART_MARKERS = frozenset(range(RST0, RST0 + 8))

FIXED_SIZE_MARKERS = frozenset([SOI, EOI])

_FAMILIES = {SOI: MarkerFamily.IMAGE_BOUNDARY, EOI: MarkerFamily.IMAGE_BOUNDARY,
             DQT: MarkerFamily.QUANTIZATION, DHT: MarkerFamily.HUFFMAN,
             SOS: MarkerFamily.SCAN}
_FAMILIES.update((m, MarkerFamily.APPLICATION) for m in APPLICATION_MARKERS)
_FAMILIES.update((m, MarkerFamily.FRAME) for m in FRAME_MARKERS)

MARKER_FAMILIES: Mapping[int, MarkerFamily] = MappingProxyType(_FAMILIES)

RECOGNIZED_MARKERS = frozenset(MARKER_FAMILIES)


def _build_names():
    names = {
        SOI: "SOI", EOI: "EOI", DQT: "DQT", DHT: "DHT", SOS: "SOS",
        JPG: "JPG", DAC: "DAC", DNL: "DNL", DRI: "DRI", DHP: "DHP",
        EXP: "EXP", COM: "COM", TEM: "TEM",
    }
    for n in range(16):
        names[APP0 + n] = "APP%d" % n
    for marker in FRAME_MARKERS | {SOF9}:
        names[marker] = "SOF%d" % (marker - SOF0)
    for n in range(8):
        names[RST0 + n] = "RST%d" % n
    for n in range(14):
        names[JPG0 + n] = "JPG%d" % n
    return names


MARKER_NAMES: Mapping[int, str] = MappingProxyType(_build_names())

_DESCRIPTIONS = MappingProxyType({
    MarkerFamily.IMAGE_BOUNDARY: {SOI: "Start of Image", EOI: "End of Image"},
    MarkerFamily.APPLICATION: "Application Segment",
    MarkerFamily.QUANTIZATION: "Define Quantization Table",
    MarkerFamily.FRAME: "Start of Frame",
    MarkerFamily.HUFFMAN: "Define Huffman Table",
    MarkerFamily.SCAN: "Start of Scan",
})


def marker_name(marker: int) -> str:
    """Short name of a marker byte, or its hex value when unnamed."""
    return MARKER_NAMES.get(marker, "0x%02X" % marker)


def marker_family(marker: int) -> Optional[MarkerFamily]:
    return MARKER_FAMILIES.get(marker)


def is_recognized(marker: int) -> bool:
    return marker in RECOGNIZED_MARKERS


def marker_info(marker: int) -> str:
    family = marker_family(marker)
    if family is None:
        return "Unknown Marker (%s)" % marker_name(marker)
    text = _DESCRIPTIONS[family]
    if isinstance(text, dict):
        text = text[marker]
    return "%s (%s)" % (text, marker_name(marker))
