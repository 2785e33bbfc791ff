"""Hand-built JPEG streams used across the tests.

Offsets of SAMPLE_JPEG segments:
SOI 0, APP0 2, APP1 20, DQT 30, SOF0 99, DHT 112, SOS 134 (+7 scan bytes), EOI 151.
"""

SOI = b"\xFF\xD8"
EOI = b"\xFF\xD9"

APP0 = (
    b"\xFF\xE0\x00\x10"
    b"JFIF\x00"  # Identifier
    b"\x01\x01"  # Version 1.1
    b"\x00"      # Units: none
    b"\x00\x01"  # X density: 1
    b"\x00\x01"  # Y density: 1
    b"\x00\x00"  # No thumbnail
)

APP1 = b"\xFF\xE1\x00\x08" b"Exif\x00\x00"

DQT = b"\xFF\xDB\x00\x43" b"\x00" + bytes(range(64))

SOF0 = (
    b"\xFF\xC0\x00\x0B"
    b"\x08"          # Precision
    b"\x00\x10"      # Height (little-endian word)
    b"\x00\x10"      # Width (little-endian word)
    b"\x01"          # 1 component
    b"\x01\x11\x00"  # Y: sampling 1x1, quant table 0
)

DHT = b"\xFF\xC4\x00\x14" b"\x00" + bytes([1] + [0] * 15) + b"\x05"

SOS = (
    b"\xFF\xDA\x00\x08"
    b"\x01"          # 1 component
    b"\x01\x00"      # Component 1: DC=0, AC=0
    b"\x00\x3F\x00"  # Spectral selection and approximation
)

SCAN_DATA = b"\x12\xFF\x00\x34\xFF\xD0\x56"

SAMPLE_JPEG = SOI + APP0 + APP1 + DQT + SOF0 + DHT + SOS + SCAN_DATA + EOI

SAMPLE_OFFSETS = [0, 2, 20, 30, 99, 112, 134, 151]


def app0_with_thumbnail(x, y, units=0, identifier=b"JFIF\x00"):
    thumbnail = bytes(range(3 * x * y))
    length = 2 + 14 + len(thumbnail)
    return (
        b"\xFF\xE0" + length.to_bytes(2, "big")
        + identifier
        + b"\x01\x02"
        + bytes([units])
        + b"\x00\x48\x00\x48"
        + bytes([x, y])
        + thumbnail
    )


def minimal_scan(image):
    """SOI, a one-component scan header, ``image`` as entropy data, EOI."""
    return SOI + b"\xFF\xDA\x00\x05\x01\x01\x00" + image + EOI
