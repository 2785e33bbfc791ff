"""Unit tests for scan data extraction."""
import io

import pytest

from jpeg_segments.errors import TruncatedStreamError
from jpeg_segments.scan import extract_scan_data


def extract(data):
    f = io.BytesIO(data)
    image = extract_scan_data(f)
    return image, f.tell()


class TestExtractScanData:
    """Tests for extract_scan_data."""

    def test_plain_bytes(self):
        image, pos = extract(b"\x01\x02\x03\x04\xFF\xD9")
        assert image == b"\x01\x02\x03\x04"
        # rewound onto the end-of-image marker
        assert pos == 4

    def test_empty_scan(self):
        image, pos = extract(b"\xFF\xD9")
        assert image == b""
        assert pos == 0

    def test_byte_stuffing_does_not_end_scan(self):
        image, pos = extract(b"\x10\xFF\x00\x20\xFF\x00\xFF\xD9")
        assert image == b"\x10\xFF\x00\x20\xFF\x00"
        assert pos == 6

    def test_stuffing_followed_by_eoi_code(self):
        """0xFF 0x00 0xD9 is stuffing then a data byte, not a marker."""
        image, pos = extract(b"\xFF\x00\xD9\x01\xFF\xD9")
        assert image == b"\xFF\x00\xD9\x01"
        assert pos == 4

    @pytest.mark.parametrize("rst", range(0xD0, 0xD8))
    def test_restart_markers_do_not_end_scan(self, rst):
        data = b"\x01\xFF" + bytes([rst]) + b"\x02\xFF\xD9"
        image, pos = extract(data)
        assert image == data[:-2]
        assert pos == len(data) - 2

    def test_fill_bytes_before_eoi(self):
        image, pos = extract(b"\x01\xFF\xFF\xFF\xD9")
        assert image == b"\x01\xFF\xFF"
        assert pos == 3

    def test_other_marker_kept_as_data(self):
        image, pos = extract(b"\x01\xFF\xC4\x02\xFF\xD9")
        assert image == b"\x01\xFF\xC4\x02"
        assert pos == 4

    def test_stops_at_first_eoi(self):
        f = io.BytesIO(b"\x01\xFF\xD9\x02\xFF\xD9")
        assert extract_scan_data(f) == b"\x01"
        assert f.read() == b"\xFF\xD9\x02\xFF\xD9"

    def test_missing_eoi(self):
        with pytest.raises(TruncatedStreamError):
            extract(b"\x01\x02\x03")

    def test_stream_ends_on_prefix(self):
        with pytest.raises(TruncatedStreamError):
            extract(b"\x01\x02\xFF")

    def test_starts_mid_stream(self):
        f = io.BytesIO(b"HDR\x05\x06\xFF\xD9")
        f.seek(3)
        assert extract_scan_data(f) == b"\x05\x06"
        assert f.tell() == 5
