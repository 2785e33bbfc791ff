import argparse
import logging
import sys
from pathlib import Path

from .codec import load, save_to
from .diagnostics import compare, hexdump
from .errors import JpegSegmentError


def _offset(text):
    return int(text, 0)


def build_parser():
    parser = argparse.ArgumentParser(description="JPEG segment inspector")
    parser.add_argument("path", help="Path to the JPEG file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every parsed segment")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("segments", help="List the segments of the file")

    parser_roundtrip = subparsers.add_parser(
        "roundtrip", help="Re-encode the file and compare it byte by byte with the original")
    parser_roundtrip.add_argument("-o", "--output", help="Output path (default: <path>.out)")

    parser_locate = subparsers.add_parser("locate", help="Show the segment owning a byte offset")
    parser_locate.add_argument("offset", type=_offset, help="Byte offset, decimal or 0x hex")

    parser_dump = subparsers.add_parser("dump", help="Hex dump of the file or of one segment's payload")
    parser_dump.add_argument("--segment", type=int, help="Index of the segment to dump")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(stream=sys.stderr,
                        level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    jpeg_path = Path(args.path)
    try:
        container = load(jpeg_path)
    except (OSError, JpegSegmentError) as e:
        print("error: %s: %s" % (jpeg_path, e), file=sys.stderr)
        return 1

    if args.command == "roundtrip":
        output = Path(args.output) if args.output else jpeg_path.with_name(jpeg_path.name + ".out")
        save_to(container, output)
        original = jpeg_path.read_bytes()[:container.end]
        diffs = compare(container, original, output.read_bytes())
        for diff in diffs:
            print(diff)
        print("%s: %s" % (output, "same bytes" if not diffs else "%d bytes differ" % len(diffs)))
        return 1 if diffs else 0
    elif args.command == "locate":
        segment = container.segment_at(args.offset)
        print(segment if segment is not None else "offset %d is outside every segment" % args.offset)
        return 0 if segment is not None else 1
    elif args.command == "dump":
        if args.segment is None:
            print(hexdump(jpeg_path.read_bytes(), str(jpeg_path)), end="")
        else:
            if not 0 <= args.segment < len(container):
                parser.error("--segment must be in 0..%d" % (len(container) - 1))
            segment = container.segments[args.segment]
            print(hexdump(segment.payload() or b"", segment.describe()), end="")
        return 0
    else:
        for index, segment in enumerate(container.segments):
            print("%3d %s" % (index, segment))
        if container.trailing_data:
            print("%d bytes of trailing data after offset %d" % (container.trailing_size, container.end))
        else:
            print("File data exhausted.")
        return 0
