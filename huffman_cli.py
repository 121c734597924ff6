# filename: huffman_cli.py

import argparse
import logging
import sys

from huffman_container import TABLE_MODES
from huffman_errors import (
    CorruptStreamError,
    MalformedHeaderError,
    TruncatedStreamError,
)
from huffman_service import HuffmanService

logger = logging.getLogger("huffman")

EXIT_OK = 0
EXIT_IO_ERROR = 2
EXIT_MALFORMED_HEADER = 3
EXIT_TRUNCATED_STREAM = 4
EXIT_CORRUPT_STREAM = 5

EXIT_CODES = {
    MalformedHeaderError: EXIT_MALFORMED_HEADER,
    TruncatedStreamError: EXIT_TRUNCATED_STREAM,
    CorruptStreamError: EXIT_CORRUPT_STREAM,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="huffman", description="Static Huffman compression of arbitrary files"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    parser.add_argument("-q", "--quiet", action="store_true", help="only log warnings and errors")
    sub = parser.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compress", help="compress INPUT into a container at OUTPUT")
    c.add_argument("input")
    c.add_argument("output")
    c.add_argument(
        "--table",
        choices=sorted(TABLE_MODES),
        default="frequencies",
        help="symbol table stored in the header (default: frequencies)",
    )

    d = sub.add_parser("decompress", help="restore the original bytes of a container")
    d.add_argument("input")
    d.add_argument("output")

    i = sub.add_parser("info", help="print statistics about a container")
    i.add_argument("input")
    return parser


def configure_logging(verbose=False, quiet=False):
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(args):
    if args.command == "compress":
        service = HuffmanService(table_mode=args.table)
        before, after = service.compress_file(args.input, args.output)
        if before:
            logger.info("compressed size is %.2f%% of the original", 100.0 * after / before)
    elif args.command == "decompress":
        HuffmanService().decompress_file(args.input, args.output)
    else:
        with open(args.input, "rb") as f:
            stats = HuffmanService().describe(f.read())
        for key, value in stats.items():
            print(f"{key}: {value}")


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    try:
        run(args)
    except OSError as e:
        print(f"IOError: {e}", file=sys.stderr)
        return EXIT_IO_ERROR
    except (MalformedHeaderError, TruncatedStreamError, CorruptStreamError) as e:
        print(f"{e.kind}: {e}", file=sys.stderr)
        return EXIT_CODES[type(e)]
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
