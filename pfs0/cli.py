"""
PFS0 CLI - Pack a directory into a PFS0 archive.

    pfs0-create <input dir> <output file> [-q] [-v] [--buffer-size BYTES]

Usage and input errors are reported on stderr and exit 0 without writing
anything. I/O errors during the build are not caught.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from pfs0.fileset import FileSet
from pfs0.spec import COPY_BUFFER_SIZE
from pfs0.writer import PFS0Writer

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return n


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Pack the regular files of a directory into a PFS0 archive.",
    )
    parser.add_argument("input_dir", nargs="?", help="Directory whose files are packed")
    parser.add_argument("output", nargs="?", help="Archive file to create or overwrite")
    # Anything after the output path is ignored
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    parser.add_argument(
        "--buffer-size",
        type=_positive_int,
        default=COPY_BUFFER_SIZE,
        help=f"Copy buffer size in bytes (default: {COPY_BUFFER_SIZE})",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log per-file detail")
    return parser


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout, force=True)


def main(argv: list[str] | None = None) -> int:
    begin = time.perf_counter()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.input_dir is None or args.output is None:
        print(f"{parser.prog} <input dir> <output file>", file=sys.stderr)
        return 0

    configure_logging(quiet=args.quiet, verbose=args.verbose)

    try:
        files = FileSet.from_directory(args.input_dir, exclude=args.output)
    except (FileNotFoundError, NotADirectoryError) as e:
        print(e, file=sys.stderr)
        return 0

    with files:
        PFS0Writer.build(files, args.output, buffer_size=args.buffer_size)

    elapsed_ms = (time.perf_counter() - begin) * 1000
    logger.info("Took %dms", elapsed_ms)
    return 0


if __name__ == "__main__":
    sys.exit(main())
