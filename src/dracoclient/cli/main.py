"""Main CLI entry point for dracoclient."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..exceptions import DecodeError
from ..log import configure_logging
from ..transport import TransportSettings
from .payload import dump_file, print_records


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the dracoclient CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="dracoclient",
        description="dracoclient: game service client and payload codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dracoclient --dump args.dat        Decode a captured payload
  dracoclient --records              List request record layouts
  dracoclient --version              Show version
        """,
    )

    parser.add_argument(
        "--dump",
        metavar="FILE",
        type=str,
        help="Decode a payload file and print its value tree",
    )

    parser.add_argument(
        "--records",
        action="store_true",
        help="List registered record descriptors",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging (otherwise DRACO_LOG_LEVEL, default INFO)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"dracoclient {__version__}",
    )

    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else TransportSettings().log_level)

    if args.dump:
        file_path = Path(args.dump)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            dump_file(file_path)
        except DecodeError as e:
            print(f"Error decoding {file_path}: {e}", file=sys.stderr)
            return 1
        return 0

    if args.records:
        print_records()
        return 0

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
