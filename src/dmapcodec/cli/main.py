"""Main CLI entry point for dmapcodec."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .. import __version__
from ..exceptions import DmapError
from .inspect import inspect_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the dmapcodec CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="dmapcodec: DMAP Binary Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dmapcodec --inspect 20240101.rawacf                   List records
  dmapcodec --inspect data.fitacf.bz2 --schema fitacf   Validate every record
  dmapcodec --inspect data.map --lax --fields           Read up to corruption
  dmapcodec --version                                   Show version
        """,
    )

    parser.add_argument(
        "--inspect",
        metavar="FILE",
        type=str,
        help="Summarize the records of a DMAP file",
    )

    parser.add_argument(
        "--schema",
        metavar="NAME",
        type=str,
        help="Validate records against a format (iqdat, rawacf, fitacf, grid, map, snd, generic)",
    )

    parser.add_argument(
        "--lax",
        action="store_true",
        help="Report records up to the first corrupt one instead of failing",
    )

    parser.add_argument(
        "--fields",
        action="store_true",
        help="Show the field breakdown of the first record",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"dmapcodec {__version__}",
    )

    args = parser.parse_args(argv)

    # Handle --inspect
    if args.inspect:
        file_path = Path(args.inspect)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            ok = inspect_file(file_path, schema=args.schema, lax=args.lax, show_fields=args.fields)
        except (DmapError, OSError) as e:
            print(f"Error inspecting file: {e}", file=sys.stderr)
            return 1
        return 0 if ok else 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
