"""``wirepack`` command: show packet layouts and decode captured packets."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .. import __version__
from ..exceptions import WirepackError
from .analyze import decode_hex, load_catalog, print_catalog


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wirepack",
        description="wirepack: Binary Wire Codec. Inspect the packets defined in a Python file.",
        epilog="example: wirepack --analyze messages.py --decode '02 02 61 62 05'",
    )
    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=Path,
        help="Python file defining BaseMessage classes or PacketDefinitions",
    )
    parser.add_argument(
        "--packet",
        metavar="ID",
        type=int,
        help="only show the packet with this identifier",
    )
    parser.add_argument(
        "--decode",
        metavar="HEX",
        help="decode one hex-encoded packet with the definitions in FILE",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.analyze is None:
        if args.packet is not None or args.decode is not None:
            parser.error("--packet and --decode require --analyze FILE")
        parser.print_help()
        return 0
    if args.packet is not None and args.decode is not None:
        parser.error("--packet and --decode cannot be combined")

    try:
        catalog = load_catalog(args.analyze)
        if args.decode is not None:
            decode_hex(catalog, args.decode)
        else:
            print_catalog(catalog, packet_id=args.packet)
    except WirepackError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
