"""Main CLI entry point for nanopb-options."""

from __future__ import annotations

import argparse
import binascii
import logging
import sys
from pathlib import Path

from .. import __version__
from ..codec.decoder import decode
from ..exceptions import NanopbOptionsError
from ..protobuf.convert import to_proto_schema
from ..scope import OptionScope
from .report import print_report


def _read_input(args: argparse.Namespace) -> bytes:
    if args.hex is not None:
        try:
            return binascii.unhexlify("".join(args.hex.split()))
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid hex input: {e}") from e
    if args.decode == "-":
        return sys.stdin.buffer.read()
    file_path = Path(args.decode)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return file_path.read_bytes()


def main() -> int:
    """Main entry point for the nanopb-options CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="nanopb-options",
        description="nanopb-options: code generation options inspector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nanopb-options --decode options.bin              Show explicitly set options
  nanopb-options --hex "08 40 20 00" --effective   Show effective values of all options
  nanopb-options --decode - --scope field < x.bin  Read stdin, check field scope
  nanopb-options --proto                           Print the .proto definition
        """,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--decode",
        metavar="FILE",
        type=str,
        help="Decode an encoded options message from FILE ('-' for stdin)",
    )
    source.add_argument(
        "--hex",
        metavar="HEX",
        type=str,
        help="Decode an encoded options message given as hex digits",
    )
    source.add_argument(
        "--proto",
        action="store_true",
        help="Print the .proto definition of the options message",
    )

    parser.add_argument(
        "--scope",
        choices=[scope.name.lower() for scope in OptionScope],
        help="Scope the options are attached at (enables scope warnings)",
    )
    parser.add_argument(
        "--effective",
        action="store_true",
        help="List every option with its effective value",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"nanopb-options {__version__}",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.proto:
        print(to_proto_schema(), end="")
        return 0

    if args.decode is not None or args.hex is not None:
        try:
            data = _read_input(args)
            options = decode(data)
        except (OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except NanopbOptionsError as e:
            print(f"Error decoding options: {e}", file=sys.stderr)
            return 1

        scope = OptionScope[args.scope.upper()] if args.scope else None
        print_report(options, scope=scope, effective=args.effective)
        return 0

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
