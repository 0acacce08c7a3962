"""Command-line entry point for rpc-typegen."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from . import __version__
from .codegen.cli_integration import (
    console,
    create_generate_subparser,
    create_scan_subparser,
)
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="rpc-typegen",
        description="Generate TypeScript bindings for RPC procedures and their types",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging and show generation metadata",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    create_generate_subparser(subparsers)
    create_scan_subparser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and dispatch to the selected command.

    Args:
        argv: Arguments without the program name (defaults to ``sys.argv``).

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    logger.debug("Running command: %s", args.command)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
