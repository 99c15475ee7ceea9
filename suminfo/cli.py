"""
suminfo — command-line tool for SUMINFO bulletins.

Usage:
  suminfo [--verbose] <command> [options]

Commands:
  segment       Shows which pages start an occurrence and the chunk plan.
  process       Extracts occurrences from a SUMINFO PDF (optionally renders the report).
  extract-text  Extracts occurrences from pasted text (one extraction call).
  render        Renders the PDF report from a results JSON file.
"""

from __future__ import annotations

import argparse
import logging
import sys

# Windows consoles may default to cp1252; Portuguese help text needs UTF-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from rich.console import Console
from rich.logging import RichHandler

from suminfo import __version__
from suminfo.commands import extract_text as cmd_extract_text
from suminfo.commands import process as cmd_process
from suminfo.commands import render as cmd_render
from suminfo.commands import segment as cmd_segment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="suminfo",
        description="SUMINFO occurrence extractor.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"suminfo {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging (per sub-batch details).",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        metavar="<command>",
        dest="command",
    )
    subparsers.required = True

    cmd_segment.add_parser(subparsers)
    cmd_process.add_parser(subparsers)
    cmd_extract_text.add_parser(subparsers)
    cmd_render.add_parser(subparsers)

    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
