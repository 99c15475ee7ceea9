"""Command: suminfo extract-text — manual path over pasted text."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pipeline import DEFAULT_CHUNKING
from suminfo._io import (
    RESULTS_SUFFIX,
    add_report_arguments,
    console,
    show_occurrences,
    write_report,
    write_results,
)
from suminfo._progress import run_pipeline


def _read_input(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.input_file:
        from llm_query import read_text

        path = Path(args.input_file)
        if not path.exists():
            console.print(f"[red]File does not exist:[/red] {path}")
            raise SystemExit(1)
        return read_text(path)
    return sys.stdin.read()


def run(args: argparse.Namespace) -> None:
    from extraction import create_extractor

    text = _read_input(args)
    extractor = create_extractor(offline=args.offline, model=args.model)

    ctx = run_pipeline(extractor, DEFAULT_CHUNKING, lambda p: p.process_text(text))
    if not ctx.results:
        raise SystemExit(0)

    records = ctx.occurrences
    if args.show:
        show_occurrences(records)

    json_path = Path(args.out) if args.out else Path(ctx.output_name + RESULTS_SUFFIX)
    write_results(records, json_path)

    if args.report:
        write_report(records, ctx.output_name, args, json_path.parent)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "extract-text",
        help="Extracts occurrences from pasted text (one extraction call).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Sends the whole text to the extractor as a single sub-batch, without page
segmentation or chunking.  The text must be longer than 20 characters.

Text source, in order: --text, --input-file, standard input.

Examples:
  suminfo extract-text --input-file copied.txt --show
  suminfo extract-text --text "49294 - 20/12/2025 06:00:13 - 10BPM ..." --offline
  pbpaste | suminfo extract-text --report
        """,
    )
    src = p.add_mutually_exclusive_group()
    src.add_argument("--text", "-t", metavar="TEXT", default=None, help="Text to process.")
    src.add_argument("--input-file", "-i", metavar="FILE", default=None, help="UTF-8 text file.")
    p.add_argument("--offline", action="store_true", help="Use the regex-based extractor.")
    p.add_argument("--model", "-m", metavar="MODEL", help="Gemini model.")
    p.add_argument("--out", "-o", metavar="JSON", default=None,
                   help="Results file (default: 'Extração Manual.occurrences.json').")
    p.add_argument("--show", action="store_true", help="Print the extracted occurrences.")
    p.add_argument("--report", action="store_true", help="Also render the PDF report.")
    add_report_arguments(p)
    p.set_defaults(func=run)
