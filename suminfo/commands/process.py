"""Command: suminfo process — full extraction run over a SUMINFO PDF."""

from __future__ import annotations

import argparse
from pathlib import Path

from pipeline import ChunkingConfig
from suminfo._io import (
    add_report_arguments,
    console,
    positive_int,
    results_path_for,
    show_occurrences,
    write_report,
    write_results,
)
from suminfo._progress import run_pipeline


def run(args: argparse.Namespace) -> None:
    from extraction import create_extractor

    pdf_path = Path(args.pdf_file)
    extractor = create_extractor(offline=args.offline, model=args.model)
    chunking = ChunkingConfig(sub_batch_size=args.sub_batch_size)

    console.print(
        f"Processing [bold]{pdf_path}[/bold]  "
        f"extractor=[cyan]{extractor.name}[/cyan]  "
        f"sub-batch=[cyan]{chunking.sub_batch_size}[/cyan]"
    )

    ctx = run_pipeline(extractor, chunking, lambda p: p.process_pdf(pdf_path))
    if not ctx.results:
        raise SystemExit(0)

    records = ctx.occurrences
    if args.show:
        show_occurrences(records)

    json_path = Path(args.out) if args.out else results_path_for(pdf_path)
    write_results(records, json_path)

    if args.report:
        write_report(records, ctx.output_name, args, json_path.parent)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "process",
        help="Extracts occurrences from a SUMINFO PDF (optionally renders the report).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Decodes the PDF, detects occurrence starts, splits the pages into chunks and
sub-batches and extracts the records of each sub-batch in order.  Records are
written to <name>.occurrences.json next to the PDF.

Examples:
  suminfo process suminfo.pdf --show
  suminfo process suminfo.pdf --offline --report
  suminfo process suminfo.pdf --model gemini-2.5-pro --sub-batch-size 3
  suminfo process suminfo.pdf --report --report-type all --sort
  suminfo process suminfo.pdf --report --sub-type personal_data_only --data-color "#000080"
        """,
    )
    p.add_argument(
        "pdf_file",
        metavar="FILE.pdf",
        help="Path to the SUMINFO PDF.",
    )
    p.add_argument(
        "--offline",
        action="store_true",
        help="Use the regex-based extractor instead of Gemini.",
    )
    p.add_argument(
        "--model", "-m",
        metavar="MODEL",
        help="Gemini model (default: GEMINI_MODEL or gemini-2.5-flash).",
    )
    p.add_argument(
        "--sub-batch-size",
        type=positive_int,
        default=ChunkingConfig().sub_batch_size,
        metavar="N",
        help="Pages per extraction call (default: 5).",
    )
    p.add_argument(
        "--out", "-o",
        metavar="JSON",
        default=None,
        help="Results file (default: <name>.occurrences.json).",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Print the extracted occurrences as a table.",
    )
    p.add_argument(
        "--report",
        action="store_true",
        help="Also render the PDF report.",
    )
    add_report_arguments(p)
    p.set_defaults(func=run)
