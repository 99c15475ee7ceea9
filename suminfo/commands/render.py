"""Command: suminfo render — PDF report from a saved results file."""

from __future__ import annotations

import argparse
from pathlib import Path

from suminfo._io import (
    add_report_arguments,
    console,
    read_results,
    source_stem,
    write_report,
)


def run(args: argparse.Namespace) -> None:
    from pipeline.runner import REPORT_NAME_PREFIX

    json_path = Path(args.results_file)
    records = read_results(json_path)
    if not records:
        console.print("[yellow]The results file holds no occurrences.[/yellow]")
        raise SystemExit(0)

    output_name = args.output_name or f"{REPORT_NAME_PREFIX} {source_stem(json_path)}"
    console.print(f"Rendering [bold]{len(records)}[/bold] occurrences as [cyan]{output_name}[/cyan]")

    if write_report(records, output_name, args, json_path.parent) is None:
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "render",
        help="Renders the PDF report from a results JSON file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Reads records written by 'suminfo process' / 'suminfo extract-text', applies
the report filters and writes "<output name>.pdf".

Examples:
  suminfo render suminfo.occurrences.json
  suminfo render suminfo.occurrences.json --report-type all --sort
  suminfo render suminfo.occurrences.json --sub-type personal_data_only --no-fact-bold
  suminfo render suminfo.occurrences.json --output-name "Relatório dezembro" --report-dir out/
        """,
    )
    p.add_argument(
        "results_file",
        metavar="RESULTS.json",
        help="Results file (*.occurrences.json).",
    )
    p.add_argument(
        "--output-name",
        metavar="NAME",
        default=None,
        help="Report name without .pdf (default: 'Relatório <source name>').",
    )
    add_report_arguments(p)
    p.set_defaults(func=run)
