"""Shared helpers of the CLI commands: results JSON, report options and output."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich import box

from data_model.occurrences import PoliceOccurrence, dump_occurrences, load_occurrences
from data_model.style import RenderStyleConfig, ReportSubType

console = Console()

RESULTS_SUFFIX = ".occurrences.json"


# ---------------------------------------------------------------------------
# Results JSON
# ---------------------------------------------------------------------------

def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def results_path_for(source: Path) -> Path:
    """suminfo.pdf -> suminfo.occurrences.json (same directory)."""
    return source.with_name(source.stem + RESULTS_SUFFIX)


def write_results(records: Sequence[PoliceOccurrence], json_path: Path) -> None:
    json_path.write_text(dump_occurrences(records), encoding="utf-8")
    console.print(f"[green]JSON:[/green] {json_path}  ({len(records)} occurrences)")


def read_results(json_path: Path) -> list[PoliceOccurrence]:
    if not json_path.exists():
        console.print(f"[red]File does not exist:[/red] {json_path}")
        raise SystemExit(1)
    try:
        return load_occurrences(json_path.read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"[red]Invalid results file:[/red] {e}")
        raise SystemExit(1)


def source_stem(json_path: Path) -> str:
    name = json_path.name
    if name.endswith(RESULTS_SUFFIX):
        return name[: -len(RESULTS_SUFFIX)]
    return json_path.stem


# ---------------------------------------------------------------------------
# Report options
# ---------------------------------------------------------------------------

def add_report_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--report-type",
        choices=["crimes", "all"],
        default="crimes",
        help="crimes: crime records without accidents (default); all: every record.",
    )
    p.add_argument(
        "--sub-type",
        choices=[s.value for s in ReportSubType],
        default=ReportSubType.COMPLETE.value,
        help="personal_data_only leaves narratives out (crimes reports only).",
    )
    p.add_argument("--separator-color", metavar="HEX", default="#000000",
                   help="Separator line colour (default: #000000).")
    p.add_argument("--data-color", metavar="HEX", default="#FF0000",
                   help="Colour of personal data values (default: #FF0000).")
    p.add_argument("--fact-color", metavar="HEX", default="#0000FF",
                   help="Colour of the fact value (default: #0000FF).")
    p.add_argument("--no-data-bold", action="store_true",
                   help="Personal data values in regular weight.")
    p.add_argument("--no-fact-bold", action="store_true",
                   help="Fact value in regular weight.")
    p.add_argument("--sort", action="store_true",
                   help="Order records by date, then id.")
    p.add_argument("--report-dir", metavar="DIR", default=None,
                   help="Directory of the PDF report (default: next to the results).")


def style_from_args(args: argparse.Namespace) -> RenderStyleConfig:
    try:
        return RenderStyleConfig(
            separator_color = args.separator_color,
            data_color      = args.data_color,
            data_bold       = not args.no_data_bold,
            fact_color      = args.fact_color,
            fact_bold       = not args.no_fact_bold,
            report_sub_type = ReportSubType(args.sub_type),
        )
    except ValueError as e:
        console.print(f"[red]Invalid style:[/red] {e}")
        raise SystemExit(1)


def write_report(
    records: Sequence[PoliceOccurrence],
    output_name: str,
    args: argparse.Namespace,
    default_dir: Path,
) -> Path | None:
    """Selects, optionally sorts and renders; None when nothing is selected."""
    from report import (
        NOTHING_SELECTED,
        ReportType,
        effective_style,
        report_filename,
        save_report,
        select_occurrences,
        sort_by_date,
    )

    report_type = ReportType(args.report_type)
    style = effective_style(style_from_args(args), report_type)

    selected = select_occurrences(records, report_type)
    if not selected:
        console.print(f"[yellow]{NOTHING_SELECTED}[/yellow]")
        return None
    if args.sort:
        selected = sort_by_date(selected)

    out_dir = Path(args.report_dir) if args.report_dir else default_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    path = save_report(selected, out_dir / report_filename(output_name), style, title=output_name)
    console.print(f"[green]PDF:[/green] {path}  ({len(selected)} occurrences, {style.report_sub_type})")
    return path


# ---------------------------------------------------------------------------
# Terminal output
# ---------------------------------------------------------------------------

def show_occurrences(records: Sequence[PoliceOccurrence]) -> None:
    if not records:
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("ID",      no_wrap=True, style="bold cyan")
    table.add_column("DATE",    no_wrap=True)
    table.add_column("CRIME",   justify="center", no_wrap=True)
    table.add_column("PERSONS", justify="right", no_wrap=True)
    table.add_column("FACT",    no_wrap=False, max_width=50)

    for r in records:
        table.add_row(
            r.id[:60],
            r.date,
            "yes" if r.is_crime else "no",
            str(len(r.involved)),
            r.fact[:80],
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(records)} occurrences[/dim]\n")
