"""Command: suminfo segment — page classification and chunk plan, no extraction."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table
from rich import box

from data_model.errors import DecodingError
from data_model.occurrences import Chunk, DecodedPage
from pipeline import ChunkingConfig, count_sub_batches, plan_chunks, sub_batches
from suminfo._io import console, positive_int


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _show_pages(pages: list[DecodedPage], starts_only: bool) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
    )
    table.add_column("PAGE",  justify="right", no_wrap=True, style="dim")
    table.add_column("START", justify="center", no_wrap=True)
    table.add_column("LEN",   justify="right", no_wrap=True)
    table.add_column("FIRST LINE", no_wrap=True, max_width=70)

    for page in pages:
        if starts_only and not page.is_occurrence_start:
            continue
        table.add_row(
            str(page.page_number),
            "[green]✔[/green]" if page.is_occurrence_start else "",
            str(len(page.text)),
            _first_line(page.text)[:70],
        )

    console.print()
    console.print(table)


def _show_plan(chunks: list[Chunk], size: int) -> None:
    table = Table(box=box.SIMPLE_HEAD, show_header=True, header_style="bold white")
    table.add_column("CHUNK",   justify="right", style="bold cyan")
    table.add_column("PAGES",   justify="center")
    table.add_column("STARTS",  justify="right")
    table.add_column("SUB-BATCHES", no_wrap=False, max_width=60)

    for i, chunk in enumerate(chunks, 1):
        windows = ", ".join(
            f"{b[0].page_number}–{b[-1].page_number}" for b in sub_batches(chunk, size)
        )
        table.add_row(
            str(i),
            f"{chunk[0].page_number}–{chunk[-1].page_number}",
            str(sum(p.is_occurrence_start for p in chunk)),
            windows,
        )

    console.print(table)


def run(args: argparse.Namespace) -> None:
    from pdf import classify_pages, read_page_texts

    pdf_path = Path(args.pdf_file)
    if not pdf_path.exists():
        console.print(f"[red]File does not exist:[/red] {pdf_path}")
        raise SystemExit(1)
    if pdf_path.suffix.lower() != ".pdf":
        console.print(f"[red]Expected a .pdf file, got:[/red] {pdf_path.suffix}")
        raise SystemExit(1)

    try:
        texts = read_page_texts(pdf_path)
    except DecodingError as e:
        console.print(f"[red]Decoding error:[/red] {e}")
        raise SystemExit(1)

    config = ChunkingConfig(sub_batch_size=args.sub_batch_size)
    pages  = classify_pages(texts)
    chunks = plan_chunks(pages, config)

    _show_pages(pages, args.starts_only)
    if chunks:
        _show_plan(chunks, config.sub_batch_size)

    console.print(
        f"  [dim]{len(pages)} pages, "
        f"{sum(p.is_occurrence_start for p in pages)} occurrence starts, "
        f"{len(chunks)} chunks, "
        f"{count_sub_batches(chunks, config.sub_batch_size)} sub-batches[/dim]\n"
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "segment",
        help="Shows which pages start an occurrence and the chunk plan.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Decodes the PDF and classifies each page (occurrence start or continuation),
then prints the chunks and sub-batches an extraction run would use.
Nothing is sent to the extractor.

Examples:
  suminfo segment suminfo.pdf
  suminfo segment suminfo.pdf --starts-only
  suminfo segment suminfo.pdf --sub-batch-size 3
        """,
    )
    p.add_argument(
        "pdf_file",
        metavar="FILE.pdf",
        help="Path to the SUMINFO PDF.",
    )
    p.add_argument(
        "--starts-only",
        action="store_true",
        help="List only the pages that start an occurrence.",
    )
    p.add_argument(
        "--sub-batch-size",
        type=positive_int,
        default=ChunkingConfig().sub_batch_size,
        metavar="N",
        help="Pages per sub-batch (default: 5).",
    )
    p.set_defaults(func=run)
