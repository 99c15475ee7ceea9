"""Runs a Pipeline entry point under a rich progress bar and reports the outcome."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
from rich import box

from data_model.errors import CriticalProcessingError, InputRejectedError
from extraction import Extractor
from pipeline import ChunkingConfig, Pipeline, RunContext, Stage

console = Console()


def run_pipeline(
    extractor: Extractor,
    chunking: ChunkingConfig,
    entry: Callable[[Pipeline], Awaitable[RunContext]],
) -> RunContext:
    """
    Builds a Pipeline, drives `entry(pipeline)` to completion and prints the
    failures table.  Input and decoding errors end the command with exit 1.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting...", total=100)

        def on_progress(ctx: RunContext) -> None:
            progress.update(task, completed=ctx.percent, description=ctx.message)

        pipeline = Pipeline(extractor, chunking=chunking, on_progress=on_progress)
        try:
            ctx = asyncio.run(entry(pipeline))
        except InputRejectedError as e:
            console.print(f"[red]Input rejected:[/red] {e}")
            raise SystemExit(1)
        except CriticalProcessingError as e:
            cause = e.__cause__ or e
            console.print(f"[red]Critical processing error:[/red] {cause}")
            raise SystemExit(1)

    _show_failures(ctx)
    if ctx.advisory:
        console.print(f"[yellow]{ctx.advisory}[/yellow]")
    if ctx.stage == Stage.EMPTY:
        console.print(f"[yellow]{ctx.message}[/yellow]")
    else:
        console.print(
            f"[green]Done[/green] — {len(ctx.results)} occurrences from "
            f"{ctx.batch_count} sub-batches ({len(ctx.failures)} failed)"
        )
    return ctx


def _show_failures(ctx: RunContext) -> None:
    if not ctx.failures:
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
    table.add_column("CHUNK",  justify="right", style="dim")
    table.add_column("BATCH",  justify="right", style="dim")
    table.add_column("PAGES",  justify="center")
    table.add_column("KIND",   style="yellow")
    table.add_column("ERROR",  max_width=70)
    for f in ctx.failures:
        pages = "-" if f.first_page is None else (
            str(f.first_page) if f.first_page == f.last_page else f"{f.first_page}–{f.last_page}"
        )
        table.add_row(str(f.chunk_index + 1), str(f.batch_index + 1), pages, f.kind, f.error[:140])

    console.print()
    console.print("[yellow]Failed sub-batches:[/yellow]")
    console.print(table)
