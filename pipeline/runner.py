"""
pipeline/runner.py — sequential orchestration of one SUMINFO run.

Architecture:
  PDF → iter_page_texts() (0–20 %) → classify_pages() → plan_chunks()
  → sub_batches() → extractor.extract() one at a time (20–100 %)
  → merge() → RunContext (done | empty | failed)

Run state lives in an explicit RunContext handed to the `on_progress`
callback after every change.  A Pipeline runs one document at a time:
starting a second run while one is in flight raises PipelineBusyError.

Failure policy:
  - InputRejectedError       raised before any state exists
  - DecodingError / bugs     run marked failed, exception propagates
  - ExtractionError          logged, sub-batch skipped, run continues
  - no records at all        stage "empty", not an exception
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Callable, Sequence, TypeAlias

from data_model.errors import (
    BackendError,
    CriticalProcessingError,
    InputRejectedError,
    MalformedResponseError,
    PipelineBusyError,
    SuminfoError,
)
from data_model.occurrences import PoliceOccurrence, ResultSet
from extraction import Extractor
from pdf.header_patterns import DEFAULT_SEGMENTER, SegmenterConfig
from pdf.reader import iter_page_texts
from pdf.segmenter import classify_pages
from pipeline.chunking import (
    DEFAULT_CHUNKING,
    ChunkingConfig,
    count_sub_batches,
    plan_chunks,
    sub_batch_text,
    sub_batches,
)
from pipeline.merge import merge

logger = logging.getLogger(__name__)

MIN_MANUAL_TEXT_LENGTH = 20
MANUAL_OUTPUT_NAME     = "Extração Manual"
REPORT_NAME_PREFIX     = "Relatório"

DECODING_SHARE = 20  # percent of the progress bar spent on decoding

MSG_ANALYZING   = "Analyzing document structure..."
MSG_EXTRACTING  = "Processing SUMINFO for data extraction..."
MSG_DONE        = "Extraction finished."
MSG_EMPTY       = "No data could be extracted with confidence."
MSG_CRITICAL    = "Critical processing error."
ADVISORY_FAILED = "Some records failed to extract. Try again or use a smaller file."


class Stage(StrEnum):
    IDLE       = "idle"
    DECODING   = "decoding"
    EXTRACTING = "extracting"
    DONE       = "done"
    EMPTY      = "empty"
    FAILED     = "failed"


@dataclass(slots=True)
class BatchFailure:
    """A sub-batch whose records are missing from the results."""
    chunk_index: int
    batch_index: int
    first_page:  int | None
    last_page:   int | None
    kind:        str          # "backend" | "malformed"
    error:       str


@dataclass
class RunContext:
    """Observable state of one run; owned by the running pipeline."""

    output_name: str
    source_name: str | None = None
    stage:       Stage = Stage.IDLE
    percent:     int = 0
    message:     str = ""
    page_count:  int = 0
    chunk_count: int = 0
    batch_count: int = 0
    results:     ResultSet = field(default_factory=dict)
    failures:    list[BatchFailure] = field(default_factory=list)
    advisory:    str | None = None
    error:       str | None = None

    @property
    def occurrences(self) -> list[PoliceOccurrence]:
        return list(self.results.values())

    @property
    def is_finished(self) -> bool:
        return self.stage in (Stage.DONE, Stage.EMPTY, Stage.FAILED)


ProgressCallback: TypeAlias = Callable[[RunContext], None]


class Pipeline:
    """
    Drives decoding, segmentation, chunking, extraction and merging.

    Usage:
        pipeline = Pipeline(PatternExtractor(), on_progress=print)
        ctx      = await pipeline.process_pdf("suminfo.pdf")
        ctx.occurrences
    """

    def __init__(
        self,
        extractor: Extractor,
        chunking: ChunkingConfig = DEFAULT_CHUNKING,
        segmenter: SegmenterConfig = DEFAULT_SEGMENTER,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.extractor   = extractor
        self.chunking    = chunking
        self.segmenter   = segmenter
        self.on_progress = on_progress
        self._active: RunContext | None = None

    @property
    def is_running(self) -> bool:
        return self._active is not None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def process_pdf(self, path: str | Path) -> RunContext:
        """Full run over a PDF file."""
        self._ensure_idle()
        pdf_path = _validate_pdf_path(path)
        ctx = self._begin(f"{REPORT_NAME_PREFIX} {pdf_path.stem}", pdf_path.name)
        try:
            texts = await self._decode(ctx, pdf_path)
            await self._run_pages(ctx, texts)
        except SuminfoError as e:
            self._fail(ctx, e)
            raise
        except Exception as e:
            self._fail(ctx, e)
            raise CriticalProcessingError(MSG_CRITICAL) from e
        finally:
            self._active = None
        return ctx

    async def process_pages(
        self,
        page_texts: Sequence[str],
        source_name: str | None = None,
    ) -> RunContext:
        """Run over already-decoded page texts (document order)."""
        self._ensure_idle()
        if isinstance(page_texts, str) or not all(isinstance(t, str) for t in page_texts):
            raise InputRejectedError("Expected a sequence of page texts.")
        output_name = (
            f"{REPORT_NAME_PREFIX} {Path(source_name).stem}" if source_name else MANUAL_OUTPUT_NAME
        )
        ctx = self._begin(output_name, source_name)
        try:
            ctx.page_count = len(page_texts)
            await self._run_pages(ctx, list(page_texts))
        except SuminfoError as e:
            self._fail(ctx, e)
            raise
        except Exception as e:
            self._fail(ctx, e)
            raise CriticalProcessingError(MSG_CRITICAL) from e
        finally:
            self._active = None
        return ctx

    async def process_text(self, text: str) -> RunContext:
        """Manual path: the whole text is one sub-batch, no segmentation."""
        self._ensure_idle()
        if not isinstance(text, str) or len(text.strip()) <= MIN_MANUAL_TEXT_LENGTH:
            raise InputRejectedError(
                f"Manual input must be text longer than {MIN_MANUAL_TEXT_LENGTH} characters."
            )
        ctx = self._begin(MANUAL_OUTPUT_NAME, None)
        try:
            ctx.stage = Stage.EXTRACTING
            ctx.batch_count = 1
            ctx.percent = DECODING_SHARE
            ctx.message = MSG_EXTRACTING
            self._notify(ctx)
            await self._extract_batch(ctx, text, 0, 0, None, None)
            self._finish(ctx)
        except SuminfoError as e:
            self._fail(ctx, e)
            raise
        except Exception as e:
            self._fail(ctx, e)
            raise CriticalProcessingError(MSG_CRITICAL) from e
        finally:
            self._active = None
        return ctx

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _decode(self, ctx: RunContext, path: Path) -> list[str]:
        ctx.stage = Stage.DECODING
        ctx.message = MSG_ANALYZING
        self._notify(ctx)

        texts: list[str] = []
        for number, count, text in iter_page_texts(path):
            texts.append(text)
            ctx.page_count = count
            ctx.percent = round(number / count * DECODING_SHARE)
            ctx.message = f"Mapping page {number} of {count}..."
            self._notify(ctx)
            await asyncio.sleep(0)

        logger.info("Decoded %d page(s) from %s", len(texts), path)
        return texts

    async def _run_pages(self, ctx: RunContext, texts: list[str]) -> None:
        pages  = classify_pages(texts, self.segmenter)
        chunks = plan_chunks(pages, self.chunking)
        size   = self.chunking.sub_batch_size
        total  = count_sub_batches(chunks, size)

        ctx.chunk_count = len(chunks)
        ctx.batch_count = total
        ctx.stage = Stage.EXTRACTING
        logger.info(
            "%d page(s), %d occurrence start(s), %d chunk(s), %d sub-batch(es)",
            len(pages), sum(p.is_occurrence_start for p in pages), len(chunks), total,
        )

        step = 0
        for ci, chunk in enumerate(chunks):
            for bi, batch in enumerate(sub_batches(chunk, size)):
                ctx.percent = DECODING_SHARE + round(step / total * (100 - DECODING_SHARE))
                ctx.message = MSG_EXTRACTING
                self._notify(ctx)
                await self._extract_batch(
                    ctx, sub_batch_text(batch), ci, bi,
                    batch[0].page_number, batch[-1].page_number,
                )
                step += 1

        self._finish(ctx)

    async def _extract_batch(
        self,
        ctx: RunContext,
        text: str,
        chunk_index: int,
        batch_index: int,
        first_page: int | None,
        last_page: int | None,
    ) -> None:
        where = f"chunk {chunk_index + 1}, sub-batch {batch_index + 1}"
        if first_page is not None:
            where += f" (pages {first_page}-{last_page})"

        try:
            records = await self.extractor.extract(text)
        except MalformedResponseError as e:
            logger.warning("Malformed extraction response in %s: %s", where, e)
            ctx.failures.append(BatchFailure(chunk_index, batch_index, first_page, last_page, "malformed", str(e)))
            ctx.advisory = ADVISORY_FAILED
            return
        except BackendError as e:
            logger.error("Extraction backend failed in %s: %s", where, e)
            ctx.failures.append(BatchFailure(chunk_index, batch_index, first_page, last_page, "backend", str(e)))
            if e.model_side:
                ctx.advisory = ADVISORY_FAILED
            return

        logger.debug("%s: %d record(s)", where, len(records))
        ctx.results = merge(ctx.results, records)

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _ensure_idle(self) -> None:
        if self._active is not None:
            raise PipelineBusyError("A document is already being processed; wait for it to finish.")

    def _begin(self, output_name: str, source_name: str | None) -> RunContext:
        self._ensure_idle()
        ctx = RunContext(output_name=output_name, source_name=source_name)
        self._active = ctx
        return ctx

    def _finish(self, ctx: RunContext) -> None:
        ctx.percent = 100
        if ctx.results:
            ctx.stage = Stage.DONE
            ctx.message = MSG_DONE
        else:
            ctx.stage = Stage.EMPTY
            ctx.message = MSG_EMPTY
            ctx.error = MSG_EMPTY
        logger.info("Run finished: %s, %d occurrence(s), %d failed sub-batch(es)",
                    ctx.stage, len(ctx.results), len(ctx.failures))
        self._notify(ctx)

    def _fail(self, ctx: RunContext, error: Exception) -> None:
        logger.error("Run failed: %s", error)
        ctx.stage = Stage.FAILED
        ctx.error = MSG_CRITICAL
        ctx.message = str(error)
        self._notify(ctx)

    def _notify(self, ctx: RunContext) -> None:
        if self.on_progress is not None:
            self.on_progress(ctx)


def _validate_pdf_path(path: str | Path) -> Path:
    pdf_path = Path(path)
    if pdf_path.suffix.lower() != ".pdf":
        raise InputRejectedError(f"Please select a PDF file, got {pdf_path.name!r}.")
    if not pdf_path.is_file():
        raise InputRejectedError(f"File does not exist: {pdf_path}")
    return pdf_path
