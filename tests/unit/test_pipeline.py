"""
Unit tests for the run orchestration (fake extractors, no PDF decoding).
"""

import asyncio

import pytest

from data_model import (
    BackendError,
    InputRejectedError,
    MalformedResponseError,
    PipelineBusyError,
)
from extraction import PatternExtractor
from pipeline import ChunkingConfig, Pipeline, RunContext, Stage
from pipeline.runner import ADVISORY_FAILED, MANUAL_OUTPUT_NAME, MSG_CRITICAL, MSG_EMPTY
from tests.conftest import (
    CONTINUATION_PAGE,
    NOISE_ID,
    ROBBERY_ID,
    ROBBERY_PAGE,
    make_occurrence,
)

MANUAL_TEXT = ROBBERY_PAGE


class ScriptedExtractor:
    """Returns (or raises) one scripted outcome per call, in order."""

    name = "scripted"

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.texts: list[str] = []

    async def extract(self, text):
        self.texts.append(text)
        await asyncio.sleep(0)
        outcome = self.outcomes.pop(0) if self.outcomes else []
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _header_then_continuations(count: int) -> list[str]:
    return [ROBBERY_PAGE] + [CONTINUATION_PAGE] * (count - 1)


class TestProcessPages:
    """Test the page-based run."""

    def test_sub_batches_in_order(self):
        """45 pages, one start: 9 sequential extraction calls of 5 pages."""
        extractor = ScriptedExtractor([[make_occurrence(str(i))] for i in range(9)])
        ctx = asyncio.run(Pipeline(extractor).process_pages(_header_then_continuations(45)))

        assert ctx.stage == Stage.DONE
        assert (ctx.page_count, ctx.chunk_count, ctx.batch_count) == (45, 1, 9)
        assert len(extractor.texts) == 9
        assert extractor.texts[0].startswith(ROBBERY_PAGE + "\n\n" + CONTINUATION_PAGE)
        assert set(ctx.results) == {str(i) for i in range(9)}

    def test_later_sub_batch_wins(self):
        shared = "100 - 01/01/2024 - X"
        extractor = ScriptedExtractor([
            [make_occurrence(shared, fact="FURTO")],
            [make_occurrence(shared, fact="ROUBO")],
        ])
        ctx = asyncio.run(Pipeline(extractor).process_pages(_header_then_continuations(10)))
        assert len(ctx.results) == 1
        assert ctx.results[shared].fact == "ROUBO"

    def test_progress_reporting(self):
        snapshots: list[tuple[Stage, int]] = []

        def on_progress(ctx: RunContext) -> None:
            snapshots.append((ctx.stage, ctx.percent))

        extractor = ScriptedExtractor([[make_occurrence("A")]])
        pipeline = Pipeline(extractor, on_progress=on_progress)
        asyncio.run(pipeline.process_pages(_header_then_continuations(20)))

        extracting = [p for stage, p in snapshots if stage == Stage.EXTRACTING]
        assert extracting == [20, 40, 60, 80]
        assert snapshots[-1] == (Stage.DONE, 100)

    def test_custom_sub_batch_size(self):
        extractor = ScriptedExtractor([])
        pipeline = Pipeline(extractor, chunking=ChunkingConfig(sub_batch_size=2))
        ctx = asyncio.run(pipeline.process_pages(_header_then_continuations(5)))
        assert ctx.batch_count == 3

    def test_output_name(self):
        extractor = ScriptedExtractor([[make_occurrence("A")]])
        ctx = asyncio.run(Pipeline(extractor).process_pages([ROBBERY_PAGE], source_name="dez.pdf"))
        assert ctx.output_name == "Relatório dez"

    def test_rejects_non_text(self):
        with pytest.raises(InputRejectedError):
            asyncio.run(Pipeline(ScriptedExtractor([])).process_pages([b"bytes"]))

    def test_with_pattern_extractor(self, sample_pages):
        ctx = asyncio.run(Pipeline(PatternExtractor()).process_pages(sample_pages))
        assert set(ctx.results) == {ROBBERY_ID, NOISE_ID}


class TestFailureIsolation:
    """Test per-sub-batch error containment."""

    def test_failed_batches_skipped(self):
        extractor = ScriptedExtractor([
            [make_occurrence("A")],
            BackendError("timeout"),
            [make_occurrence("C")],
        ])
        ctx = asyncio.run(Pipeline(extractor).process_pages(_header_then_continuations(15)))

        assert ctx.stage == Stage.DONE
        assert set(ctx.results) == {"A", "C"}
        assert len(ctx.failures) == 1
        failure = ctx.failures[0]
        assert (failure.batch_index, failure.first_page, failure.last_page) == (1, 6, 10)
        assert failure.kind == "backend"
        assert ctx.advisory is None

    def test_model_side_error_sets_advisory(self):
        extractor = ScriptedExtractor([BackendError("overloaded", model_side=True), [make_occurrence("B")]])
        ctx = asyncio.run(Pipeline(extractor).process_pages(_header_then_continuations(10)))
        assert ctx.advisory == ADVISORY_FAILED
        assert set(ctx.results) == {"B"}

    def test_malformed_response_sets_advisory(self):
        extractor = ScriptedExtractor([MalformedResponseError(), [make_occurrence("B")]])
        ctx = asyncio.run(Pipeline(extractor).process_pages(_header_then_continuations(10)))
        assert ctx.advisory == ADVISORY_FAILED
        assert ctx.failures[0].kind == "malformed"

    def test_all_failed_is_empty(self):
        extractor = ScriptedExtractor([BackendError("a"), BackendError("b")])
        ctx = asyncio.run(Pipeline(extractor).process_pages(_header_then_continuations(10)))
        assert ctx.stage == Stage.EMPTY
        assert ctx.error == MSG_EMPTY

    def test_unexpected_error_is_critical(self):
        from data_model import CriticalProcessingError

        extractor = ScriptedExtractor([RuntimeError("bug")])
        stages: list[Stage] = []
        pipeline = Pipeline(extractor, on_progress=lambda ctx: stages.append(ctx.stage))
        with pytest.raises(CriticalProcessingError, match="Critical"):
            asyncio.run(pipeline.process_pages([ROBBERY_PAGE]))
        assert stages[-1] == Stage.FAILED
        assert not pipeline.is_running


class TestEmptyResult:
    """Test zero-result runs."""

    def test_nothing_extracted(self):
        ctx = asyncio.run(Pipeline(ScriptedExtractor([])).process_pages([CONTINUATION_PAGE]))
        assert ctx.stage == Stage.EMPTY
        assert ctx.message == MSG_EMPTY
        assert ctx.percent == 100
        assert ctx.occurrences == []

    def test_no_pages(self):
        ctx = asyncio.run(Pipeline(ScriptedExtractor([])).process_pages([]))
        assert ctx.stage == Stage.EMPTY
        assert ctx.batch_count == 0


class TestProcessText:
    """Test the manual path."""

    def test_single_sub_batch(self):
        extractor = ScriptedExtractor([[make_occurrence("A")]])
        ctx = asyncio.run(Pipeline(extractor).process_text(MANUAL_TEXT))
        assert extractor.texts == [MANUAL_TEXT]
        assert ctx.output_name == MANUAL_OUTPUT_NAME
        assert ctx.batch_count == 1
        assert ctx.stage == Stage.DONE

    @pytest.mark.parametrize("text", ["", "curto demais", " " * 40, "x" * 20])
    def test_short_text_rejected(self, text):
        pipeline = Pipeline(ScriptedExtractor([]))
        with pytest.raises(InputRejectedError):
            asyncio.run(pipeline.process_text(text))
        assert not pipeline.is_running

    def test_failure_is_contained(self):
        extractor = ScriptedExtractor([MalformedResponseError()])
        ctx = asyncio.run(Pipeline(extractor).process_text(MANUAL_TEXT))
        assert ctx.stage == Stage.EMPTY
        assert ctx.advisory == ADVISORY_FAILED


class TestProcessPdfInput:
    """Test input rejection and decoding failures of the PDF path."""

    def test_wrong_extension(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("texto")
        with pytest.raises(InputRejectedError, match="PDF"):
            asyncio.run(Pipeline(ScriptedExtractor([])).process_pdf(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputRejectedError, match="does not exist"):
            asyncio.run(Pipeline(ScriptedExtractor([])).process_pdf(tmp_path / "none.pdf"))

    def test_undecodable_file(self, tmp_path):
        from data_model import DecodingError

        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf at all")
        contexts: list[RunContext] = []
        pipeline = Pipeline(ScriptedExtractor([]), on_progress=contexts.append)

        with pytest.raises(DecodingError):
            asyncio.run(pipeline.process_pdf(path))
        assert contexts[-1].stage == Stage.FAILED
        assert contexts[-1].error == MSG_CRITICAL
        assert not pipeline.is_running


class TestSingleRun:
    """Test that a pipeline runs one document at a time."""

    def test_concurrent_call_rejected(self):
        async def scenario():
            extractor = ScriptedExtractor([[make_occurrence("A")]])
            pipeline = Pipeline(extractor)
            first = asyncio.create_task(pipeline.process_text(MANUAL_TEXT))
            await asyncio.sleep(0)
            assert pipeline.is_running
            with pytest.raises(PipelineBusyError):
                await pipeline.process_text(MANUAL_TEXT)
            ctx = await first
            return pipeline, ctx

        pipeline, ctx = asyncio.run(scenario())
        assert ctx.stage == Stage.DONE
        assert not pipeline.is_running

    def test_sequential_runs_allowed(self):
        extractor = ScriptedExtractor([[make_occurrence("A")], [make_occurrence("B")]])
        pipeline = Pipeline(extractor)
        first = asyncio.run(pipeline.process_text(MANUAL_TEXT))
        second = asyncio.run(pipeline.process_text(MANUAL_TEXT))
        assert set(first.results) == {"A"}
        assert set(second.results) == {"B"}
