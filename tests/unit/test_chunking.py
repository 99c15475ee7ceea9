"""
Unit tests for chunk planning and sub-batching.
"""

import random

import pytest

from data_model import DecodedPage
from pipeline import (
    PAGE_SEPARATOR,
    ChunkingConfig,
    count_sub_batches,
    plan_chunks,
    plan_sub_batches,
    sub_batch_text,
    sub_batches,
)


def _pages(starts: set[int], count: int) -> list[DecodedPage]:
    return [
        DecodedPage(page_number=n, text=f"page {n}", is_occurrence_start=n in starts)
        for n in range(1, count + 1)
    ]


def _flatten(chunks):
    return [page for chunk in chunks for page in chunk]


class TestPlanChunks:
    """Test checkpoint-based chunking."""

    def test_single_long_occurrence(self):
        """45 pages with a single start form one chunk of 9 sub-batches."""
        pages = _pages({1}, 45)
        chunks = plan_chunks(pages)
        assert len(chunks) == 1
        assert len(chunks[0]) == 45
        batches = sub_batches(chunks[0], 5)
        assert len(batches) == 9
        assert all(len(b) == 5 for b in batches)

    def test_no_cut_before_checkpoint(self):
        """Starts at or before the first checkpoint never cut."""
        pages = _pages({1, 5, 10, 20}, 25)
        assert len(plan_chunks(pages)) == 1

    def test_cut_after_checkpoint(self):
        """First start past page 20 opens a new chunk; checkpoint moves by 19."""
        pages = _pages({1, 21, 30, 40, 41}, 50)
        chunks = plan_chunks(pages)
        assert [c[0].page_number for c in chunks] == [1, 21, 41]
        # 40 is not past the moved checkpoint (21 + 19 = 40)
        assert chunks[1][-1].page_number == 40

    def test_start_on_first_page_does_not_cut(self):
        """A start with an empty current chunk extends it."""
        config = ChunkingConfig(first_checkpoint=0)
        pages = _pages({1, 2}, 3)
        chunks = plan_chunks(pages, config)
        assert [c[0].page_number for c in chunks] == [1, 2]

    def test_empty_input(self):
        assert plan_chunks([]) == []

    def test_pages_preserved_in_order(self):
        """Concatenated chunks equal the input, for arbitrary start patterns."""
        rng = random.Random(7)
        for _ in range(50):
            count = rng.randint(1, 120)
            starts = {n for n in range(1, count + 1) if rng.random() < 0.3}
            pages = _pages(starts, count)
            assert _flatten(plan_chunks(pages)) == pages

    def test_cuts_only_at_starts_past_checkpoint(self):
        """Every chunk boundary sits on a start page past the running checkpoint."""
        rng = random.Random(11)
        config = ChunkingConfig()
        for _ in range(50):
            count = rng.randint(1, 120)
            starts = {n for n in range(1, count + 1) if rng.random() < 0.25}
            chunks = plan_chunks(_pages(starts, count), config)

            checkpoint = config.first_checkpoint
            for chunk in chunks[1:]:
                first = chunk[0]
                assert first.is_occurrence_start
                assert first.page_number > checkpoint
                checkpoint = first.page_number + config.checkpoint_span


class TestSubBatches:
    """Test sub-batch windows."""

    def test_last_window_shorter(self):
        chunk = _pages(set(), 12)
        batches = sub_batches(chunk, 5)
        assert [len(b) for b in batches] == [5, 5, 2]

    def test_size_validation(self):
        with pytest.raises(ValueError, match="size must be >= 1"):
            sub_batches(_pages(set(), 3), 0)

    def test_plan_sub_batches(self):
        plan = plan_sub_batches(_pages({1, 25}, 30), ChunkingConfig(sub_batch_size=4))
        assert [[len(b) for b in chunk] for chunk in plan] == [[4, 4, 4, 4, 4, 4], [4, 2]]

    def test_count_sub_batches(self):
        chunks = plan_chunks(_pages({1, 25}, 30))
        assert count_sub_batches(chunks, 5) == 5 + 2

    def test_sub_batch_text(self):
        batch = _pages(set(), 3)
        assert sub_batch_text(batch) == PAGE_SEPARATOR.join(["page 1", "page 2", "page 3"])


class TestChunkingConfig:
    """Test ChunkingConfig validation."""

    def test_defaults(self):
        config = ChunkingConfig()
        assert (config.first_checkpoint, config.checkpoint_span, config.sub_batch_size) == (20, 19, 5)

    def test_sub_batch_size_validation(self):
        with pytest.raises(ValueError, match="sub_batch_size"):
            ChunkingConfig(sub_batch_size=0)

    def test_negative_checkpoint_rejected(self):
        with pytest.raises(ValueError, match="first_checkpoint"):
            ChunkingConfig(first_checkpoint=-1)
