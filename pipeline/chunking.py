"""
pipeline/chunking.py — partitions classified pages into chunks and sub-batches.

Chunks:
  A running checkpoint starts at page `first_checkpoint`.  A page closes the
  open chunk and opens a new one only when its number is past the checkpoint
  AND it starts an occurrence; the checkpoint then moves to
  page_number + checkpoint_span.  Cuts therefore land on occurrence
  boundaries, and a chunk holds roughly first_checkpoint pages.

Sub-batches:
  Each chunk is sliced into windows of `sub_batch_size` pages (the unit sent
  to the extractor); the last window may be shorter.

Public API:
  plan_chunks(pages, config)       -> list[Chunk]
  sub_batches(chunk, size)         -> list[SubBatch]
  plan_sub_batches(pages, config)  -> list[list[SubBatch]]
  sub_batch_text(batch)            -> str
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from data_model.occurrences import Chunk, DecodedPage, SubBatch

PAGE_SEPARATOR = "\n\n"


@dataclass(frozen=True, slots=True)
class ChunkingConfig:
    first_checkpoint: int = 20
    checkpoint_span:  int = 19
    sub_batch_size:   int = 5

    def __post_init__(self) -> None:
        if self.sub_batch_size < 1:
            raise ValueError(f"sub_batch_size must be >= 1, got {self.sub_batch_size}")
        if self.first_checkpoint < 0:
            raise ValueError(f"first_checkpoint must be >= 0, got {self.first_checkpoint}")
        if self.checkpoint_span < 0:
            raise ValueError(f"checkpoint_span must be >= 0, got {self.checkpoint_span}")


DEFAULT_CHUNKING = ChunkingConfig()


def plan_chunks(
    pages: Sequence[DecodedPage],
    config: ChunkingConfig = DEFAULT_CHUNKING,
) -> list[Chunk]:
    """Groups pages (document order) into chunks cut at occurrence starts."""
    chunks: list[Chunk] = []
    current: Chunk = []
    checkpoint = config.first_checkpoint

    for page in pages:
        if page.page_number > checkpoint and page.is_occurrence_start and current:
            chunks.append(current)
            current = [page]
            checkpoint = page.page_number + config.checkpoint_span
        else:
            current.append(page)

    if current:
        chunks.append(current)
    return chunks


def sub_batches(chunk: Chunk, size: int = DEFAULT_CHUNKING.sub_batch_size) -> list[SubBatch]:
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    return [chunk[i:i + size] for i in range(0, len(chunk), size)]


def plan_sub_batches(
    pages: Sequence[DecodedPage],
    config: ChunkingConfig = DEFAULT_CHUNKING,
) -> list[list[SubBatch]]:
    """Chunks, each already split into its sub-batches."""
    return [sub_batches(chunk, config.sub_batch_size) for chunk in plan_chunks(pages, config)]


def count_sub_batches(chunks: Sequence[Chunk], size: int) -> int:
    return sum(math.ceil(len(c) / size) for c in chunks)


def sub_batch_text(batch: SubBatch) -> str:
    """Concatenated page texts, as submitted to the extractor."""
    return PAGE_SEPARATOR.join(page.text for page in batch)
