"""
pipeline — chunk planning, result merging and run orchestration.

Public API:
  plan_chunks(pages, config)    -> list[Chunk]
  sub_batches(chunk, size)      -> list[SubBatch]
  sub_batch_text(batch)         -> str
  merge(result_set, records)    -> ResultSet
  Pipeline                      process_pdf / process_pages / process_text
  RunContext, Stage             observable run state
"""

from .chunking import (
    DEFAULT_CHUNKING,
    PAGE_SEPARATOR,
    ChunkingConfig,
    count_sub_batches,
    plan_chunks,
    plan_sub_batches,
    sub_batch_text,
    sub_batches,
)
from .merge import merge
from .runner import (
    BatchFailure,
    Pipeline,
    RunContext,
    Stage,
)

__all__ = [
    "DEFAULT_CHUNKING",
    "PAGE_SEPARATOR",
    "ChunkingConfig",
    "count_sub_batches",
    "plan_chunks",
    "plan_sub_batches",
    "sub_batch_text",
    "sub_batches",
    "merge",
    "BatchFailure",
    "Pipeline",
    "RunContext",
    "Stage",
]
