"""
pipeline/merge.py — accumulation of extracted records across sub-batches.

Records are keyed by occurrence id; a later record replaces an earlier one
with the same id.  Iteration order of the result carries no meaning.
"""

from __future__ import annotations

from typing import Iterable

from data_model.occurrences import PoliceOccurrence, ResultSet


def merge(result_set: ResultSet, records: Iterable[PoliceOccurrence]) -> ResultSet:
    """Returns a new ResultSet: `result_set` overwritten by `records` (last write wins)."""
    merged = dict(result_set)
    for record in records:
        merged[record.id] = record
    return merged
