"""
pdf/segmenter.py — decides which pages open a new occurrence.

A page starts an occurrence when, after normalisation and removal of the
configured boilerplate, its text begins with the occurrence header
("number - DD/MM/YYYY").  Pages are classified independently of each other.

Known limitation: a header preceded by boilerplate missing from
SegmenterConfig.boilerplate is read as a continuation page.

Public API:
  classify(page_text, config)           -> bool
  classify_pages(page_texts, config)    -> list[DecodedPage]
"""

from __future__ import annotations

from typing import Iterable

from data_model.occurrences import DecodedPage
from pdf.header_patterns import DEFAULT_SEGMENTER, SegmenterConfig
from pdf.text_cleaner import normalize_upper


def classify(page_text: str, config: SegmenterConfig = DEFAULT_SEGMENTER) -> bool:
    """True iff the page text opens a new occurrence."""
    check_area = normalize_upper(page_text)
    for phrase in config.boilerplate:
        check_area = check_area.replace(phrase, "")
    return config.header_pattern.match(check_area.lstrip()) is not None


def classify_pages(
    page_texts: Iterable[str],
    config: SegmenterConfig = DEFAULT_SEGMENTER,
) -> list[DecodedPage]:
    """Wraps page texts (in document order) as 1-based DecodedPage records."""
    return [
        DecodedPage(page_number=i, text=text, is_occurrence_start=classify(text, config))
        for i, text in enumerate(page_texts, start=1)
    ]
