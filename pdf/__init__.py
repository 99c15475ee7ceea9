"""
pdf — reading SUMINFO PDFs and classifying their pages.

Public API:
  iter_page_texts(path)          -> Iterator[(page_number, page_count, text)]
  read_page_texts(path)          -> list[str]
  classify(page_text, config)    -> bool
  classify_pages(texts, config)  -> list[DecodedPage]
  SegmenterConfig                boilerplate + header pattern
"""

from .header_patterns import (
    DEFAULT_BOILERPLATE,
    DEFAULT_HEADER_PATTERN,
    DEFAULT_SEGMENTER,
    SegmenterConfig,
)
from .reader import iter_page_texts, read_page_texts
from .segmenter import classify, classify_pages

__all__ = [
    "DEFAULT_BOILERPLATE",
    "DEFAULT_HEADER_PATTERN",
    "DEFAULT_SEGMENTER",
    "SegmenterConfig",
    "iter_page_texts",
    "read_page_texts",
    "classify",
    "classify_pages",
]
