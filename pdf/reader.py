"""
pdf/reader.py — plain text of every page of a SUMINFO PDF.

Architecture:
  pdf_path → fitz.open() → pages in rendering order → page.get_text("text")

Public API:
  iter_page_texts(path)   -> Iterator[tuple[int, int, str]]   (page_number, page_count, text)
  read_page_texts(path)   -> list[str]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

from data_model.errors import DecodingError

logger = logging.getLogger(__name__)


def iter_page_texts(path: str | Path) -> Iterator[tuple[int, int, str]]:
    """
    Yields (page_number, page_count, text) for each page, 1-based.

    The document stays open while the caller iterates, so progress can be
    reported between pages.

    Raises:
        DecodingError: the file cannot be opened or a page cannot be read.
    """
    try:
        doc = fitz.open(str(path))
    except Exception as e:
        raise DecodingError(f"Failed to open PDF {path}: {e}") from e

    try:
        page_count = doc.page_count
        logger.debug("Decoding %s (%d pages)", path, page_count)
        for page in doc:
            try:
                text = page.get_text("text")
            except Exception as e:
                raise DecodingError(f"Failed to read page {page.number + 1} of {path}: {e}") from e
            yield page.number + 1, page_count, text
    finally:
        doc.close()


def read_page_texts(path: str | Path) -> list[str]:
    return [text for _, _, text in iter_page_texts(path)]
