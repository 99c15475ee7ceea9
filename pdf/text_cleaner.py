"""
pdf/text_cleaner.py — text normalisation shared by segmenter, extractors and renderer.

What we do:
  - decompose accented characters (NFD) and drop the combining marks
  - drop loose spacing accents left by OCR (´ ` ^ ~)
  - upper-case for comparisons and for names/facts in output
  - collapse whitespace runs to a single space

Public API:
  strip_diacritics(text)     -> str
  normalize_upper(text)      -> str
  clean_text(text)           -> str
  collapse_whitespace(text)  -> str
"""

from __future__ import annotations

import re
import unicodedata

_LOOSE_ACCENTS_RE = re.compile(r"[´`^~]")
_WHITESPACE_RE    = re.compile(r"\s+")


def strip_diacritics(text: str) -> str:
    """"Mãe de João" -> "Mae de Joao"; case is kept."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_upper(text: str) -> str:
    """Diacritics stripped and upper-cased, whitespace untouched."""
    return strip_diacritics(text).upper()


def clean_text(text: str | None) -> str:
    """Name/fact form: no diacritics, no loose accents, upper-case, trimmed."""
    if not text:
        return ""
    return _LOOSE_ACCENTS_RE.sub("", strip_diacritics(text)).upper().strip()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()
