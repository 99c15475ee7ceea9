"""
report/layout.py — text measuring, word wrapping and justified lines.

Geometry is expressed in millimetres by callers and converted to PDF points
here.  Widths come from a fitz.Font of the same base-14 face that
page.insert_text draws with.

The base-14 faces are written with a Latin-1 simple encoding; printable()
folds typographic punctuation outside it (curly quotes, dashes, ellipsis)
to ASCII, and both measuring and drawing go through it.

Public API:
  mm(value)                                            -> float  (points)
  printable(text)                                      -> str
  text_width(text, fontname, fontsize)                 -> float  (points)
  wrap_words(text, width, fontname, fontsize, first)   -> list[str]
  draw_text(page, x, y, text, ...)                     -> None
  draw_justified_line(page, text, x, y, width, ...)    -> None
"""

from __future__ import annotations

import functools
from typing import TypeAlias
import unicodedata

import fitz  # PyMuPDF

RGB: TypeAlias = tuple[float, float, float]

_MM = 72 / 25.4

BLACK: RGB = (0.0, 0.0, 0.0)

_TYPOGRAPHIC = str.maketrans({
    "“": '"', "”": '"', "„": '"',
    "‘": "'", "’": "'", "‚": "'",
    "–": "-", "—": "-", "−": "-",
    "…": "...",
    "•": "-",
    "\u00a0": " ", "\u202f": " ",
})


def mm(value: float) -> float:
    return value * _MM


def printable(text: str) -> str:
    """Text restricted to what the base-14 Latin encoding can draw."""
    text = text.translate(_TYPOGRAPHIC)
    if all(ord(ch) < 256 for ch in text):
        return text
    return "".join(ch if ord(ch) < 256 else _fold_char(ch) for ch in text)


def _fold_char(ch: str) -> str:
    decomposed = unicodedata.normalize("NFKD", ch)
    kept = "".join(c for c in decomposed if ord(c) < 256 and not unicodedata.combining(c))
    return kept or "?"


@functools.lru_cache(maxsize=8)
def _font(fontname: str) -> fitz.Font:
    return fitz.Font(fontname)


def text_width(text: str, fontname: str, fontsize: float) -> float:
    return _font(fontname).text_length(printable(text), fontsize=fontsize)


def wrap_words(
    text: str,
    width: float,
    fontname: str,
    fontsize: float,
    first_width: float | None = None,
) -> list[str]:
    """
    Greedy word wrap: each line takes as many words as fit in `width` points.

    `first_width` narrows the first line (indented paragraphs).  A word wider
    than the line gets a line of its own.
    """
    lines: list[str] = []
    current: list[str] = []
    limit = width if first_width is None else first_width

    for word in text.split():
        candidate = " ".join(current + [word])
        if current and text_width(candidate, fontname, fontsize) > limit:
            lines.append(" ".join(current))
            current = [word]
            limit = width
        else:
            current.append(word)

    if current:
        lines.append(" ".join(current))
    return lines


def draw_text(
    page: fitz.Page,
    x: float,
    y: float,
    text: str,
    fontname: str = "helv",
    fontsize: float = 11,
    color: RGB = BLACK,
) -> None:
    """Text with its baseline origin at (x, y), both in points."""
    page.insert_text(
        fitz.Point(x, y), printable(text), fontname=fontname, fontsize=fontsize, color=color,
    )


def draw_justified_line(
    page: fitz.Page,
    text: str,
    x: float,
    y: float,
    width: float,
    fontname: str = "helv",
    fontsize: float = 11,
    color: RGB = BLACK,
) -> None:
    """
    Spreads the words of `text` across `width` points.

    The slack left after the words' own widths is split evenly over the gaps;
    a single word is drawn as is.
    """
    words = text.split()
    if len(words) <= 1:
        draw_text(page, x, y, text.strip(), fontname, fontsize, color)
        return

    widths = [text_width(w, fontname, fontsize) for w in words]
    gap = (width - sum(widths)) / (len(words) - 1)

    cursor = x
    for word, w in zip(words, widths):
        draw_text(page, cursor, y, word, fontname, fontsize, color)
        cursor += w + gap
