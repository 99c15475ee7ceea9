"""
report/renderer.py — paginated occurrence report written with PyMuPDF.

Layout (A4, millimetres):
  - "RESERVADO" centred in bold red at 15 mm and at page height − 10 mm,
    repeated on every page
  - content between the 15 mm side margins, first baseline at 25 mm
  - a new page starts whenever the next element would pass
    page height − 20 mm; the check runs before every element, so a person
    block or the separator never straddles a page break, while a narrative
    may continue line by line on the next page

Per record:
  id (bold) → "FATO: " + fact → persons (crimes) or an italic notice
  → justified narrative (complete reports) → separator line

Public API:
  render(records, style)                      -> fitz.Document
  render_to_bytes(records, style, title)      -> bytes
  save_report(records, path, style, title)    -> Path
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

import fitz  # PyMuPDF

from data_model.occurrences import NOT_INFORMED, InvolvedPerson, PoliceOccurrence
from data_model.style import RenderStyleConfig, ReportSubType, hex_to_rgb
from pdf.text_cleaner import collapse_whitespace, normalize_upper
from report.layout import (
    BLACK,
    RGB,
    draw_justified_line,
    draw_text,
    mm,
    text_width,
    wrap_words,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page geometry (mm) and typography
# ---------------------------------------------------------------------------

PAGE_WIDTH_MM  = 210.0
PAGE_HEIGHT_MM = 297.0

MARGIN          = 15.0
FIRST_BASELINE  = 25.0
BOTTOM_LIMIT    = 20.0
MARK_TOP        = 15.0
MARK_BOTTOM     = 10.0
PERSON_INDENT   = 10.0
NARRATIVE_INDENT = 15.0
SEPARATOR_WIDTH = 0.8

FONT_REGULAR = "helv"
FONT_BOLD    = "hebo"
FONT_ITALIC  = "heit"
BODY_SIZE    = 11
NOTICE_SIZE  = 9

MARKING       = "RESERVADO"
MARKING_COLOR: RGB = (1.0, 0.0, 0.0)

FACT_LABEL = "FATO: "
PERSON_ROWS: tuple[tuple[str, str], ...] = (
    ("NOME:",          "name"),
    ("CPF:",           "cpf"),
    ("DATA DE NASC: ", "birth_date"),
    ("NOME DA MAE:",   "mother_name"),
)
NON_CRIME_NOTICE      = "Dados pessoais omitidos para ocorrências não classificadas como crime."
NARRATIVE_PLACEHOLDER = "Narrativa não informada"

# Values treated as absent (compared lower-case, trimmed).
MISSING_MARKERS = frozenset({"", "não informado", "nao informado", "null", "undefined", "none"})

# Fixed document metadata; together with no_new_id the output is reproducible.
_METADATA_DATE = "D:20000101000000Z"


def is_missing(value: str | None) -> bool:
    return value is None or str(value).strip().lower() in MISSING_MARKERS


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class _ReportWriter:
    """Cursor over a growing document; y is the next baseline in mm."""

    def __init__(self, style: RenderStyleConfig) -> None:
        self.style = style
        self.doc = fitz.open()
        self.page: fitz.Page | None = None
        self.y = FIRST_BASELINE

        self._data_color      = hex_to_rgb(style.data_color)
        self._fact_color      = hex_to_rgb(style.fact_color)
        self._separator_color = hex_to_rgb(style.separator_color)
        self._content_width   = PAGE_WIDTH_MM - 2 * MARGIN

        self._new_page()

    # -- pagination ---------------------------------------------------------

    def _new_page(self) -> None:
        self.page = self.doc.new_page(width=mm(PAGE_WIDTH_MM), height=mm(PAGE_HEIGHT_MM))
        self.y = FIRST_BASELINE
        self._draw_markings()

    def _draw_markings(self) -> None:
        width = text_width(MARKING, FONT_BOLD, BODY_SIZE)
        x = (mm(PAGE_WIDTH_MM) - width) / 2
        for y in (MARK_TOP, PAGE_HEIGHT_MM - MARK_BOTTOM):
            draw_text(self.page, x, mm(y), MARKING, FONT_BOLD, BODY_SIZE, MARKING_COLOR)

    def check(self, height: float) -> None:
        if self.y + height > PAGE_HEIGHT_MM - BOTTOM_LIMIT:
            self._new_page()

    def text(self, x: float, y: float, text: str, fontname: str = FONT_REGULAR,
             fontsize: float = BODY_SIZE, color: RGB = BLACK) -> None:
        draw_text(self.page, mm(x), mm(y), text, fontname, fontsize, color)

    # -- record -------------------------------------------------------------

    def record(self, occ: PoliceOccurrence) -> None:
        self.check(40)
        self.text(MARGIN, self.y, occ.id, FONT_BOLD)
        self.y += 10

        self._fact(occ.fact)
        self.y += 10

        if occ.is_crime:
            self._persons(occ.involved)
        else:
            self.check(8)
            self.text(MARGIN, self.y, NON_CRIME_NOTICE, FONT_ITALIC, NOTICE_SIZE)
            self.y += 8

        if self.style.report_sub_type != ReportSubType.PERSONAL_DATA_ONLY:
            self._narrative(occ.narrative)

        self.y += 5
        self.check(10)
        self.page.draw_line(
            fitz.Point(mm(MARGIN), mm(self.y)),
            fitz.Point(mm(PAGE_WIDTH_MM - MARGIN), mm(self.y)),
            color=self._separator_color,
            width=mm(SEPARATOR_WIDTH),
        )
        self.y += 15

    def _fact(self, fact: str) -> None:
        self.text(MARGIN, self.y, FACT_LABEL, FONT_BOLD)
        offset = text_width(FACT_LABEL, FONT_BOLD, BODY_SIZE) / mm(1)
        font = FONT_BOLD if self.style.fact_bold else FONT_REGULAR
        self.text(MARGIN + offset, self.y, normalize_upper(fact), font, color=self._fact_color)

    def _persons(self, involved: Sequence[InvolvedPerson]) -> None:
        if not involved:
            self.check(35)
            self._person_rows(None)
            self.y += 28
            return

        for index, person in enumerate(involved, start=1):
            self.check(35)
            self.text(MARGIN, self.y, f"{index}.", FONT_BOLD)
            self._person_rows(person)
            self.y += 28

    def _person_rows(self, person: InvolvedPerson | None) -> None:
        x = MARGIN + PERSON_INDENT
        for row, (label, attr) in enumerate(PERSON_ROWS):
            value = getattr(person, attr) if person is not None else ""
            self._data_row(label, value, x, self.y + row * 6)

    def _data_row(self, label: str, value: str | None, x: float, y: float) -> None:
        self.text(x, y, label)
        value_x = x + text_width(label + " ", FONT_REGULAR, BODY_SIZE) / mm(1)
        if is_missing(value):
            self.text(value_x, y, NOT_INFORMED, FONT_ITALIC)
        else:
            font = FONT_BOLD if self.style.data_bold else FONT_REGULAR
            self.text(value_x, y, normalize_upper(str(value)), font, color=self._data_color)

    def _narrative(self, narrative: str | None) -> None:
        text = collapse_whitespace(narrative or "") or NARRATIVE_PLACEHOLDER
        width = mm(self._content_width)
        lines = wrap_words(text, width, FONT_REGULAR, BODY_SIZE,
                           first_width=width - mm(NARRATIVE_INDENT))

        last = len(lines) - 1
        for index, line in enumerate(lines):
            self.check(6)
            indent = NARRATIVE_INDENT if index == 0 else 0.0
            x = MARGIN + indent
            if index == last:
                self.text(x, self.y, line)
            else:
                draw_justified_line(self.page, line, mm(x), mm(self.y),
                                    mm(self._content_width - indent), FONT_REGULAR, BODY_SIZE)
            self.y += 6


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render(
    records: Iterable[PoliceOccurrence],
    style: RenderStyleConfig | None = None,
) -> fitz.Document:
    """Renders records in the given order; the caller closes the document."""
    writer = _ReportWriter(style or RenderStyleConfig())
    count = 0
    for occ in records:
        writer.record(occ)
        count += 1
    logger.info("Rendered %d occurrence(s) on %d page(s)", count, writer.doc.page_count)
    return writer.doc


def render_to_bytes(
    records: Iterable[PoliceOccurrence],
    style: RenderStyleConfig | None = None,
    title: str = "",
) -> bytes:
    doc = render(records, style)
    try:
        doc.set_metadata({
            "title":        title,
            "author":       "",
            "subject":      "",
            "keywords":     "",
            "creator":      "suminfo",
            "producer":     "suminfo",
            "creationDate": _METADATA_DATE,
            "modDate":      _METADATA_DATE,
        })
        return doc.tobytes(garbage=3, deflate=True, no_new_id=True)
    finally:
        doc.close()


def save_report(
    records: Iterable[PoliceOccurrence],
    path: str | Path,
    style: RenderStyleConfig | None = None,
    title: str = "",
) -> Path:
    out = Path(path)
    out.write_bytes(render_to_bytes(records, style, title))
    logger.info("Report written to %s", out)
    return out
