"""
report/selection.py — which records go into a report, in which order.

Report types:
  crimes   isCrime records whose fact does not mention ACIDENTE
  all      every record; the sub-type is forced to complete
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import StrEnum
from typing import Iterable

from data_model.occurrences import PoliceOccurrence
from data_model.style import RenderStyleConfig, ReportSubType
from pdf.text_cleaner import normalize_upper

NOTHING_SELECTED = "No occurrence matches the current filters."

_ACCIDENT = "ACIDENTE"
_DATE_FORMAT = "%d/%m/%Y"


class ReportType(StrEnum):
    CRIMES = "crimes"
    ALL    = "all"


def select_occurrences(
    records: Iterable[PoliceOccurrence],
    report_type: ReportType = ReportType.CRIMES,
) -> list[PoliceOccurrence]:
    if report_type == ReportType.ALL:
        return list(records)
    return [
        r for r in records
        if r.is_crime and _ACCIDENT not in normalize_upper(r.fact)
    ]


def effective_style(style: RenderStyleConfig, report_type: ReportType) -> RenderStyleConfig:
    """Personal-data-only output exists for crime reports only."""
    if report_type == ReportType.ALL and style.report_sub_type != ReportSubType.COMPLETE:
        return dataclasses.replace(style, report_sub_type=ReportSubType.COMPLETE)
    return style


def sort_by_date(records: Iterable[PoliceOccurrence]) -> list[PoliceOccurrence]:
    """Oldest first, then by id; unparsable dates go last."""
    def key(r: PoliceOccurrence) -> tuple[int, datetime, str]:
        try:
            return 0, datetime.strptime(r.date.strip()[:10], _DATE_FORMAT), r.id
        except ValueError:
            return 1, datetime.max, r.id

    return sorted(records, key=key)


def report_filename(output_name: str) -> str:
    return f"{output_name}.pdf"
