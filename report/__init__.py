"""
report — record selection and the paginated PDF report.

Public API:
  select_occurrences(records, report_type)   -> list[PoliceOccurrence]
  effective_style(style, report_type)        -> RenderStyleConfig
  sort_by_date(records)                      -> list[PoliceOccurrence]
  report_filename(output_name)               -> str
  render(records, style)                     -> fitz.Document
  render_to_bytes(records, style, title)     -> bytes
  save_report(records, path, style, title)   -> Path
"""

from .selection import (
    NOTHING_SELECTED,
    ReportType,
    effective_style,
    report_filename,
    select_occurrences,
    sort_by_date,
)
from .renderer import (
    MARKING,
    NARRATIVE_PLACEHOLDER,
    NON_CRIME_NOTICE,
    is_missing,
    render,
    render_to_bytes,
    save_report,
)

__all__ = [
    "NOTHING_SELECTED",
    "ReportType",
    "effective_style",
    "report_filename",
    "select_occurrences",
    "sort_by_date",
    "MARKING",
    "NARRATIVE_PLACEHOLDER",
    "NON_CRIME_NOTICE",
    "is_missing",
    "render",
    "render_to_bytes",
    "save_report",
]
