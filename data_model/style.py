"""
data_model/style.py — per-render styling of the occurrence report.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class ReportSubType(StrEnum):
    COMPLETE           = "complete"
    PERSONAL_DATA_ONLY = "personal_data_only"


@dataclass(frozen=True, slots=True)
class RenderStyleConfig:
    """
    Colours and weights applied by the report renderer.

    Colours are "#RRGGBB" (or "#RGB") strings.  `report_sub_type` set to
    PERSONAL_DATA_ONLY leaves narratives out of the document.
    """
    separator_color: str = "#000000"
    data_color:      str = "#FF0000"
    data_bold:       bool = True
    fact_color:      str = "#0000FF"
    fact_bold:       bool = True
    report_sub_type: ReportSubType = ReportSubType.COMPLETE

    def __post_init__(self) -> None:
        for name in ("separator_color", "data_color", "fact_color"):
            value = getattr(self, name)
            if not isinstance(value, str) or not _HEX_COLOR_RE.match(value):
                raise ValueError(f"{name} must be a hex colour like '#FF0000', got {value!r}")
        if self.report_sub_type not in tuple(ReportSubType):
            raise ValueError(
                f"report_sub_type must be one of {[s.value for s in ReportSubType]}, "
                f"got {self.report_sub_type!r}"
            )


def hex_to_rgb(color: str) -> tuple[float, float, float]:
    """"#FF8000" -> (1.0, 0.50..., 0.0), the 0..1 triple PyMuPDF expects."""
    digits = color.lstrip("#")
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    return r / 255, g / 255, b / 255
