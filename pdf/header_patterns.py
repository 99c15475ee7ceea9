"""
pdf/header_patterns.py — configuration of the occurrence-start heuristic.

SegmenterConfig contains:
  - boilerplate    : phrases (already normalised: upper-case, no diacritics)
                     removed from a page before the header test
  - header_pattern : compiled pattern tested at position 0 of what remains

Both are data, not code: a new document layout is calibrated by passing a
different SegmenterConfig, the classifier itself stays unchanged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# Letterhead and classification banners of the SUMINFO layout.
DEFAULT_BOILERPLATE: tuple[str, ...] = (
    "RESERVADO",
    "GOVERNO DO ESTADO DO RIO DE JANEIRO",
    "SECRETARIA DE ESTADO DA POLICIA MILITAR",
    "SUBSECRETARIA DE INTELIGENCIA",
    "SUMARIO DE INFORMACOES",
)

# "49294 - 20/12/2025 ...": 4+ digit number, optional dash, DD/MM/YYYY.
DEFAULT_HEADER_PATTERN: re.Pattern[str] = re.compile(r"^\d{4,}\s*-?\s*\d{2}/\d{2}/\d{4}")


@dataclass(frozen=True, slots=True)
class SegmenterConfig:
    boilerplate: tuple[str, ...] = DEFAULT_BOILERPLATE
    header_pattern: re.Pattern[str] = field(default=DEFAULT_HEADER_PATTERN)

    def __post_init__(self) -> None:
        if any(not phrase for phrase in self.boilerplate):
            raise ValueError("boilerplate phrases must be non-empty strings")
        if not isinstance(self.header_pattern, re.Pattern):
            raise ValueError(
                f"header_pattern must be a compiled pattern, got {type(self.header_pattern).__name__}"
            )


DEFAULT_SEGMENTER = SegmenterConfig()
