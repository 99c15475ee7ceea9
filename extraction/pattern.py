"""
extraction/pattern.py — deterministic, offline occurrence extractor.

Architecture:
  text → header matches ("NNNNN ... DD/MM/YYYY") → one block per header
  → drop traffic-accident-only blocks
  → fact (after the unit marker), involved persons (split on role words),
    narrative (from "No dia" to the end of the block)
  → PoliceOccurrence (isCrime always True)

Field searches run on the text with diacritics stripped, so "MÃE" and
"MAE" are the same marker; the narrative keeps the original characters.

Known limitation: any bare 5+ digit number (an unformatted CPF, say)
followed by a date, on the same line or on the next one, matches the
header pattern.  A CPF line "12345678901" above "DATA DE NASCIMENTO:
01/02/1990" therefore opens a new block and splits the occurrence.
Formatted CPFs ("123.456.789-01") do not match.

Public API:
  extract_occurrences(text)  -> list[PoliceOccurrence]
  PatternExtractor           Extractor implementation
"""

from __future__ import annotations

import logging
import re

from data_model.occurrences import (
    CONDITION_IDENTIFIED,
    FACT_NOT_IDENTIFIED,
    NARRATIVE_NOT_FOUND,
    NOT_INFORMED,
    InvolvedPerson,
    PoliceOccurrence,
)
from pdf.text_cleaner import clean_text, normalize_upper, strip_diacritics

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Occurrence start: 5+ digit number (optional /year), anything, DD/MM/YYYY.
_HEADER_RE = re.compile(r"(\d{5,}(?:/\d+)?)\s+.*?\s+(\d{2}/\d{2}/\d{4})")

# Full header at the start of a block: "49294 - 20/12/2025 06:00:13 - 10BPM-19DEZ2025-03"
_COMPOSITE_ID_RE = re.compile(
    r"(\d{5,}(?:/\d+)?)\s*-\s*(\d{2}/\d{2}/\d{4}(?:\s+\d{2}:\d{2}(?::\d{2})?)?)\s*-\s*(\S+)"
)

_FACT_RE = re.compile(
    r"(?<![A-Za-z])(?:BPM|CIPM|PEL|CIA|UNIDADE)(?![A-Za-z])\s*[-–—:]?\s*([^\n\r]+)",
    re.IGNORECASE,
)

_ROLE_RE = re.compile(
    r"(?<![A-Za-z])(?:ACUSAD[OA]|SUSPEIT[OA]|ENVOLVID[OA]|CONDUZID[OA]|AUTORA?"
    r"|INDICIAD[OA]|INFRATORA?)S?(?![A-Za-z])",
    re.IGNORECASE,
)

_NAME_RE       = re.compile(r"^\s*[:\-–]?\s*([^\n\r,;]{3,})")
_NAME_LABEL_RE = re.compile(r"^(CPF|MAE|DATA|NASC)", re.IGNORECASE)
_NAME_STOP_RE  = re.compile(r"\s(?:CPF|DOC|RG|NASC|NASCIMENTO|MAE|FILIACAO|GENITORA)\b", re.IGNORECASE)

_CPF_RE = re.compile(r"(?<![A-Za-z])(?:CPF|DOC)(?![A-Za-z])\.?\s*[:\-–]?\s*([\d.\-]{11,15})", re.IGNORECASE)
_BIRTH_RE = re.compile(
    r"(?<![A-Za-z])(?:DATA\s+(?:DE\s+)?NASC(?:IMENTO)?|NASCIMENTO|NASC|DN)(?![A-Za-z])"
    r"\.?\s*[:\-–]?\s*(\d{2}/\d{2}/\d{4})",
    re.IGNORECASE,
)
_MOTHER_RE = re.compile(
    r"(?<![A-Za-z])(?:MAE|GENITORA|FILIACAO)(?![A-Za-z])\s*[:\-–]?\s*([^\n\r,;]{3,})",
    re.IGNORECASE,
)

_NARRATIVE_RE = re.compile(r"No dia[\s\S]+", re.IGNORECASE)

# Traffic accidents are dropped unless one of these escalates them to a crime.
ACCIDENT_MARKER = "ACIDENTE DE TRANSITO"
ESCALATION_MARKERS: tuple[str, ...] = ("EMBRIAGUEZ", "HOMICIDIO", "DROGAS", "ARMA")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_occurrences(text: str) -> list[PoliceOccurrence]:
    """
    Extracts crime occurrences from a sub-batch of page text.

    Returns an empty list when no header is found (nothing extractable).
    """
    matches = list(_HEADER_RE.finditer(text))
    if not matches:
        logger.warning("No occurrence header detected in text (%d chars)", len(text))
        return []

    occurrences: list[PoliceOccurrence] = []
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        block = text[m.start():end]

        if is_accident_only(block):
            logger.debug("Skipping traffic-accident block %s", m.group(1))
            continue

        occurrences.append(_parse_block(block, number=m.group(1), date=m.group(2)))

    return occurrences


def is_accident_only(block: str) -> bool:
    upper = normalize_upper(block)
    return ACCIDENT_MARKER in upper and not any(k in upper for k in ESCALATION_MARKERS)


class PatternExtractor:
    """Offline Extractor: regex-based, no network, same record contract."""

    name = "pattern"

    async def extract(self, text: str) -> list[PoliceOccurrence]:
        return extract_occurrences(text)


# ---------------------------------------------------------------------------
# Block parsing
# ---------------------------------------------------------------------------

def _parse_block(block: str, number: str, date: str) -> PoliceOccurrence:
    composite = _COMPOSITE_ID_RE.match(block)
    if composite:
        occ_id = f"{composite.group(1)} - {composite.group(2)} - {composite.group(3)}"
        header_len = composite.end()
    else:
        occ_id = number
        header_len = len(number)

    plain = strip_diacritics(block)
    narrative_match = _NARRATIVE_RE.search(block)
    narrative = narrative_match.group(0).strip() if narrative_match else NARRATIVE_NOT_FOUND

    plain_narrative = _NARRATIVE_RE.search(plain)
    details = plain[header_len:plain_narrative.start()] if plain_narrative else plain[header_len:]

    return PoliceOccurrence(
        id=occ_id,
        date=date,
        fact=_extract_fact(details),
        is_crime=True,
        narrative=narrative,
        involved=_extract_involved(details),
    )


def _extract_fact(details: str) -> str:
    """Text after the first unit marker; `details` starts after the header,
    so a unit code inside the id ("10BPM-...") is never taken as the fact."""
    m = _FACT_RE.search(details)
    if not m:
        return FACT_NOT_IDENTIFIED
    fact = m.group(1).strip().split("  ")[0]
    return clean_text(fact) or FACT_NOT_IDENTIFIED


def _extract_involved(details: str) -> list[InvolvedPerson]:
    involved: list[InvolvedPerson] = []
    seen: set[str] = set()

    # The first part precedes the first role word and names nobody.
    for segment in _ROLE_RE.split(details)[1:]:
        name_match = _NAME_RE.match(segment)
        if not name_match:
            continue

        raw_name = name_match.group(1).strip()
        if _NAME_LABEL_RE.match(raw_name):
            continue

        name = _clean_name(raw_name)
        if len(name) < 3 or name in seen:
            continue
        seen.add(name)

        cpf_match    = _CPF_RE.search(segment)
        birth_match  = _BIRTH_RE.search(segment)
        mother_match = _MOTHER_RE.search(segment)

        involved.append(InvolvedPerson(
            name        = name,
            cpf         = clean_cpf(cpf_match.group(1)) if cpf_match else NOT_INFORMED,
            birth_date  = birth_match.group(1) if birth_match else NOT_INFORMED,
            mother_name = _clean_name(mother_match.group(1)) if mother_match else NOT_INFORMED,
            condition   = CONDITION_IDENTIFIED,
        ))

    return involved


def _clean_name(raw: str) -> str:
    """Name text up to the next field label, upper-case without diacritics."""
    return clean_text(_NAME_STOP_RE.split(raw, maxsplit=1)[0])


def clean_cpf(text: str) -> str:
    """Last 11 digits of a CPF-like string, or NOT_INFORMED when shorter."""
    digits = re.sub(r"\D", "", text)
    return digits[-11:] if len(digits) >= 11 else NOT_INFORMED
