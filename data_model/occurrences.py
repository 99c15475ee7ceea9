"""
data_model/occurrences.py — records produced by the SUMINFO pipeline.

DecodedPage is one source page after classification; PoliceOccurrence is the
canonical extracted record with its InvolvedPerson entries.  The JSON helpers
use the wire field names (camelCase) shared with the extraction backend.

Public API:
  PoliceOccurrence.from_dict(data)  -> PoliceOccurrence
  PoliceOccurrence.to_dict()        -> dict
  dump_occurrences(records)         -> str
  load_occurrences(text)            -> list[PoliceOccurrence]
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, TypeAlias

NOT_INFORMED        = "Não informado"
FACT_NOT_IDENTIFIED = "FATO NÃO IDENTIFICADO"
NARRATIVE_NOT_FOUND = "NARRATIVA NÃO LOCALIZADA"
CONDITION_IDENTIFIED = "Identificado"


@dataclass(frozen=True, slots=True)
class DecodedPage:
    page_number: int           # 1-based
    text: str
    is_occurrence_start: bool = False


@dataclass(slots=True)
class InvolvedPerson:
    """
    Person listed under an occurrence.

    - name:        upper-case, no diacritics
    - cpf:         11 digits or NOT_INFORMED
    - birth_date:  DD/MM/YYYY or NOT_INFORMED
    - mother_name: upper-case, no diacritics, or NOT_INFORMED
    - condition:   role tag, e.g. "Identificado", "Suspeito"
    """
    name: str
    cpf: str = NOT_INFORMED
    birth_date: str = NOT_INFORMED
    mother_name: str = NOT_INFORMED
    condition: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InvolvedPerson:
        return cls(
            name        = _text(data.get("name")),
            cpf         = _text(data.get("cpf")) or NOT_INFORMED,
            birth_date  = _text(data.get("birthDate")) or NOT_INFORMED,
            mother_name = _text(data.get("motherName")) or NOT_INFORMED,
            condition   = _text(data.get("condition")),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "name":       self.name,
            "cpf":        self.cpf,
            "birthDate":  self.birth_date,
            "motherName": self.mother_name,
            "condition":  self.condition,
        }


@dataclass(slots=True)
class PoliceOccurrence:
    """
    One incident of the source document.

    `id` is the full header "number - datetime - unit/reference" and is the
    deduplication key across sub-batches.  `narrative` starts at the
    incident-opening phrase ("No dia ...") and runs to the end of the record,
    LinkGeo reference included.
    """
    id: str
    date: str
    fact: str
    is_crime: bool
    narrative: str
    involved: list[InvolvedPerson] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PoliceOccurrence:
        involved = data.get("involved") or []
        return cls(
            id        = _text(data.get("id")),
            date      = _text(data.get("date")),
            fact      = _text(data.get("fact")),
            is_crime  = bool(data.get("isCrime", False)),
            narrative = _text(data.get("narrative")),
            involved  = [InvolvedPerson.from_dict(p) for p in involved if isinstance(p, dict)],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id":        self.id,
            "date":      self.date,
            "fact":      self.fact,
            "isCrime":   self.is_crime,
            "narrative": self.narrative,
            "involved":  [p.to_dict() for p in self.involved],
        }


# Ordered pages between two checkpoint cuts, and a fixed-size window of one.
Chunk: TypeAlias = list[DecodedPage]
SubBatch: TypeAlias = list[DecodedPage]

# Occurrence id -> record; later writes win.
ResultSet: TypeAlias = dict[str, PoliceOccurrence]


def dump_occurrences(records: Iterable[PoliceOccurrence]) -> str:
    data = [r.to_dict() for r in records]
    return json.dumps(data, ensure_ascii=False, indent=2)


def load_occurrences(text: str) -> list[PoliceOccurrence]:
    """Parses a JSON array written by dump_occurrences()."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of occurrences.")
    return [PoliceOccurrence.from_dict(item) for item in data if isinstance(item, dict)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
