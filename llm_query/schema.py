"""
llm_query/schema.py — record schema shared by the backend request and response checks.

OCCURRENCE_LIST_SCHEMA is plain JSON Schema (validated with jsonschema);
gemini_response_schema() rewrites it into the upper-case type names of the
Gemini responseSchema dialect.

Public API:
  OCCURRENCE_SCHEMA, OCCURRENCE_LIST_SCHEMA
  gemini_response_schema()             -> dict
  validate_occurrence(item)            -> list[str]   (error messages)
  occurrences_from_payload(items)      -> list[PoliceOccurrence]
"""

from __future__ import annotations

import copy
import functools
import logging
from typing import Any

import jsonschema

from data_model.occurrences import PoliceOccurrence

logger = logging.getLogger(__name__)

PERSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "name":       {"type": "string"},
        "cpf":        {"type": "string"},
        "birthDate":  {"type": "string"},
        "motherName": {"type": "string"},
        "condition":  {"type": "string"},
    },
    "required": ["name", "cpf"],
}

OCCURRENCE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "id": {
            "type": "string",
            "description": "Full header: Number - Date/Time - Unit-Suffix",
        },
        "date": {
            "type": "string",
            "description": "Date only, DD/MM/YYYY, used for ordering",
        },
        "fact":      {"type": "string"},
        "isCrime":   {"type": "boolean"},
        "narrative": {"type": "string"},
        "involved":  {"type": "array", "items": PERSON_SCHEMA},
    },
    "required": ["id", "date", "fact", "isCrime", "narrative", "involved"],
}

OCCURRENCE_LIST_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": OCCURRENCE_SCHEMA,
}


def gemini_response_schema() -> dict[str, Any]:
    """OCCURRENCE_LIST_SCHEMA with Gemini's type names ("ARRAY", "STRING", ...)."""
    return _upper_types(copy.deepcopy(OCCURRENCE_LIST_SCHEMA))


def _upper_types(node: Any) -> Any:
    if isinstance(node, dict):
        return {
            k: (v.upper() if k == "type" and isinstance(v, str) else _upper_types(v))
            for k, v in node.items()
        }
    if isinstance(node, list):
        return [_upper_types(v) for v in node]
    return node


@functools.lru_cache(maxsize=1)
def _validator() -> jsonschema.Draft202012Validator:
    return jsonschema.Draft202012Validator(OCCURRENCE_SCHEMA)


def validate_occurrence(item: Any) -> list[str]:
    """Schema violations of one record; empty list when valid."""
    errors: list[str] = []
    for e in _validator().iter_errors(item):
        path = "/" + "/".join(str(p) for p in e.absolute_path) if e.absolute_path else "/"
        errors.append(f"{path}: {e.message}")
    return errors


def occurrences_from_payload(items: list[Any]) -> list[PoliceOccurrence]:
    """
    Converts parsed backend output into records.

    Records violating the schema are dropped (with a warning); the remaining
    records of the same response are kept.
    """
    records: list[PoliceOccurrence] = []
    for i, item in enumerate(items):
        errors = validate_occurrence(item)
        if errors:
            logger.warning("Dropping record %d of backend response: %s", i, "; ".join(errors[:3]))
            continue
        record = PoliceOccurrence.from_dict(item)
        if not record.id:
            logger.warning("Dropping record %d of backend response: empty id", i)
            continue
        records.append(record)
    return records
