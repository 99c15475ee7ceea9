"""
llm_query — prompt building and Gemini integration for occurrence extraction.

Public API:
  build_prompt(text)                               -> str
  read_text(path)                                  -> str
  call_gemini(prompt, model, api_key, schema)      -> str   (coroutine)
  parse_json_array(raw)                            -> list
  gemini_response_schema()                         -> dict
  occurrences_from_payload(items)                  -> list[PoliceOccurrence]
"""

from .prompt import build_prompt, read_text, PROMPT_TEMPLATE
from .gemini import call_gemini, DEFAULT_MODEL
from .json_recovery import parse_json_array
from .schema import (
    OCCURRENCE_SCHEMA,
    OCCURRENCE_LIST_SCHEMA,
    gemini_response_schema,
    validate_occurrence,
    occurrences_from_payload,
)

__all__ = [
    "build_prompt",
    "read_text",
    "PROMPT_TEMPLATE",
    "call_gemini",
    "DEFAULT_MODEL",
    "parse_json_array",
    "OCCURRENCE_SCHEMA",
    "OCCURRENCE_LIST_SCHEMA",
    "gemini_response_schema",
    "validate_occurrence",
    "occurrences_from_payload",
]
