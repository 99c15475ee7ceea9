"""
llm_query/json_recovery.py — parsing of possibly truncated JSON from the model.

Long sub-batches make the model hit its output limit mid-record.  Stages:
  1. strict parse (after dropping a ```json fence)
  2. repair: close an unterminated string, drop a dangling comma,
     close every open array/object in reverse order
  3. salvage: cut after the last complete top-level record, close the array
If all three fail, MalformedResponseError is raised.

Public API:
  parse_json_array(raw)  -> list
"""

from __future__ import annotations

import json
import logging
from typing import Any

from data_model.errors import MalformedResponseError

logger = logging.getLogger(__name__)

_CLOSERS = {"[": "]", "{": "}"}


def parse_json_array(raw: str) -> list[Any]:
    """
    Parses the model's answer as a JSON array, repairing truncation.

    A single top-level object is accepted as a one-element array.

    Raises:
        MalformedResponseError: nothing usable could be recovered.
    """
    text = _strip_fences(raw)
    if not text:
        raise MalformedResponseError("The AI response was empty. Try processing fewer pages per batch.")

    try:
        return _as_list(json.loads(text))
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON from backend (%s); applying recovery heuristics", e)

    try:
        return _as_list(json.loads(close_open_structures(text)))
    except json.JSONDecodeError:
        pass

    salvaged = truncate_to_last_record(text)
    if salvaged is not None:
        try:
            items = _as_list(json.loads(salvaged))
            logger.warning("Salvaged %d complete record(s) from truncated response", len(items))
            return items
        except json.JSONDecodeError:
            pass

    logger.error("JSON recovery failed; response starts with: %s", text[:200].replace("\n", " "))
    raise MalformedResponseError()


def close_open_structures(text: str) -> str:
    """Balances quoting and brackets left open at the end of `text`."""
    stack, in_string, escaped = _scan(text)
    fixed = text
    if in_string:
        if escaped:
            fixed = fixed[:-1]
        fixed += '"'
    fixed = fixed.rstrip()
    if fixed.endswith(","):
        fixed = fixed[:-1]
    return fixed + "".join(_CLOSERS[c] for c in reversed(stack))


def truncate_to_last_record(text: str) -> str | None:
    """
    Cuts a top-level array after its last complete element object.

    Returns None when the text is not an array or holds no complete element.
    """
    stripped = text.lstrip()
    if not stripped.startswith("["):
        return None

    depth = 0
    in_string = False
    escaped = False
    last_end: int | None = None
    for i, ch in enumerate(stripped):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
            if ch == "}" and depth == 1:
                last_end = i

    if last_end is None:
        return None
    return stripped[:last_end + 1] + "]"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _strip_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[-1] if "\n" in text else ""
    if text.endswith("```"):
        text = text.rsplit("```", 1)[0]
    return text.strip()


def _scan(text: str) -> tuple[list[str], bool, bool]:
    """Returns (open bracket stack, inside a string?, last char an escape?)."""
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "[{":
            stack.append(ch)
        elif ch in "]}" and stack:
            stack.pop()
    return stack, in_string, escaped


def _as_list(data: Any) -> list[Any]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return [data]
    raise json.JSONDecodeError("Expected a JSON array", str(data)[:50], 0)
