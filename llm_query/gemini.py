"""
llm_query/gemini.py — Gemini API call returning structured JSON text.

Environment variables:
  GEMINI_API_KEY   API key (required)
  GEMINI_MODEL     model override (optional)

Optionally a .env file in the project root:
  GEMINI_API_KEY=AIza...

Public API:
  call_gemini(prompt, model, api_key, response_schema, max_retries) -> str   (coroutine)
"""

from __future__ import annotations

import asyncio
import functools
import logging
import os
import pathlib
import re

from dotenv import load_dotenv
from google import genai as _genai
from google.genai import errors as _genai_errors
from google.genai import types as _genai_types

from data_model.errors import BackendError

load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env", override=False)

logger = logging.getLogger(__name__)

DEFAULT_MODEL     = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
DEFAULT_RETRIES   = 3
MAX_OUTPUT_TOKENS = 8192
_ENV_KEY          = "GEMINI_API_KEY"


@functools.lru_cache(maxsize=4)
def _get_client(api_key: str) -> "_genai.Client":
    """Returns (and caches) the Gemini client for an API key.

    The client owns an HTTP connection pool; building one per call is
    expensive and exhausts connections.
    """
    return _genai.Client(api_key=api_key)

# Wait time suggested by the API message (e.g. "retry in 18.8s")
_RETRY_DELAY_RE = re.compile(r"retry[^\d]*(\d+(?:\.\d+)?)\s*s", re.IGNORECASE)


def _parse_retry_delay(error: Exception) -> float | None:
    """Suggested wait from a 429 error, when available."""
    msg = str(error)
    m = _RETRY_DELAY_RE.search(msg)
    if m:
        return float(m.group(1))
    # google-genai may expose retry_delay directly on the error object
    delay = getattr(error, "retry_delay", None)
    if delay is not None:
        return float(delay)
    return None


def _is_daily_quota(error: Exception) -> bool:
    """True when the daily quota is exhausted (waiting will not help)."""
    return "PerDay" in str(error)


def _build_config(response_schema: dict | None) -> "_genai_types.GenerateContentConfig":
    return _genai_types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=response_schema,
        max_output_tokens=MAX_OUTPUT_TOKENS,
        thinking_config=_genai_types.ThinkingConfig(thinking_budget=0),
    )


async def call_gemini(
    prompt: str,
    model: str = DEFAULT_MODEL,
    api_key: str | None = None,
    response_schema: dict | None = None,
    max_retries: int = DEFAULT_RETRIES,
) -> str:
    """
    Sends the prompt to Gemini in JSON mode and returns the raw response text.

    On 429 (rate limit) waits the suggested time and re-issues the request
    (up to max_retries times).  An exhausted daily quota is not waited on.

    Args:
        prompt:          Prompt text.
        model:           Model identifier (default gemini-2.5-flash).
        api_key:         API key; read from GEMINI_API_KEY when None.
        response_schema: Gemini responseSchema dict (see llm_query.schema).
        max_retries:     Max waits on rate limit (default 3).

    Returns:
        Response text (JSON, possibly truncated).

    Raises:
        BackendError: missing key, API failure, rate limit exhausted,
                      empty response.
    """
    key = api_key or os.getenv(_ENV_KEY)
    if not key:
        raise BackendError(
            f"Missing Gemini API key. "
            f"Set the {_ENV_KEY} environment variable or pass api_key."
        )

    client  = _get_client(key)
    config  = _build_config(response_schema)
    attempt = 0

    while True:
        try:
            response = await client.aio.models.generate_content(
                model=model, contents=prompt, config=config,
            )
            text = response.text
            if text is None:
                raise BackendError("Gemini returned an empty text response.", model_side=True)
            return text.strip()

        except _genai_errors.ServerError as exc:
            raise BackendError(f"Gemini server error: {exc}", model_side=True) from exc

        except _genai_errors.ClientError as exc:
            if exc.code != 429:
                raise BackendError(f"Gemini API error: {exc}") from exc

            if _is_daily_quota(exc):
                raise BackendError(
                    f"Daily request limit for model {model} exhausted. "
                    f"Check plan and billing: https://ai.dev/rate-limit\n"
                    f"API details: {exc}",
                    model_side=True,
                ) from exc

            attempt += 1
            if attempt > max_retries:
                raise BackendError(
                    f"Rate limit persisted after {max_retries} attempts. Try again later.",
                    model_side=True,
                ) from exc

            delay = _parse_retry_delay(exc) or (2 ** attempt * 5)
            logger.warning(
                "429 rate limit, waiting %.0fs (attempt %d/%d)", delay, attempt, max_retries,
            )
            await asyncio.sleep(delay)
