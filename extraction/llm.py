"""
extraction/llm.py — occurrence extraction delegated to Gemini.

Flow per sub-batch:
  text → build_prompt() → call_gemini(..., response_schema) → raw JSON text
  → parse_json_array() (strict / repair / salvage) → schema check per record
  → list[PoliceOccurrence]

Errors:
  BackendError            transport, API or quota failure
  MalformedResponseError  JSON could not be recovered
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeAlias

from data_model.errors import BackendError, ExtractionError
from data_model.occurrences import PoliceOccurrence
from llm_query.gemini import DEFAULT_MODEL, call_gemini
from llm_query.json_recovery import parse_json_array
from llm_query.prompt import PROMPT_TEMPLATE, build_prompt
from llm_query.schema import gemini_response_schema, occurrences_from_payload

logger = logging.getLogger(__name__)

# prompt -> raw response text
ModelCall: TypeAlias = Callable[[str], Awaitable[str]]


class GeminiExtractor:
    """
    Extractor backed by the Gemini API.

    Usage:
        extractor = GeminiExtractor(model="gemini-2.5-flash")
        records   = await extractor.extract(sub_batch_text)

    `call` replaces the API round-trip (tests, other backends); it receives
    the full prompt and returns the model's raw text.
    """

    name = "gemini"

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        call: ModelCall | None = None,
        template: str = PROMPT_TEMPLATE,
    ) -> None:
        self.model     = model
        self._api_key  = api_key
        self._call     = call or self._call_gemini
        self._template = template
        self._schema   = gemini_response_schema()

    async def _call_gemini(self, prompt: str) -> str:
        return await call_gemini(
            prompt,
            model=self.model,
            api_key=self._api_key,
            response_schema=self._schema,
        )

    async def extract(self, text: str) -> list[PoliceOccurrence]:
        prompt = build_prompt(text, self._template)
        try:
            raw = await self._call(prompt)
        except ExtractionError:
            raise
        except Exception as e:
            raise BackendError(f"Gemini extraction failed: {e}") from e

        items = parse_json_array(raw)
        records = occurrences_from_payload(items)
        logger.debug("Gemini returned %d item(s), %d valid record(s)", len(items), len(records))
        return records
