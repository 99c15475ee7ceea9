"""
extraction — interchangeable strategies turning sub-batch text into records.

Every strategy implements Extractor:
  await extractor.extract(text) -> list[PoliceOccurrence]

An empty list means "nothing extractable"; failures raise ExtractionError
(BackendError or MalformedResponseError).

Strategies:
  PatternExtractor   regex-based, offline, deterministic
  GeminiExtractor    Gemini API with JSON recovery
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from data_model.occurrences import PoliceOccurrence

from .pattern import PatternExtractor, extract_occurrences


@runtime_checkable
class Extractor(Protocol):
    name: str

    async def extract(self, text: str) -> list[PoliceOccurrence]:
        ...


def create_extractor(offline: bool = False, model: str | None = None) -> Extractor:
    """PatternExtractor when offline, GeminiExtractor otherwise."""
    if offline:
        return PatternExtractor()
    from .llm import GeminiExtractor

    return GeminiExtractor(model=model) if model else GeminiExtractor()


__all__ = [
    "Extractor",
    "PatternExtractor",
    "extract_occurrences",
    "create_extractor",
]
