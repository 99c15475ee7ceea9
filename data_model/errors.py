"""
data_model/errors.py — exception hierarchy of the SUMINFO pipeline.

All exceptions derive from SuminfoError.  Only InputRejectedError and
CriticalProcessingError end a run; ExtractionError subclasses are contained
per sub-batch by the pipeline.
"""

from __future__ import annotations


class SuminfoError(Exception):
    """Base class for all pipeline errors."""


class InputRejectedError(SuminfoError):
    """Input of the wrong kind (not a PDF, missing file, text too short)."""


class CriticalProcessingError(SuminfoError):
    """Fatal failure of a run."""


class DecodingError(CriticalProcessingError):
    """The PDF could not be turned into page text."""


class PipelineBusyError(SuminfoError):
    """A run is already in flight on this pipeline."""


class ExtractionError(SuminfoError):
    """A sub-batch could not be turned into occurrence records."""


class BackendError(ExtractionError):
    """
    Transport, timeout or API failure of the extraction backend.

    model_side=True marks failures on the model's end (server errors,
    exhausted quota), which are surfaced to the user as an advisory.
    """

    def __init__(self, message: str, *, model_side: bool = False) -> None:
        super().__init__(message)
        self.model_side = model_side


class MalformedResponseError(ExtractionError):
    """The backend answered, but its JSON could not be recovered."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "The AI response was malformed or incomplete. "
               "Try processing fewer pages per batch."
        )
