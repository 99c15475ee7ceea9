"""
data_model — data structures of the SUMINFO occurrence extractor.

Usage:
  from data_model import PoliceOccurrence, RenderStyleConfig, ...

Modules:
  occurrences — DecodedPage, InvolvedPerson, PoliceOccurrence,
                Chunk, SubBatch, ResultSet, JSON helpers, sentinels
  style       — RenderStyleConfig, ReportSubType, hex_to_rgb
  errors      — SuminfoError and its subclasses

Wire format (JSON shared with the extraction backend):
  id          → str   "number - datetime - unit/reference"
  date        → str   DD/MM/YYYY
  fact        → str
  isCrime     → bool
  narrative   → str
  involved    → list[{name, cpf, birthDate, motherName, condition}]
"""

from .occurrences import (
    NOT_INFORMED,
    FACT_NOT_IDENTIFIED,
    NARRATIVE_NOT_FOUND,
    CONDITION_IDENTIFIED,
    DecodedPage,
    InvolvedPerson,
    PoliceOccurrence,
    Chunk,
    SubBatch,
    ResultSet,
    dump_occurrences,
    load_occurrences,
)
from .style import (
    ReportSubType,
    RenderStyleConfig,
    hex_to_rgb,
)
from .errors import (
    SuminfoError,
    InputRejectedError,
    CriticalProcessingError,
    DecodingError,
    PipelineBusyError,
    ExtractionError,
    BackendError,
    MalformedResponseError,
)

__all__ = [
    # occurrences
    "NOT_INFORMED",
    "FACT_NOT_IDENTIFIED",
    "NARRATIVE_NOT_FOUND",
    "CONDITION_IDENTIFIED",
    "DecodedPage",
    "InvolvedPerson",
    "PoliceOccurrence",
    "Chunk",
    "SubBatch",
    "ResultSet",
    "dump_occurrences",
    "load_occurrences",
    # style
    "ReportSubType",
    "RenderStyleConfig",
    "hex_to_rgb",
    # errors
    "SuminfoError",
    "InputRejectedError",
    "CriticalProcessingError",
    "DecodingError",
    "PipelineBusyError",
    "ExtractionError",
    "BackendError",
    "MalformedResponseError",
]
