"""Ingestion pipeline components."""

from .decoder import PREAMBLE_LINES, RawMessage, StreamDecoder
from .ingestor import MailIngestor
from .relay import RelayFilter, accepts
from .subject import SUBJECT_PATTERN, SubjectExtractor

__all__ = [
    "MailIngestor",
    "PREAMBLE_LINES",
    "RawMessage",
    "RelayFilter",
    "SUBJECT_PATTERN",
    "StreamDecoder",
    "SubjectExtractor",
    "accepts",
]
