"""Protocol interfaces and errors for decoupling components."""

from __future__ import annotations

from typing import BinaryIO, Protocol, TextIO

from .models import IngestionOutcome


class MailCaptureError(RuntimeError):
    """Base class for errors raised by the capture pipeline."""


class ConfigurationError(MailCaptureError, ValueError):
    """Raised when a component is built from unusable configuration."""


class Observer(Protocol):
    """Receives ingestion outcomes broadcast by a notification hub."""

    def __call__(self, outcome: IngestionOutcome) -> None:
        """Handle a single outcome."""
        raise NotImplementedError


class MailSaver(Protocol):
    """Entry point used by an SMTP engine to hand over received messages."""

    def ingest(self, sender: str, recipient: str, raw: BinaryIO | TextIO) -> None:
        """Convert a raw submission and publish its outcome."""
        raise NotImplementedError


__all__ = [
    "ConfigurationError",
    "MailCaptureError",
    "MailSaver",
    "Observer",
]
