"""Ingestion orchestration for messages handed over by the SMTP engine."""

from __future__ import annotations

import _thread
import codecs
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from threading import RLock

from ..core.config import CaptureSettings
from ..core.interfaces import ConfigurationError
from ..core.models import Accepted, MailRecord, Rejected
from ..notification import NotificationHub
from .decoder import RawMessage, StreamDecoder
from .relay import RelayFilter
from .subject import SubjectExtractor

LOGGER = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class MailIngestor:
    """Turn raw submissions into records and publish their outcome."""

    def __init__(
        self,
        settings: CaptureSettings | None,
        hub: NotificationHub | None = None,
        *,
        decoder: StreamDecoder | None = None,
        subject_extractor: SubjectExtractor | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Validate ``settings`` and wire the pipeline components.

        Raises :class:`ConfigurationError` when no usable storage charset is
        configured.
        """
        if settings is None:
            raise ConfigurationError("Capture settings are required")
        charset = settings.storage_charset
        if not charset:
            raise ConfigurationError("A storage charset must be configured")
        try:
            codecs.lookup(charset)
        except LookupError as exc:
            raise ConfigurationError(f"Unknown storage charset '{charset}'") from exc

        self._charset = charset
        self._relay_filter = RelayFilter(settings.relay_domains)
        self._hub = hub if hub is not None else NotificationHub()
        self._decoder = decoder or StreamDecoder()
        self._subject_extractor = subject_extractor or SubjectExtractor()
        self._clock = clock
        self._lock = RLock()

    @property
    def hub(self) -> NotificationHub:
        return self._hub

    @property
    def lock(self) -> _thread.RLock:
        """Lock held while an accepted outcome is being published.

        Consumers holding it (for instance while clearing a displayed mail
        list) never observe a concurrent accepted delivery.
        """
        return self._lock

    @property
    def relay_filter(self) -> RelayFilter:
        return self._relay_filter

    def build_record(self, sender: str, recipient: str, raw: RawMessage) -> MailRecord:
        """Decode ``raw`` and assemble the record without publishing it."""
        body = self._decoder.decode(raw, self._charset)
        subject = self._subject_extractor.extract(body)
        return MailRecord(
            sender=sender,
            recipient=recipient,
            subject=subject,
            body=body,
            received_at=self._clock(),
        )

    def ingest(self, sender: str, recipient: str, raw: RawMessage) -> None:
        """Capture one message and notify observers of the outcome."""
        # Decoding touches no shared state and stays outside the lock.
        record = self.build_record(sender, recipient, raw)

        if not self._relay_filter.matches(recipient):
            LOGGER.info(
                "Rejected mail from %s to %s (subject %r)",
                sender,
                recipient,
                record.subject,
            )
            # Not serialized against accepted publishes.
            self._hub.publish(Rejected(record))
            return

        with self._lock:
            LOGGER.info(
                "Accepted mail from %s to %s (subject %r)",
                sender,
                recipient,
                record.subject,
            )
            self._hub.publish(Accepted(record))


__all__ = ["MailIngestor"]
