"""In-memory mailbox accumulating captured messages."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from threading import Condition, RLock

from .core.models import Accepted, IngestionOutcome, MailRecord, Rejected
from .notification import NotificationHub, Subscription

LOGGER = logging.getLogger(__name__)


class CapturedMailbox:
    """Observer keeping every accepted and rejected record in memory.

    Pass :attr:`MailIngestor.lock` as ``lock`` so that :meth:`clear` never
    runs while an accepted message is being delivered.
    """

    def __init__(self, lock: AbstractContextManager[object] | None = None) -> None:
        self._lock = lock if lock is not None else RLock()
        self._changed = Condition(RLock())
        self._accepted: list[MailRecord] = []
        self._rejected: list[MailRecord] = []

    def attach(self, hub: NotificationHub) -> Subscription:
        """Subscribe this mailbox to ``hub``."""
        return hub.subscribe(self)

    def __call__(self, outcome: IngestionOutcome) -> None:
        with self._changed:
            if isinstance(outcome, Accepted):
                self._accepted.append(outcome.record)
            elif isinstance(outcome, Rejected):
                self._rejected.append(outcome.record)
            else:
                raise TypeError(f"Unsupported outcome {outcome!r}")
            self._changed.notify_all()

    @property
    def accepted(self) -> tuple[MailRecord, ...]:
        with self._changed:
            return tuple(self._accepted)

    @property
    def rejected(self) -> tuple[MailRecord, ...]:
        with self._changed:
            return tuple(self._rejected)

    def __len__(self) -> int:
        with self._changed:
            return len(self._accepted)

    def clear(self) -> None:
        """Drop every captured record."""
        with self._lock, self._changed:
            dropped = len(self._accepted) + len(self._rejected)
            self._accepted.clear()
            self._rejected.clear()
        LOGGER.info("Cleared %d captured message(s)", dropped)

    def find(
        self, *, recipient: str | None = None, subject: str | None = None
    ) -> list[MailRecord]:
        """Return accepted records matching every given criterion."""
        return [
            record
            for record in self.accepted
            if (recipient is None or record.recipient == recipient)
            and (subject is None or record.subject == subject)
        ]

    def wait_for(self, count: int, timeout: float | None = None) -> bool:
        """Block until ``count`` accepted records exist or ``timeout`` elapses."""
        with self._changed:
            return self._changed.wait_for(
                lambda: len(self._accepted) >= count, timeout=timeout
            )


__all__ = ["CapturedMailbox"]
