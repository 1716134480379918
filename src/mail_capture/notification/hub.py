"""Publish/subscribe delivery of ingestion outcomes."""

from __future__ import annotations

import logging
from threading import Lock
from types import TracebackType

from ..core.interfaces import Observer
from ..core.models import IngestionOutcome

LOGGER = logging.getLogger(__name__)


class Subscription:
    """Handle returned by :meth:`NotificationHub.subscribe`.

    Usable as a context manager; leaving the block unsubscribes the observer.
    """

    def __init__(self, hub: NotificationHub, observer: Observer) -> None:
        self._hub = hub
        self.observer = observer
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop delivering outcomes to the observer. Safe to call twice."""
        if not self._active:
            return
        self._active = False
        self._hub._remove(self)  # pylint: disable=protected-access

    def __enter__(self) -> Subscription:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.unsubscribe()


class NotificationHub:
    """Ordered set of observers receiving each published outcome.

    Delivery is synchronous on the publishing thread, in subscription order.
    An observer raising an exception is logged and skipped; the remaining
    observers still receive the outcome.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(self, observer: Observer) -> Subscription:
        """Register ``observer`` and return its subscription handle."""
        subscription = Subscription(self, observer)
        with self._lock:
            self._subscriptions.append(subscription)
        LOGGER.debug("Subscribed observer %r", observer)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                return
        LOGGER.debug("Unsubscribed observer %r", subscription.observer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, outcome: IngestionOutcome) -> int:
        """Deliver ``outcome`` to every observer; return the number that succeeded."""
        with self._lock:
            # Observers subscribing or unsubscribing mid-broadcast do not
            # affect the current delivery.
            targets = tuple(self._subscriptions)

        delivered = 0
        for subscription in targets:
            try:
                subscription.observer(outcome)
            except Exception:  # pylint: disable=broad-except
                LOGGER.error(
                    "Observer %r failed to handle %s outcome for %s",
                    subscription.observer,
                    outcome.kind,
                    outcome.record.recipient,
                    exc_info=True,
                )
                continue
            delivered += 1
        return delivered


__all__ = ["NotificationHub", "Subscription"]
