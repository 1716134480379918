"""Recipient filtering against configured relay domains."""

from __future__ import annotations

import logging
from collections.abc import Sequence

LOGGER = logging.getLogger(__name__)


class RelayFilter:
    """Decide whether a recipient is accepted by a relay-domain allow-list.

    Matching is a plain suffix test on the whole address, so ``example.com``
    also accepts ``user@fakeexample.com``.
    """

    def __init__(self, allowed_domains: Sequence[str] | None = None) -> None:
        self._allowed_domains = tuple(allowed_domains or ())

    @property
    def allowed_domains(self) -> tuple[str, ...]:
        return self._allowed_domains

    @property
    def enabled(self) -> bool:
        """Whether any relay domain is configured."""
        return bool(self._allowed_domains)

    def matches(self, recipient: str) -> bool:
        """Check ``recipient`` against the configured domains."""
        return self.accepts(recipient, self._allowed_domains)

    @staticmethod
    def accepts(recipient: str, allowed_domains: Sequence[str] | None) -> bool:
        """Return ``True`` when ``recipient`` ends with one of ``allowed_domains``.

        An unset or empty allow-list disables filtering and accepts everything.
        """
        if not allowed_domains:
            LOGGER.debug("No relay domain has been defined, no filtering")
            return True

        for domain in allowed_domains:
            if recipient.endswith(domain):
                LOGGER.debug("Recipient %s matches relay domain %s", recipient, domain)
                return True

        LOGGER.debug(
            "Recipient %s doesn't match relay domains %s",
            recipient,
            list(allowed_domains),
        )
        return False


accepts = RelayFilter.accepts


__all__ = ["RelayFilter", "accepts"]
