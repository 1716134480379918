"""Core domain models used across the application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Union


@dataclass(frozen=True, slots=True)
class MailRecord:
    """A captured message with its envelope and derived fields."""

    sender: str
    recipient: str
    subject: str
    body: str
    received_at: datetime


@dataclass(frozen=True, slots=True)
class Accepted:
    """Outcome published when the recipient passed relay filtering."""

    kind: ClassVar[str] = "accepted"

    record: MailRecord


@dataclass(frozen=True, slots=True)
class Rejected:
    """Outcome published when the recipient matched no relay domain."""

    kind: ClassVar[str] = "rejected"

    record: MailRecord


IngestionOutcome = Union[Accepted, Rejected]


__all__ = [
    "Accepted",
    "IngestionOutcome",
    "MailRecord",
    "Rejected",
]
