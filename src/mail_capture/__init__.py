"""Local mail capture: turn SMTP submissions into records for observers."""

from .core import Accepted, CaptureSettings, MailRecord, Rejected
from .ingestion import MailIngestor
from .mailbox import CapturedMailbox
from .notification import NotificationHub, Subscription

__all__ = [
    "Accepted",
    "CaptureSettings",
    "CapturedMailbox",
    "MailIngestor",
    "MailRecord",
    "NotificationHub",
    "Rejected",
    "Subscription",
]
