"""Core utilities for configuration, logging, and domain models."""

from .config import AppSettings, CaptureSettings, LoggingSettings, load_app_settings
from .interfaces import ConfigurationError, MailCaptureError, MailSaver, Observer
from .logging import configure_logging
from .models import Accepted, IngestionOutcome, MailRecord, Rejected

__all__ = [
    "Accepted",
    "AppSettings",
    "CaptureSettings",
    "ConfigurationError",
    "IngestionOutcome",
    "LoggingSettings",
    "MailCaptureError",
    "MailRecord",
    "MailSaver",
    "Observer",
    "Rejected",
    "configure_logging",
    "load_app_settings",
]
