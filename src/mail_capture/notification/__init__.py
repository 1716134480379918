"""Outcome notification components."""

from .hub import NotificationHub, Subscription

__all__ = ["NotificationHub", "Subscription"]
