"""Notifications package for user-facing toast messages."""

from biocatalog.notifications.enums import Severity
from biocatalog.notifications.notifier import (
    Notification,
    Notifier,
    RecordingNotifier,
    SessionNotifier,
    consume_notifications,
)

__all__ = [
    "Notification",
    "Notifier",
    "RecordingNotifier",
    "SessionNotifier",
    "Severity",
    "consume_notifications",
]
