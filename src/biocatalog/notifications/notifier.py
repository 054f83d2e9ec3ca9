"""User-facing notifications (toasts).

Notifications are fire-and-forget: callers never wait for acknowledgment.
Web requests queue them in the session so the next rendered page can show
them; the JSON API and tests collect them into a list instead.
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Protocol

from pydantic import BaseModel

from biocatalog.notifications.enums import Severity

logger = logging.getLogger(__name__)

SESSION_KEY = "notifications"


class Notification(BaseModel):
    """A single toast message."""

    title: str
    description: str | None = None
    severity: Severity = Severity.DEFAULT


class Notifier(Protocol):
    """Anything that can show a notification to the current user."""

    def notify(
        self, title: str, description: str | None = None, severity: Severity = Severity.DEFAULT
    ) -> None:
        """Show a notification."""
        ...


def _log(notification: Notification) -> None:
    log = logger.warning if notification.severity is Severity.DESTRUCTIVE else logger.info
    log(
        "Notification: %s",
        notification.title,
        extra={"description": notification.description, "severity": notification.severity.value},
    )


class RecordingNotifier:
    """Collects notifications in memory."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(
        self, title: str, description: str | None = None, severity: Severity = Severity.DEFAULT
    ) -> None:
        """Append a notification to the list."""
        notification = Notification(title=title, description=description, severity=severity)
        _log(notification)
        self.notifications.append(notification)


class SessionNotifier:
    """Queues notifications in a browser session for the next page render."""

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self.session = session

    def notify(
        self, title: str, description: str | None = None, severity: Severity = Severity.DEFAULT
    ) -> None:
        """Store a notification in the session flash queue."""
        notification = Notification(title=title, description=description, severity=severity)
        _log(notification)
        queued = list(self.session.get(SESSION_KEY, []))
        queued.append(notification.model_dump(mode="json"))
        self.session[SESSION_KEY] = queued


def consume_notifications(session: MutableMapping[str, Any]) -> list[Notification]:
    """Return queued notifications and clear the queue."""
    queued = session.pop(SESSION_KEY, None) or []
    return [Notification.model_validate(item) for item in queued]
