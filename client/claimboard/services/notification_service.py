"""Transient, auto-expiring user-facing notifications."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from claimboard.services.events import EventBus

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Notification severity."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single user-facing message."""

    text: str
    severity: Severity
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationService:
    """Holds at most one live notification and expires it after a fixed TTL.

    Each notify() cancels the previous expiry task, so an older timer can never
    clear a newer message.
    """

    def __init__(self, ttl_seconds: float = 3.0, events: Optional[EventBus] = None):
        self.ttl_seconds = ttl_seconds
        self._events = events
        self._current: Optional[Notification] = None
        self._expiry_task: Optional[asyncio.Task[None]] = None

    @property
    def current(self) -> Optional[Notification]:
        return self._current

    def notify(self, text: str, severity: Severity = Severity.SUCCESS) -> Notification:
        """Replace the current notification and restart the expiry timer.

        Must be called from within a running event loop.
        """
        self.cancel()
        notification = Notification(text=text, severity=Severity(severity))
        self._current = notification
        self._expiry_task = asyncio.create_task(self._expire(notification))

        log = logger.warning if notification.severity is Severity.ERROR else logger.info
        log(f"Notification ({notification.severity.value}): {text}")

        if self._events is not None:
            self._events.publish("notification", text=text, severity=notification.severity.value)
        return notification

    def cancel(self) -> None:
        """Cancel the pending expiry timer, leaving the message in place."""
        if self._expiry_task is not None and not self._expiry_task.done():
            self._expiry_task.cancel()
        self._expiry_task = None

    async def _expire(self, notification: Notification) -> None:
        try:
            await asyncio.sleep(self.ttl_seconds)
        except asyncio.CancelledError:
            return

        if self._current is notification:
            self._current = None
            self._expiry_task = None
            if self._events is not None:
                self._events.publish("notification_cleared")
