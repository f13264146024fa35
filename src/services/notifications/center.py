"""Transient user notifications with TTL eviction."""

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from src.config.constants import NotificationType

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A dismissible message shown to the user."""

    type: NotificationType
    message: str
    duration: float
    created_at: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:7])

    def expired(self, now: float) -> bool:
        return now - self.created_at >= self.duration


class NotificationCenter:
    """Holds the active notifications of one UI session."""

    def __init__(
        self,
        default_duration: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_duration = default_duration
        self._clock = clock
        self._items: dict[str, Notification] = {}

    def notify(
        self,
        type: NotificationType,
        message: str,
        duration: float | None = None,
    ) -> Notification:
        notification = Notification(
            type=NotificationType(type),
            message=message,
            duration=duration if duration is not None else self._default_duration,
            created_at=self._clock(),
        )
        self._items[notification.id] = notification
        log = logger.warning if notification.type in (NotificationType.ERROR, NotificationType.WARNING) else logger.info
        log("Notification [%s]: %s", notification.type.value, message)
        return notification

    def dismiss(self, notification_id: str) -> bool:
        return self._items.pop(notification_id, None) is not None

    def active(self, now: float | None = None) -> list[Notification]:
        """Drop expired notifications and return the rest, oldest first."""
        now = self._clock() if now is None else now
        for key in [k for k, n in self._items.items() if n.expired(now)]:
            del self._items[key]
        return sorted(self._items.values(), key=lambda n: n.created_at)

    def clear(self) -> None:
        self._items.clear()
