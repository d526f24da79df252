"""User-visible notifications raised by service operations."""

import itertools

import arrow
from loguru import logger
from pydantic import BaseModel, ConfigDict

from surgery_agenda.models.enums import NotificationType


class Notification(BaseModel):
    """A message shown to the user until it expires or is dismissed."""

    model_config = ConfigDict(frozen=True)

    id: int
    message: str
    type: NotificationType
    created_at: float  # epoch seconds
    expires_at: float


class NotificationCenter:
    """Ordered stack of notifications with a fixed time to live."""

    def __init__(self, ttl_seconds: float = 5.0) -> None:
        self.ttl_seconds = ttl_seconds
        self._notifications: list[Notification] = []
        self._ids = itertools.count(1)

    def notify(self, message: str, type_: NotificationType) -> Notification:
        now = arrow.utcnow().float_timestamp
        notification = Notification(
            id=next(self._ids),
            message=message,
            type=type_,
            created_at=now,
            expires_at=now + self.ttl_seconds,
        )
        self._notifications.append(notification)
        logger.debug(f"Notification [{type_}]: {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationType.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationType.ERROR)

    def dismiss(self, notification_id: int) -> bool:
        before = len(self._notifications)
        self._notifications = [n for n in self._notifications if n.id != notification_id]
        return len(self._notifications) < before

    def active(self, now: float | None = None) -> list[Notification]:
        """Notifications not yet expired at ``now`` (epoch seconds); expired ones are dropped."""
        if now is None:
            now = arrow.utcnow().float_timestamp
        self._notifications = [n for n in self._notifications if n.expires_at > now]
        return list(self._notifications)

    def latest(self) -> Notification | None:
        return self._notifications[-1] if self._notifications else None
