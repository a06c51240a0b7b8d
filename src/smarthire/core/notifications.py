"""In-memory notification log and auto-expiring toasts."""

from __future__ import annotations

from typing import Callable

import pendulum
import structlog

from ..schemas import Notification, Toast
from ..schemas.notification import NotificationSeverity, ToastSeverity
from .ids import random_id

DEFAULT_TOAST_TTL_SECONDS = 4.0

Clock = Callable[[], pendulum.DateTime]


class NotificationCenter:
    """Session-wide notification log plus toast queue.

    Notifications are kept newest first and are only ever mutated by
    ``mark_all_read``. Toasts carry their own expiry instant; they are dropped
    either by ``remove_toast`` or by ``expire``, which every read of
    ``toasts`` runs first. Both paths tolerate the other having won.
    """

    def __init__(
        self,
        *,
        toast_ttl_seconds: float = DEFAULT_TOAST_TTL_SECONDS,
        clock: Clock | None = None,
    ) -> None:
        self._toast_ttl = toast_ttl_seconds
        self._clock: Clock = clock or pendulum.now
        self._notifications: list[Notification] = []
        self._toasts: list[Toast] = []
        self._logger = structlog.get_logger(__name__)

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._notifications if not item.read)

    def add_notification(
        self,
        title: str,
        message: str,
        severity: NotificationSeverity = "info",
    ) -> Notification:
        notification = Notification(
            id=random_id(),
            title=title,
            message=message,
            severity=severity,
            timestamp=self._clock().to_iso8601_string(),
        )
        self._notifications.insert(0, notification)
        self._logger.info("notification.added", title=title, severity=severity)
        return notification

    def mark_all_read(self) -> None:
        self._notifications = [
            item if item.read else item.model_copy(update={"read": True})
            for item in self._notifications
        ]

    @property
    def toasts(self) -> tuple[Toast, ...]:
        self.expire()
        return tuple(self._toasts)

    def add_toast(self, message: str, severity: ToastSeverity = "info") -> Toast:
        expires_at = self._clock().add(microseconds=int(self._toast_ttl * 1_000_000))
        toast = Toast(id=random_id(), message=message, severity=severity, expires_at=expires_at)
        self._toasts.append(toast)
        self._logger.debug("toast.added", toast_id=toast.id, severity=severity)
        return toast

    def remove_toast(self, toast_id: str) -> bool:
        before = len(self._toasts)
        self._toasts = [toast for toast in self._toasts if toast.id != toast_id]
        return len(self._toasts) != before

    def expire(self) -> list[Toast]:
        """Drop toasts whose expiry has passed and return them."""
        now = self._clock()
        expired = [toast for toast in self._toasts if toast.expires_at <= now]
        if expired:
            self._toasts = [toast for toast in self._toasts if toast.expires_at > now]
        return expired


__all__ = ["DEFAULT_TOAST_TTL_SECONDS", "NotificationCenter"]
