"""
Process-wide notification broadcaster (toast messages).

Any component may publish a transient message with a severity. Exactly one
notification is visible at a time; a new one replaces the current one and
restarts its timer. Visible notifications dismiss themselves after
`timeout_ms` or earlier through `hide()`.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from hrms_portal.core.config import settings

logger = logging.getLogger("hrms_portal.notifications")


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class Notification:
    message: str
    severity: Severity = Severity.INFO
    shown_at: float = field(default_factory=time.monotonic)


NotificationListener = Callable[[Optional[Notification]], None]


class NotificationCenter:
    """Single-slot publish/subscribe channel."""

    def __init__(self, timeout_ms: Optional[int] = None):
        self.timeout_ms = timeout_ms if timeout_ms is not None else settings.NOTIFICATION_TIMEOUT_MS
        self._current: Optional[Notification] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._listeners: List[NotificationListener] = []

    @property
    def current(self) -> Optional[Notification]:
        """The visible notification, or None once dismissed or expired."""
        if self._current and self._expired(self._current):
            self.hide()
        return self._current

    def _expired(self, notification: Notification) -> bool:
        return (time.monotonic() - notification.shown_at) * 1000 >= self.timeout_ms

    def show(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        self._cancel_timer()
        notification = Notification(message=message, severity=Severity(severity))
        self._current = notification

        log_level = logging.WARNING if notification.severity == Severity.ERROR else logging.DEBUG
        logger.log(log_level, f"[{notification.severity.value}] {message}")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timer = loop.call_later(self.timeout_ms / 1000, self._auto_dismiss, notification)

        self._publish(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.show(message, Severity.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.show(message, Severity.ERROR)

    def warning(self, message: str) -> Notification:
        return self.show(message, Severity.WARNING)

    def info(self, message: str) -> Notification:
        return self.show(message, Severity.INFO)

    def hide(self) -> None:
        """Dismiss the visible notification early."""
        self._cancel_timer()
        if self._current is None:
            return
        self._current = None
        self._publish(None)

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _auto_dismiss(self, notification: Notification) -> None:
        # A newer notification owns the slot now
        if self._current is notification:
            self._timer = None
            self.hide()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _publish(self, notification: Optional[Notification]) -> None:
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {e}", exc_info=True)


notifications = NotificationCenter()
