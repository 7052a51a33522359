"""Transient user notifications raised by the screen controllers."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, List, Optional

from config.settings import get_settings

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A short message shown to the user for ``duration_ms``."""

    message: str
    level: NotificationLevel
    duration_ms: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


NotificationListener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and forwards them to the rendering layer."""

    def __init__(self, max_history: int = 50) -> None:
        self._history: Deque[Notification] = deque(maxlen=max_history)
        self._listeners: List[NotificationListener] = []

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(
        self,
        message: str,
        level: NotificationLevel,
        duration_ms: Optional[int] = None,
    ) -> Notification:
        settings = get_settings()
        if duration_ms is None:
            duration_ms = (
                settings.error_duration_ms
                if level == NotificationLevel.ERROR
                else settings.success_duration_ms
            )
        notification = Notification(message=message, level=level, duration_ms=duration_ms)
        self._history.append(notification)

        log = logger.error if level == NotificationLevel.ERROR else logger.info
        log("[%s] %s", level.value, message)

        for listener in list(self._listeners):
            listener(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationLevel.SUCCESS)

    def warning(self, message: str) -> Notification:
        return self.notify(message, NotificationLevel.WARNING)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationLevel.ERROR)
