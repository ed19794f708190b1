"""One-shot notifications for transaction outcomes.

Notifications are delivered to registered listeners once and stay in the
active list until their auto-hide duration elapses or they are dismissed.
"""

import itertools
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Variant(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A message shown to the user for a bounded time."""

    id: int
    message: str
    variant: Variant
    created_at: float
    auto_hide_seconds: float

    def expired(self, now: float) -> bool:
        return now >= self.created_at + self.auto_hide_seconds


Listener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and fans them out to listeners."""

    def __init__(
        self,
        default_ttl: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize notifier.

        Args:
            default_ttl: Seconds before a notification is auto-dismissed
            clock: Monotonic time source
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._ids = itertools.count(1)
        self._active: list[Notification] = []
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        """Register a listener called for every new notification."""
        self._listeners.append(listener)

    def notify(
        self,
        message: str,
        variant: Variant = Variant.INFO,
        auto_hide_seconds: Optional[float] = None,
    ) -> Notification:
        """Publish a notification.

        Listener failures are logged and do not stop delivery to other
        listeners.
        """
        notification = Notification(
            id=next(self._ids),
            message=message,
            variant=variant,
            created_at=self._clock(),
            auto_hide_seconds=auto_hide_seconds or self.default_ttl,
        )
        self._active.append(notification)

        log = logger.error if variant is Variant.ERROR else logger.info
        log(f"[{variant.value}] {message}")

        for listener in self._listeners:
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {e}")

        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, Variant.SUCCESS)

    def error(self, message: str, auto_hide_seconds: Optional[float] = None) -> Notification:
        return self.notify(message, Variant.ERROR, auto_hide_seconds)

    def active(self) -> list[Notification]:
        """Notifications that have not yet expired or been dismissed."""
        now = self._clock()
        self._active = [n for n in self._active if not n.expired(now)]
        return list(self._active)

    def dismiss(self, notification_id: int) -> bool:
        """Dismiss a notification early. Returns True if it was active."""
        before = len(self._active)
        self._active = [n for n in self._active if n.id != notification_id]
        return len(self._active) < before
