"""
Single-slot toast channel.

Only one notification is visible at a time; showing a new one replaces the
current one immediately. Expiry is evaluated lazily against an injectable
clock, starting when the notification is created, so tests can advance time
deterministically and rerun-based UIs simply read `current` on each render.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DISMISS_AFTER_SECONDS = 2.2


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    message: str
    created_at: float
    expires_at: float

    @property
    def is_error(self) -> bool:
        return self.kind is NotificationKind.ERROR


class NotificationChannel:
    def __init__(
        self,
        *,
        dismiss_after: float = DEFAULT_DISMISS_AFTER_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if dismiss_after <= 0:
            raise ValueError("dismiss_after must be positive")
        self._dismiss_after = dismiss_after
        self._clock = clock
        self._active: Optional[Notification] = None

    @property
    def current(self) -> Optional[Notification]:
        """The visible notification, or None once it has expired or been dismissed."""
        active = self._active
        if active is not None and self._clock() >= active.expires_at:
            self._active = None
            return None
        return active

    def show(self, kind: NotificationKind | str, message: str) -> Notification:
        now = self._clock()
        notification = Notification(
            kind=NotificationKind(kind),
            message=message,
            created_at=now,
            expires_at=now + self._dismiss_after,
        )
        replaced = self._active
        self._active = notification
        logger.info(
            {
                "event": "notification_shown",
                "kind": notification.kind.value,
                "message": message,
                "replaced": replaced is not None,
            }
        )
        return notification

    def success(self, message: str) -> Notification:
        return self.show(NotificationKind.SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.show(NotificationKind.ERROR, message)

    def dismiss(self) -> None:
        self._active = None
