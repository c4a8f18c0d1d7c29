"""Fire-and-forget notifications emitted while editing a log."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    """A user-facing message; ``type`` is "success" or "error"."""

    type: str
    message: str
    kind: str | None = None  # failure kind for errors: load/validation/update/upload
    payload: dict[str, Any] = field(default_factory=dict)


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LoggingSink:
    """Default sink: writes notifications to the log."""

    def notify(self, notification: Notification) -> None:
        level = logging.ERROR if notification.type == "error" else logging.INFO
        logger.log(level, "%s: %s", notification.kind or notification.type, notification.message)


class CollectingSink:
    """Keeps every notification in memory, newest last."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def drain(self) -> list[Notification]:
        out, self.notifications = self.notifications, []
        return out
