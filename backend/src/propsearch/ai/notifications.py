"""User-facing notifications emitted by the query interpreter.

The interpreter only reports validation and failure cases; rendering them
(toasts, banners, CLI output) belongs to whoever injects the notifier.
"""

from dataclasses import dataclass
from typing import Protocol

from propsearch.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Notification:
    """One message shown to the end user."""

    message: str
    description: str | None = None
    duration_ms: int | None = None
    level: str = "error"


class Notifier(Protocol):
    """Anything that can surface a notification to the user."""

    def notify(self, notification: Notification) -> None: ...


class LogNotifier:
    """Default notifier: writes notifications to the structured log."""

    def notify(self, notification: Notification) -> None:
        logger.warning(
            "user_notification",
            severity=notification.level,
            message=notification.message,
            description=notification.description,
        )


class CollectingNotifier:
    """Keeps notifications in memory, for CLIs and tests."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def clear(self) -> None:
        self.notifications.clear()
