"""User-facing notifications.

The learn workflow reports its lifecycle (started, captured, timed out,
cancelled) through a ``Notifier``. Hosts plug in their own toast/status-bar
implementation; the defaults here log or discard.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from rigbind.core.controls.enums import NotificationLevel

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


class Notification(BaseModel):
    """A message for the operator."""

    model_config = ConfigDict(frozen=True)

    level: NotificationLevel = Field(default=NotificationLevel.INFO)
    message: str


class LoggingNotifier:
    """Notifier that writes notifications to the log."""

    def __init__(self, name: str = "rigbind.notifications") -> None:
        self._logger = logging.getLogger(name)

    def notify(self, notification: Notification) -> None:
        self._logger.log(
            _LOG_LEVELS[notification.level],
            "[%s] %s",
            notification.level.value,
            notification.message,
        )


class NullNotifier:
    """Notifier that discards everything."""

    def notify(self, notification: Notification) -> None:
        return None

