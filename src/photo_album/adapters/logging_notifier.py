"""Notifier that reports user-facing messages through logging."""

import logging
from dataclasses import dataclass, field

from photo_album.services.gallery import NotificationLevel, Notifier

_LOG_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


@dataclass
class LoggingNotifier(Notifier):
    """Writes notifications to the ``photo_album.notifications`` logger."""

    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("photo_album.notifications")
    )

    def notify(self, message: str, level: NotificationLevel) -> None:
        """Log the message at the matching severity."""
        self.logger.log(_LOG_LEVELS[level], "[%s] %s", level.value, message)
