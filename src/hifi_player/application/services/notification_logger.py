"""Subscriber that writes every player notification to the log."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.music.notifications import (
    AudioQualityNotification,
    BufferingNotification,
    CurrentTrackListNotification,
    ErrorNotification,
    LoadingNotification,
    Notification,
    PositionNotification,
    QuitNotification,
    StatusNotification,
)
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from .notification_hub import NotificationHub, Subscription

logger = logging.getLogger(__name__)


class NotificationLogger:
    def __init__(self, *, hub: NotificationHub, position_level: int = logging.DEBUG) -> None:
        self._hub = hub
        self._position_level = position_level
        self._subscription: Subscription | None = None

    @property
    def is_attached(self) -> bool:
        return self._subscription is not None and not self._subscription.is_closed

    def start(self) -> None:
        if self.is_attached:
            return
        self._subscription = self._hub.attach(self.handle)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    async def handle(self, notification: Notification) -> None:
        match notification:
            case LoadingNotification(is_loading=True):
                logger.info(LogTemplates.NOTIFY_LOADING, notification.target_state.value)
            case LoadingNotification():
                logger.info(LogTemplates.NOTIFY_LOADING_FINISHED, notification.target_state.value)
            case StatusNotification():
                logger.info(LogTemplates.NOTIFY_STATUS, notification.state.value)
            case PositionNotification():
                logger.log(self._position_level, LogTemplates.NOTIFY_POSITION, notification.elapsed)
            case CurrentTrackListNotification():
                current = notification.list.current_track()
                logger.info(
                    LogTemplates.NOTIFY_TRACKLIST,
                    notification.list.list_type.value,
                    notification.list.total(),
                    current.display_title if current else "none",
                )
            case BufferingNotification():
                logger.debug(LogTemplates.NOTIFY_BUFFERING, notification.percent)
            case AudioQualityNotification():
                logger.info(
                    LogTemplates.NOTIFY_AUDIO_QUALITY,
                    notification.bit_depth,
                    notification.sample_rate,
                )
            case ErrorNotification():
                logger.error(LogTemplates.NOTIFY_ERROR, notification.message)
            case QuitNotification():
                logger.info(LogTemplates.NOTIFY_QUIT)
