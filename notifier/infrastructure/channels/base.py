"""Base class for channel-specific notification senders."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from notifier.domain.entities import Channel, Notification

logger = logging.getLogger(__name__)


class ChannelSender(ABC):
    """Transmit notifications over a single external channel.

    Implementations raise :class:`~notifier.domain.errors.ChannelDeliveryError`
    for failures worth retrying. Senders may receive the same notification
    more than once.
    """

    channel: Channel

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Transmit ``notification`` to its recipient."""


class LoggingSender(ChannelSender):
    """Fallback sender that only records the notification in the logs."""

    def __init__(self, channel: Channel) -> None:
        self.channel = channel

    def send(self, notification: Notification) -> None:
        logger.info(
            "Sending notification %s via %s to %s: %s",
            notification.id,
            self.channel.value,
            notification.recipient,
            notification.message,
        )


__all__ = ["ChannelSender", "LoggingSender"]
