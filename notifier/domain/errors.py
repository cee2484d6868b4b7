"""Error kinds raised by the notification store, dispatcher and senders."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for every notification related failure."""


class NotFoundError(NotificationError):
    """The referenced notification does not exist."""

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification {notification_id} not found")
        self.notification_id = notification_id


class NotFoundOrAlreadySentError(NotificationError):
    """The notification does not exist or has already been sent.

    A conditional update that matched no rows cannot tell the two cases apart,
    so callers receive a single error kind for both.
    """

    def __init__(self, notification_id: str) -> None:
        super().__init__(f"Notification {notification_id} not found or already sent")
        self.notification_id = notification_id


class StorageError(NotificationError):
    """The persistence layer failed (connectivity, constraint violation)."""


class PublishError(NotificationError):
    """The delivery queue rejected a notification after it was marked sent."""

    def __init__(self, notification_id: str | None, reason: str) -> None:
        super().__init__(f"Failed to publish notification {notification_id}: {reason}")
        self.notification_id = notification_id


class ChannelDeliveryError(NotificationError):
    """A channel sender could not transmit a notification; the send may be retried."""


__all__ = [
    "NotificationError",
    "NotFoundError",
    "NotFoundOrAlreadySentError",
    "StorageError",
    "PublishError",
    "ChannelDeliveryError",
]
