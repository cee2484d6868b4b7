"""Use case for scheduling a new notification."""

from datetime import datetime

from sqlalchemy.orm import Session

from notifier.domain.entities import Channel, Notification
from notifier.infrastructure.repositories import NotificationRepository
from notifier.utils import ensure_utc


def create_notification(
    session: Session,
    *,
    message: str,
    channel: Channel,
    recipient: str,
    send_at: datetime,
) -> Notification:
    """Persist a notification that will be dispatched once ``send_at`` passes."""

    notification = Notification(
        id=None,
        message=message,
        channel=Channel(channel),
        recipient=recipient,
        send_at=ensure_utc(send_at),
        sent=False,
    )
    return NotificationRepository(session).create(notification)
