"""Use case for editing a notification that is still pending."""

from datetime import datetime

from sqlalchemy.orm import Session

from notifier.domain.entities import Channel, Notification
from notifier.infrastructure.repositories import NotificationRepository


def update_notification(
    session: Session,
    notification_id: str,
    *,
    message: str,
    channel: Channel,
    recipient: str,
    send_at: datetime,
) -> Notification:
    """Replace the editable fields of a pending notification.

    Raises ``NotFoundOrAlreadySentError`` when the notification is missing or
    has already been sent.
    """

    return NotificationRepository(session).update(
        notification_id,
        message=message,
        channel=channel,
        recipient=recipient,
        send_at=send_at,
    )
