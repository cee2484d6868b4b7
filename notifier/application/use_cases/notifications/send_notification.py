"""Use case for marking a notification as sent and handing it to the delivery queue."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notifier.domain.entities import Notification
from notifier.infrastructure.delivery import DeliveryQueue
from notifier.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


def send_notification(
    session: Session, notification_id: str, *, publisher: DeliveryQueue
) -> Notification:
    """Flip ``sent`` for ``notification_id`` and publish the resulting record.

    ``NotFoundOrAlreadySentError`` is raised when another caller won the
    transition. A ``PublishError`` leaves the notification marked as sent:
    the flag prevents re-dispatch, it does not confirm delivery.
    """

    notification = NotificationRepository(session).mark_sent(notification_id)
    logger.debug("Notification %s marked as sent", notification_id)
    publisher.publish(notification)
    return notification


__all__ = ["send_notification"]
