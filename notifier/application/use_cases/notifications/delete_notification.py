"""Use case for deleting notifications."""

from sqlalchemy.orm import Session

from notifier.infrastructure.repositories import NotificationRepository


def delete_notification(session: Session, notification_id: str) -> None:
    """Delete the specified notification whether or not it was sent."""

    NotificationRepository(session).delete(notification_id)
