"""Use case for listing notifications that have not been sent yet."""

from sqlalchemy.orm import Session

from notifier.domain.entities import Notification
from notifier.infrastructure.repositories import NotificationRepository


def list_pending_notifications(session: Session) -> list[Notification]:
    """Return unsent notifications ordered by ascending ``send_at``."""

    return NotificationRepository(session).list_pending()
