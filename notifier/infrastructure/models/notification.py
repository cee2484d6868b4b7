"""SQLAlchemy model for persisted notifications."""

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Index, String, Text
from sqlalchemy.sql import expression

from notifier.infrastructure.database import Base


def _generate_id() -> str:
    return uuid4().hex


class NotificationModel(Base):
    """Database representation for scheduled notifications."""

    __tablename__ = "notification"
    __table_args__ = (Index("ix_notification_sent_send_at", "sent", "send_at"),)

    id = Column(String(32), primary_key=True, default=_generate_id)
    message = Column(Text, nullable=False)
    channel = Column(String(20), nullable=False)
    recipient = Column(String(255), nullable=False)
    # Naive UTC, see ``ensure_naive_utc``.
    send_at = Column(DateTime(), nullable=False, index=True)
    sent = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )


__all__ = ["NotificationModel"]
