"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notifier.domain.entities import Channel, Notification
from notifier.domain.errors import NotFoundError, NotFoundOrAlreadySentError, StorageError
from notifier.infrastructure.models import NotificationModel
from notifier.utils import ensure_naive_utc, ensure_utc

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide CRUD operations and the sent transition for :class:`Notification` objects.

    Every mutation that depends on the ``sent`` flag is issued as a single
    conditional ``UPDATE`` so that concurrent sweeps and API calls cannot
    interleave between a read and a write.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        model.sent = False
        with self._storage_errors("create notification"):
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
        return self._to_entity(model)

    def get(self, notification_id: str) -> Notification | None:
        with self._storage_errors("load notification"):
            model = self.session.get(
                NotificationModel, notification_id, populate_existing=True
            )
        return self._to_entity(model) if model is not None else None

    def list_pending(self) -> list[Notification]:
        with self._storage_errors("list pending notifications"):
            models = (
                self.session.query(NotificationModel)
                .populate_existing()
                .filter(NotificationModel.sent.is_(False))
                .order_by(NotificationModel.send_at.asc(), NotificationModel.id.asc())
                .all()
            )
        return [self._to_entity(model) for model in models]

    def list_due(self, now: datetime) -> list[str]:
        cutoff = ensure_naive_utc(now)
        with self._storage_errors("list due notifications"):
            rows = (
                self.session.query(NotificationModel.id)
                .filter(NotificationModel.sent.is_(False))
                .filter(NotificationModel.send_at <= cutoff)
                .order_by(NotificationModel.send_at.asc(), NotificationModel.id.asc())
                .all()
            )
            # End the read transaction so later conditional updates see fresh state.
            self.session.commit()
        return [row.id for row in rows]

    def update(
        self,
        notification_id: str,
        *,
        message: str,
        channel: Channel,
        recipient: str,
        send_at: datetime,
    ) -> Notification:
        values = {
            NotificationModel.message: message,
            NotificationModel.channel: Channel(channel).value,
            NotificationModel.recipient: recipient,
            NotificationModel.send_at: ensure_naive_utc(send_at),
        }
        return self._conditional_update(notification_id, values, action="update notification")

    def mark_sent(self, notification_id: str) -> Notification:
        """Flip ``sent`` to ``True`` if, and only if, it is currently ``False``."""

        return self._conditional_update(
            notification_id,
            {NotificationModel.sent: True},
            action="mark notification as sent",
        )

    def delete(self, notification_id: str) -> None:
        with self._storage_errors("delete notification"):
            deleted = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id == notification_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        if deleted == 0:
            raise NotFoundError(notification_id)

    def _conditional_update(
        self, notification_id: str, values: dict, *, action: str
    ) -> Notification:
        with self._storage_errors(action):
            affected = (
                self.session.query(NotificationModel)
                .filter(NotificationModel.id == notification_id)
                .filter(NotificationModel.sent.is_(False))
                .update(values, synchronize_session=False)
            )
            if affected == 0:
                self.session.rollback()
                raise NotFoundOrAlreadySentError(notification_id)
            # Read back inside the same transaction, before the row lock is released.
            model = self.session.get(
                NotificationModel, notification_id, populate_existing=True
            )
            if model is None:  # pragma: no cover - row vanished inside our own transaction
                self.session.rollback()
                raise NotFoundOrAlreadySentError(notification_id)
            notification = self._to_entity(model)
            self.session.commit()
        return notification

    @contextmanager
    def _storage_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise StorageError(f"Failed to {action}") from exc

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        if notification.id is not None:
            model.id = notification.id
        model.message = notification.message
        model.channel = Channel(notification.channel).value
        model.recipient = notification.recipient
        model.send_at = ensure_naive_utc(notification.send_at)

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            message=model.message,
            channel=Channel(model.channel),
            recipient=model.recipient,
            send_at=ensure_utc(model.send_at),
            sent=bool(model.sent),
        )


__all__ = ["NotificationRepository"]
