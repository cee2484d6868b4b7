"""Consumer side of the Celery delivery queue."""

from __future__ import annotations

import logging
from typing import Any

from celery import shared_task

from notifier.config import get_settings
from notifier.domain.errors import ChannelDeliveryError

from .base import NotificationHandler
from .celery_app import DELIVER_TASK_NAME
from .messages import deserialize_notification

logger = logging.getLogger(__name__)

_handlers: list[NotificationHandler] = []


def subscribe(handler: NotificationHandler) -> None:
    """Register ``handler`` to receive every notification consumed by this worker."""

    if handler not in _handlers:
        _handlers.append(handler)


def clear_subscriptions() -> None:
    _handlers.clear()


def handle_payload(payload: dict[str, Any]) -> int:
    """Deliver ``payload`` to every subscribed handler and return how many ran."""

    try:
        notification = deserialize_notification(payload)
    except ValueError:
        logger.error("Dropping malformed delivery payload: %r", payload)
        return 0

    if not _handlers:
        raise ChannelDeliveryError(
            f"No channel handler subscribed for notification {notification.id}"
        )

    for handler in list(_handlers):
        handler(notification)
    logger.info(
        "Delivered notification %s via %s", notification.id, notification.channel.value
    )
    return len(_handlers)


@shared_task(
    name=DELIVER_TASK_NAME,
    bind=True,
    acks_late=True,
    autoretry_for=(ChannelDeliveryError,),
    retry_backoff=True,
    retry_jitter=True,
    max_retries=get_settings().delivery_max_retries,
)
def deliver_notification(self, payload: dict[str, Any]) -> int:
    if self.request.retries:
        logger.warning(
            "Redelivering notification %s (attempt %d)",
            payload.get("id"),
            self.request.retries + 1,
        )
    return handle_payload(payload)


__all__ = ["subscribe", "clear_subscriptions", "handle_payload", "deliver_notification"]
