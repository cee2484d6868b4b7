"""Delivery queue between the dispatcher and the channel senders."""

from __future__ import annotations

from notifier.config import Settings

from .base import DeliveryQueue, NotificationHandler
from .memory_queue import InMemoryDeliveryQueue
from .messages import deserialize_notification, serialize_notification


def build_delivery_queue(settings: Settings) -> DeliveryQueue:
    """Return the delivery queue selected by ``DELIVERY_BACKEND``."""

    if settings.delivery_backend == "memory":
        return InMemoryDeliveryQueue(max_attempts=settings.delivery_max_retries + 1)

    from .celery_app import create_celery_app
    from .celery_queue import CeleryDeliveryQueue

    return CeleryDeliveryQueue(
        create_celery_app(settings), queue_name=settings.delivery_queue
    )


__all__ = [
    "DeliveryQueue",
    "InMemoryDeliveryQueue",
    "NotificationHandler",
    "build_delivery_queue",
    "deserialize_notification",
    "serialize_notification",
]
