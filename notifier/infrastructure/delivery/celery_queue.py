"""Celery-backed implementation of :class:`DeliveryQueue`."""

from __future__ import annotations

import logging

from celery import Celery

from notifier.domain.entities import Notification
from notifier.domain.errors import PublishError

from . import tasks
from .base import NotificationHandler
from .celery_app import DELIVER_TASK_NAME
from .messages import serialize_notification

logger = logging.getLogger(__name__)

_PUBLISH_RETRY_POLICY = {
    "max_retries": 3,
    "interval_start": 0,
    "interval_step": 0.5,
    "interval_max": 2,
}


class CeleryDeliveryQueue:
    """Publish sent notifications as ``deliver_notification`` Celery tasks."""

    def __init__(self, celery_app: Celery, *, queue_name: str) -> None:
        self._celery_app = celery_app
        self._queue_name = queue_name

    def publish(self, notification: Notification) -> None:
        payload = serialize_notification(notification)
        try:
            self._celery_app.send_task(
                DELIVER_TASK_NAME,
                args=[payload],
                queue=self._queue_name,
                retry=True,
                retry_policy=_PUBLISH_RETRY_POLICY,
            )
        except Exception as exc:
            raise PublishError(notification.id, str(exc)) from exc
        logger.debug("Queued notification %s on %s", notification.id, self._queue_name)

    def subscribe(self, handler: NotificationHandler) -> None:
        """Attach ``handler`` to the worker consuming this queue."""

        tasks.subscribe(handler)


__all__ = ["CeleryDeliveryQueue"]
