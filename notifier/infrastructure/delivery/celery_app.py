"""Celery application factory for the notification delivery queue."""

from __future__ import annotations

from celery import Celery

from notifier.config import Settings

DELIVER_TASK_NAME = "notifier.deliver_notification"


def create_celery_app(settings: Settings) -> Celery:
    """Create and configure the Celery app that carries sent notifications."""

    celery_app = Celery(
        "notifier",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["notifier.infrastructure.delivery.tasks"],
    )

    celery_app.conf.update(
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        enable_utc=True,
        task_ignore_result=settings.celery_result_backend is None,
        # Acknowledge only after the senders ran so a crashed worker redelivers.
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        task_default_queue=settings.delivery_queue,
        task_routes={DELIVER_TASK_NAME: {"queue": settings.delivery_queue}},
    )

    return celery_app


__all__ = ["DELIVER_TASK_NAME", "create_celery_app"]
