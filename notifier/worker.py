"""Celery worker entry point for the channel senders.

Run with::

    celery -A notifier.worker worker -Q notifications
"""

from __future__ import annotations

from notifier.config import get_settings
from notifier.infrastructure.channels import build_channel_router
from notifier.infrastructure.delivery import tasks
from notifier.infrastructure.delivery.celery_app import create_celery_app
from notifier.logging_config import configure_logging

settings = get_settings()
configure_logging(settings)

celery_app = create_celery_app(settings)
channel_router = build_channel_router(settings)
tasks.subscribe(channel_router.deliver)

__all__ = ["celery_app", "channel_router"]
