from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notifier.config import get_settings
from notifier.infrastructure.channels import build_channel_router
from notifier.infrastructure.database import SessionLocal, engine, initialize_database
from notifier.infrastructure.delivery import (
    DeliveryQueue,
    InMemoryDeliveryQueue,
    build_delivery_queue,
)
from notifier.infrastructure.scheduler import DispatchScheduler
from notifier.interfaces.api.exception_handlers import register_exception_handlers
from notifier.interfaces.api.routes import register_routes
from notifier.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(*, publisher: DeliveryQueue | None = None) -> FastAPI:
    """Create the FastAPI application.

    The lifespan owns the delivery queue and the dispatch scheduler: both are
    created on startup, stored on ``app.state`` and shut down on exit. A
    ``publisher`` may be injected, in which case the app does not manage its
    consumers.
    """

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        initialize_database()

        queue = publisher
        owned_memory_queue: InMemoryDeliveryQueue | None = None
        if queue is None:
            queue = build_delivery_queue(settings)
            if isinstance(queue, InMemoryDeliveryQueue):
                # No external worker in this mode: consume in-process.
                queue.subscribe(build_channel_router(settings).deliver)
                queue.start()
                owned_memory_queue = queue

        scheduler = DispatchScheduler(
            SessionLocal,
            queue,
            interval_seconds=settings.scheduler_interval_seconds,
        )
        app.state.publisher = queue
        app.state.scheduler = scheduler
        if settings.scheduler_enabled:
            scheduler.start()
        else:
            logger.info("Dispatch scheduler disabled by configuration")

        try:
            yield
        finally:
            scheduler.stop()
            if owned_memory_queue is not None:
                owned_memory_queue.stop()
            engine.dispose()

    app = FastAPI(title="Notifier", lifespan=lifespan)
    register_exception_handlers(app)
    register_routes(app)
    return app


__all__ = ["create_app"]
