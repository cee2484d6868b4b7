"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from notifier.infrastructure.delivery import DeliveryQueue
from notifier.infrastructure.scheduler import DispatchScheduler


def get_publisher(request: Request) -> DeliveryQueue:
    """Return the delivery queue created by the application lifespan."""

    publisher = getattr(request.app.state, "publisher", None)
    if publisher is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Delivery queue is not configured",
        )
    return publisher


def get_scheduler(request: Request) -> DispatchScheduler | None:
    return getattr(request.app.state, "scheduler", None)


__all__ = ["get_publisher", "get_scheduler"]
