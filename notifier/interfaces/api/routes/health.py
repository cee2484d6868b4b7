from fastapi import APIRouter, Depends

from notifier.infrastructure.scheduler import DispatchScheduler
from notifier.interfaces.api.dependencies import get_scheduler
from notifier.interfaces.api.schemas import HealthRead

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
def health(scheduler: DispatchScheduler | None = Depends(get_scheduler)) -> HealthRead:
    """Report liveness and whether the dispatch scheduler is ticking."""

    return HealthRead(status="ok", scheduler_running=bool(scheduler and scheduler.running))
