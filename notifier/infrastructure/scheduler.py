"""APScheduler integration driving the periodic dispatch sweep.

Architecture:
    BackgroundScheduler (in-process, every N seconds) → dispatch_due_notifications
    → DeliveryQueue.publish → channel senders (Celery worker)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from notifier.application.use_cases.notifications import (
    DispatchReport,
    dispatch_due_notifications,
)
from notifier.infrastructure.delivery import DeliveryQueue
from notifier.utils import now_utc

logger = logging.getLogger(__name__)

JOB_ID = "send-scheduled-notifications"


class DispatchScheduler:
    """Own the periodic trigger that runs one dispatch sweep per interval.

    Sweeps never overlap: APScheduler is limited to one running instance of
    the job and coalesces missed ticks, and :meth:`run_once` shares a lock
    with the timer so a manual sweep cannot race a scheduled one. Exceptions
    raised by a sweep are logged and do not cancel later ticks.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        publisher: DeliveryQueue,
        *,
        interval_seconds: int = 60,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._session_factory = session_factory
        self._publisher = publisher
        self._interval_seconds = interval_seconds
        self._sweep_lock = threading.Lock()
        self._scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start ticking; the first sweep runs immediately."""

        if self.running:
            return
        scheduler = BackgroundScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": self._interval_seconds,
            },
        )
        scheduler.add_job(
            self._tick,
            trigger=IntervalTrigger(seconds=self._interval_seconds),
            id=JOB_ID,
            name="Send scheduled notifications",
            replace_existing=True,
            next_run_time=now_utc(),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Dispatch scheduler started (every %ds)", self._interval_seconds)

    def stop(self, wait: bool = True) -> None:
        """Stop ticking; with ``wait`` an in-flight sweep is allowed to finish."""

        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Dispatch scheduler stopped")

    def run_once(self) -> DispatchReport | None:
        """Run a single sweep now; returns ``None`` if another sweep is in flight."""

        if not self._sweep_lock.acquire(blocking=False):
            logger.info("Previous dispatch sweep still running; skipping this tick")
            return None
        try:
            session = self._session_factory()
            try:
                return dispatch_due_notifications(session, publisher=self._publisher)
            finally:
                session.close()
        finally:
            self._sweep_lock.release()

    def _tick(self) -> None:
        try:
            self.run_once()
        except Exception:
            logger.exception("Dispatch sweep failed; retrying on the next tick")


__all__ = ["DispatchScheduler", "JOB_ID"]
