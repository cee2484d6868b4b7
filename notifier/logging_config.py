"""Process-wide logging setup shared by the API, the scheduler and the worker."""

from __future__ import annotations

import logging

from notifier.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Apply the configured level and format to the root logger."""

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # APScheduler logs every job execution at INFO.
    logging.getLogger("apscheduler.executors").setLevel(max(level, logging.WARNING))


__all__ = ["configure_logging", "LOG_FORMAT"]
