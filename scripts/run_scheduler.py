"""Run the dispatch scheduler without the HTTP API."""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from notifier.config import get_settings
from notifier.domain.errors import StorageError
from notifier.infrastructure.channels import build_channel_router
from notifier.infrastructure.database import SessionLocal, initialize_database
from notifier.infrastructure.delivery import InMemoryDeliveryQueue, build_delivery_queue
from notifier.infrastructure.scheduler import DispatchScheduler
from notifier.logging_config import configure_logging

logger = logging.getLogger("notifier.scripts.run_scheduler")


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the scheduler process."""

    parser = argparse.ArgumentParser(
        description="Periodically send notifications whose delivery time has passed.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single dispatch sweep and exit.",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between sweeps (default: SCHEDULER_INTERVAL_SECONDS).",
    )
    return parser.parse_args()


def main() -> None:
    """Start the scheduler and block until interrupted."""

    args = parse_args()
    settings = get_settings()
    configure_logging(settings)
    initialize_database()

    publisher = build_delivery_queue(settings)
    if isinstance(publisher, InMemoryDeliveryQueue):
        publisher.subscribe(build_channel_router(settings).deliver)

    scheduler = DispatchScheduler(
        SessionLocal,
        publisher,
        interval_seconds=args.interval or settings.scheduler_interval_seconds,
    )

    if args.once:
        try:
            report = scheduler.run_once()
        except StorageError as exc:
            raise SystemExit(f"Dispatch sweep failed: {exc}") from exc
        if isinstance(publisher, InMemoryDeliveryQueue):
            publisher.drain()
        logger.info("Sweep result: %s", report)
        return

    stop_event = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stop_event.set())
    signal.signal(signal.SIGINT, lambda *_: stop_event.set())

    if isinstance(publisher, InMemoryDeliveryQueue):
        publisher.start()
    scheduler.start()
    try:
        stop_event.wait()
    finally:
        scheduler.stop()
        if isinstance(publisher, InMemoryDeliveryQueue):
            publisher.stop()


if __name__ == "__main__":
    main()
