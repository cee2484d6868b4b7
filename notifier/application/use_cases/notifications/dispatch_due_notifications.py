"""Sweep that dispatches every due notification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from notifier.domain.errors import NotFoundOrAlreadySentError, PublishError, StorageError
from notifier.infrastructure.delivery import DeliveryQueue
from notifier.infrastructure.repositories import NotificationRepository
from notifier.utils import ensure_utc, now_utc

from .send_notification import send_notification

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    """Outcome counters for a single sweep."""

    due: int = 0
    dispatched: int = 0
    skipped: int = 0
    failed: int = 0
    publish_failures: int = 0


def dispatch_due_notifications(
    session: Session,
    *,
    publisher: DeliveryQueue,
    now: datetime | None = None,
) -> DispatchReport:
    """Mark every due notification as sent and publish it.

    Each notification is handled independently. Losing the ``sent`` race to a
    concurrent sweep or client call is counted as skipped. A storage failure
    on one notification does not stop the others, while a failure of the due
    query itself propagates and aborts the sweep.
    """

    cutoff = ensure_utc(now) if now is not None else now_utc()
    due_ids = NotificationRepository(session).list_due(cutoff)
    report = DispatchReport(due=len(due_ids))

    for notification_id in due_ids:
        try:
            send_notification(session, notification_id, publisher=publisher)
        except NotFoundOrAlreadySentError:
            logger.debug("Notification %s already sent or deleted; skipping", notification_id)
            report.skipped += 1
        except PublishError:
            logger.exception(
                "Notification %s marked as sent but could not be queued", notification_id
            )
            report.publish_failures += 1
        except StorageError:
            logger.exception("Failed to mark notification %s as sent", notification_id)
            report.failed += 1
        else:
            report.dispatched += 1

    if report.due:
        logger.info(
            "Dispatch sweep finished: due=%d dispatched=%d skipped=%d failed=%d publish_failures=%d",
            report.due,
            report.dispatched,
            report.skipped,
            report.failed,
            report.publish_failures,
        )
    return report


__all__ = ["DispatchReport", "dispatch_due_notifications"]
