"""Shared fixtures for the notifier test-suite."""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="notifier-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR / 'app.db'}"
os.environ["DELIVERY_BACKEND"] = "memory"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["APP_TIMEZONE"] = "UTC"

from notifier.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from notifier.domain.entities import Channel, Notification  # noqa: E402
from notifier.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)
from notifier.infrastructure.delivery import InMemoryDeliveryQueue  # noqa: E402
from notifier.infrastructure.repositories import NotificationRepository  # noqa: E402
from notifier.utils import now_utc  # noqa: E402


@pytest.fixture()
def engine(tmp_path):
    """Return an engine bound to a fresh SQLite database file."""

    db_engine = build_engine(f"sqlite:///{tmp_path / 'notifier.db'}")
    initialize_database(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def repository(session) -> NotificationRepository:
    return NotificationRepository(session)


@pytest.fixture()
def delivery_queue() -> InMemoryDeliveryQueue:
    return InMemoryDeliveryQueue(max_attempts=3)


@pytest.fixture()
def make_notification(repository):
    """Persist a notification scheduled ``offset`` away from now."""

    def _make(
        *,
        offset: timedelta = timedelta(seconds=-1),
        message: str = "hi",
        channel: Channel = Channel.EMAIL,
        recipient: str = "a@x.com",
    ) -> Notification:
        return repository.create(
            Notification(
                id=None,
                message=message,
                channel=channel,
                recipient=recipient,
                send_at=now_utc() + offset,
            )
        )

    return _make
