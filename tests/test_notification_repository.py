"""Tests for the SQLAlchemy notification store."""

from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from notifier.domain.entities import Channel
from notifier.domain.errors import NotFoundError, NotFoundOrAlreadySentError, StorageError
from notifier.infrastructure.database import Base
from notifier.infrastructure.repositories import NotificationRepository
from notifier.utils import now_utc


def test_create_assigns_unique_ids_and_starts_unsent(make_notification) -> None:
    first = make_notification()
    second = make_notification()

    assert first.id and second.id
    assert first.id != second.id
    assert first.sent is False
    assert first.channel is Channel.EMAIL
    assert first.send_at.tzinfo is not None


def test_list_pending_excludes_sent_and_orders_by_send_at(repository, make_notification) -> None:
    later = make_notification(offset=timedelta(hours=2), message="later")
    earliest = make_notification(offset=timedelta(hours=-3), message="earliest")
    middle = make_notification(offset=timedelta(minutes=5), message="middle")
    sent = make_notification(offset=timedelta(hours=-5), message="sent")
    repository.mark_sent(sent.id)

    pending = repository.list_pending()

    assert [n.id for n in pending] == [earliest.id, middle.id, later.id]
    assert all(n.sent is False for n in pending)


def test_list_due_returns_only_past_unsent_ids(repository, make_notification) -> None:
    due_old = make_notification(offset=timedelta(minutes=-10))
    due_recent = make_notification(offset=timedelta(seconds=-1))
    make_notification(offset=timedelta(hours=1))
    already_sent = make_notification(offset=timedelta(minutes=-20))
    repository.mark_sent(already_sent.id)

    assert repository.list_due(now_utc()) == [due_old.id, due_recent.id]


def test_list_due_includes_send_at_equal_to_now(repository, make_notification) -> None:
    notification = make_notification(offset=timedelta(hours=1))

    assert repository.list_due(notification.send_at) == [notification.id]


def test_update_pending_notification(repository, make_notification) -> None:
    notification = make_notification()
    new_send_at = now_utc() + timedelta(days=1)

    updated = repository.update(
        notification.id,
        message="changed",
        channel=Channel.SLACK,
        recipient="#general",
        send_at=new_send_at,
    )

    assert updated.id == notification.id
    assert updated.message == "changed"
    assert updated.channel is Channel.SLACK
    assert updated.recipient == "#general"
    assert abs(updated.send_at - new_send_at) < timedelta(milliseconds=1)
    assert updated.sent is False


def test_update_after_sent_fails_and_keeps_fields(repository, make_notification) -> None:
    notification = make_notification(message="original")
    repository.mark_sent(notification.id)

    with pytest.raises(NotFoundOrAlreadySentError):
        repository.update(
            notification.id,
            message="edited",
            channel=Channel.DISCORD,
            recipient="someone",
            send_at=now_utc(),
        )

    stored = repository.get(notification.id)
    assert stored is not None
    assert stored.message == "original"
    assert stored.channel is Channel.EMAIL
    assert stored.recipient == "a@x.com"
    assert stored.sent is True


def test_update_unknown_id_fails(repository) -> None:
    with pytest.raises(NotFoundOrAlreadySentError):
        repository.update(
            "missing",
            message="x",
            channel=Channel.EMAIL,
            recipient="a@x.com",
            send_at=now_utc(),
        )


def test_mark_sent_is_a_one_way_transition(repository, make_notification) -> None:
    notification = make_notification()

    marked = repository.mark_sent(notification.id)
    assert marked.sent is True
    assert marked.message == notification.message

    with pytest.raises(NotFoundOrAlreadySentError):
        repository.mark_sent(notification.id)
    assert repository.get(notification.id).sent is True


def test_mark_sent_unknown_id_fails(repository) -> None:
    with pytest.raises(NotFoundOrAlreadySentError):
        repository.mark_sent("does-not-exist")


def test_concurrent_mark_sent_has_exactly_one_winner(session_factory, make_notification) -> None:
    notification = make_notification()
    workers = 6
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []
    lock = threading.Lock()

    def _attempt() -> None:
        session = session_factory()
        try:
            barrier.wait()
            NotificationRepository(session).mark_sent(notification.id)
            outcome = "sent"
        except NotFoundOrAlreadySentError:
            outcome = "lost"
        finally:
            session.close()
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=_attempt) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert outcomes.count("sent") == 1
    assert outcomes.count("lost") == workers - 1


def test_delete_works_for_pending_and_sent(repository, make_notification) -> None:
    pending = make_notification()
    sent = make_notification()
    repository.mark_sent(sent.id)

    repository.delete(pending.id)
    repository.delete(sent.id)

    assert repository.get(pending.id) is None
    assert repository.get(sent.id) is None


def test_delete_unknown_id_raises_not_found(repository) -> None:
    with pytest.raises(NotFoundError):
        repository.delete("missing")


def test_sqlalchemy_failures_surface_as_storage_error(engine, repository) -> None:
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageError) as excinfo:
        repository.list_pending()

    assert excinfo.value.__cause__ is not None
