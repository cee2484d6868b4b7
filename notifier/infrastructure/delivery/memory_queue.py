"""In-process delivery queue used for local development and tests."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Any

from notifier.domain.entities import Notification

from .base import NotificationHandler
from .messages import deserialize_notification, serialize_notification

logger = logging.getLogger(__name__)


@dataclass
class _Envelope:
    payload: dict[str, Any]
    attempts: int = 0


class InMemoryDeliveryQueue:
    """Thread-safe FIFO with at-least-once handoff to subscribed handlers.

    Messages are copied into their wire form on ``publish`` so consumers never
    share state with the dispatcher. A handler failure puts the message back at
    the tail of the queue until ``max_attempts`` is reached, after which it is
    parked in :attr:`dead_letters`.
    """

    def __init__(self, *, max_attempts: int = 5, poll_interval: float = 0.5) -> None:
        self._queue: queue.Queue[_Envelope] = queue.Queue()
        self._handlers: list[NotificationHandler] = []
        self._max_attempts = max(1, max_attempts)
        self._poll_interval = poll_interval
        self._stop_event = threading.Event()
        self._worker: threading.Thread | None = None
        self.dead_letters: list[dict[str, Any]] = []

    def publish(self, notification: Notification) -> None:
        self._queue.put(_Envelope(payload=serialize_notification(notification)))

    def subscribe(self, handler: NotificationHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def pending(self) -> list[Notification]:
        """Return a snapshot of the notifications still waiting in the queue."""

        with self._queue.mutex:
            envelopes = list(self._queue.queue)
        return [deserialize_notification(envelope.payload) for envelope in envelopes]

    def drain(self) -> int:
        """Deliver every message queued at call time and return how many succeeded."""

        delivered = 0
        for _ in range(self._queue.qsize()):
            try:
                envelope = self._queue.get_nowait()
            except queue.Empty:
                break
            if self._deliver(envelope):
                delivered += 1
        return delivered

    def start(self) -> None:
        """Consume messages on a background thread until :meth:`stop` is called."""

        if self._worker is not None and self._worker.is_alive():
            return
        self._stop_event.clear()
        self._worker = threading.Thread(
            target=self._run, name="notifier-memory-queue", daemon=True
        )
        self._worker.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop_event.set()
        if self._worker is not None:
            self._worker.join(timeout)
            self._worker = None

    def _run(self) -> None:
        while not self._stop_event.is_set():
            if not self._handlers:
                # Leave messages queued and idle until a subscriber arrives.
                self._stop_event.wait(self._poll_interval)
                continue
            try:
                envelope = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            self._deliver(envelope)

    def _deliver(self, envelope: _Envelope) -> bool:
        if not self._handlers:
            # Nobody listening yet; keep the message instead of losing it.
            self._queue.put(envelope)
            return False

        envelope.attempts += 1
        notification = deserialize_notification(envelope.payload)
        try:
            for handler in list(self._handlers):
                handler(notification)
        except Exception:
            if envelope.attempts >= self._max_attempts:
                logger.exception(
                    "Giving up on notification %s after %d attempts",
                    notification.id,
                    envelope.attempts,
                )
                self.dead_letters.append(envelope.payload)
            else:
                logger.warning(
                    "Delivery of notification %s failed (attempt %d); requeued",
                    notification.id,
                    envelope.attempts,
                    exc_info=True,
                )
                self._queue.put(envelope)
            return False
        return True


__all__ = ["InMemoryDeliveryQueue"]
