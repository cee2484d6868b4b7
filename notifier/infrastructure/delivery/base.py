"""Capability interface shared by every delivery queue backend."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from notifier.domain.entities import Notification

NotificationHandler = Callable[[Notification], None]


@runtime_checkable
class DeliveryQueue(Protocol):
    """At-least-once queue between the dispatcher and the channel senders.

    ``publish`` is the producer side and hands one sent notification to the
    queue. ``subscribe`` is the consumer side; handlers may see the same
    notification more than once and must tolerate it.
    """

    def publish(self, notification: Notification) -> None:
        ...

    def subscribe(self, handler: NotificationHandler) -> None:
        ...


__all__ = ["DeliveryQueue", "NotificationHandler"]
