"""Wire representation of notifications handed to the delivery queue."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from notifier.domain.entities import Channel, Notification
from notifier.utils import ensure_utc


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON-compatible payload published for ``notification``."""

    send_at = ensure_utc(notification.send_at)
    return {
        "id": notification.id,
        "message": notification.message,
        "channel": Channel(notification.channel).value,
        "recipient": notification.recipient,
        "send_at": send_at.isoformat() if send_at else None,
        "sent": notification.sent,
    }


def deserialize_notification(payload: dict[str, Any]) -> Notification:
    """Rebuild a :class:`Notification` from a queue payload."""

    try:
        send_at = datetime.fromisoformat(payload["send_at"])
        return Notification(
            id=payload["id"],
            message=payload["message"],
            channel=Channel(payload["channel"]),
            recipient=payload["recipient"],
            send_at=ensure_utc(send_at),
            sent=bool(payload.get("sent", True)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed notification payload: {payload!r}") from exc


__all__ = ["serialize_notification", "deserialize_notification"]
