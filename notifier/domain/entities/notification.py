"""Domain entity representing a scheduled notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Channel(str, Enum):
    """External channels a notification can be delivered through."""

    WHATSAPP = "whatsapp"
    EMAIL = "email"
    TELEGRAM = "telegram"
    SLACK = "slack"
    DISCORD = "discord"


@dataclass
class Notification:
    """Message scheduled for delivery to ``recipient`` once ``send_at`` has passed."""

    id: str | None
    message: str
    channel: Channel
    recipient: str
    send_at: datetime
    sent: bool = False


__all__ = ["Channel", "Notification"]
