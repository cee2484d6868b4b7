"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notifier.domain.entities import Channel


class NotificationBase(BaseModel):
    message: str = Field(..., min_length=1, description="Text delivered to the recipient")
    channel: Channel
    recipient: str = Field(
        ..., min_length=1, max_length=255, description="Channel-specific address"
    )
    send_at: datetime = Field(
        ..., description="Delivery time; naive values are interpreted as UTC"
    )

    @field_validator("recipient")
    @classmethod
    def _strip_recipient(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("recipient must not be blank")
        return stripped


class NotificationCreate(NotificationBase):
    """Payload required to schedule a notification."""

    model_config = ConfigDict(extra="forbid")


class NotificationUpdate(NotificationBase):
    """Full replacement of the editable fields of a pending notification."""

    id: str | None = Field(
        default=None, description="Optional; must match the path identifier when given"
    )

    model_config = ConfigDict(extra="forbid")


class NotificationRead(NotificationBase):
    """Representation of a notification returned to the client."""

    id: str
    sent: bool

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead] = Field(default_factory=list)


__all__ = [
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationUpdate",
]
