"""Endpoints for scheduling and managing notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from notifier.application.use_cases.notifications import (
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    list_pending_notifications as list_pending_notifications_uc,
    send_notification as send_notification_uc,
    update_notification as update_notification_uc,
)
from notifier.domain.entities import Notification
from notifier.domain.errors import NotFoundError, NotFoundOrAlreadySentError, PublishError
from notifier.infrastructure.database import get_db
from notifier.infrastructure.delivery import DeliveryQueue
from notifier.interfaces.api.dependencies import get_publisher
from notifier.interfaces.api.schemas import (
    NotificationCreate,
    NotificationListResponse,
    NotificationRead,
    NotificationUpdate,
)
from notifier.utils import to_app_timezone

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or "",
        message=notification.message,
        channel=notification.channel,
        recipient=notification.recipient,
        send_at=to_app_timezone(notification.send_at),
        sent=notification.sent,
    )


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
) -> NotificationRead:
    """Schedule a notification for delivery at ``send_at``."""

    notification = create_notification_uc(
        db,
        message=payload.message,
        channel=payload.channel,
        recipient=payload.recipient,
        send_at=payload.send_at,
    )
    return _notification_to_schema(notification)


@router.get("", response_model=NotificationListResponse)
def list_notifications(db: Session = Depends(get_db)) -> NotificationListResponse:
    """Return pending notifications ordered by delivery time."""

    notifications = list_pending_notifications_uc(db)
    return NotificationListResponse(
        notifications=[_notification_to_schema(n) for n in notifications]
    )


@router.put("/{notification_id}", response_model=NotificationRead)
def update_notification(
    notification_id: str,
    payload: NotificationUpdate,
    db: Session = Depends(get_db),
) -> NotificationRead:
    """Replace the fields of a notification that has not been sent yet."""

    if payload.id is not None and payload.id != notification_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Body id does not match the path identifier",
        )
    try:
        notification = update_notification_uc(
            db,
            notification_id,
            message=payload.message,
            channel=payload.channel,
            recipient=payload.recipient,
            send_at=payload.send_at,
        )
    except NotFoundOrAlreadySentError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _notification_to_schema(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(notification_id: str, db: Session = Depends(get_db)) -> Response:
    """Delete a notification regardless of its sent state."""

    try:
        delete_notification_uc(db, notification_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{notification_id}/send", status_code=status.HTTP_204_NO_CONTENT)
def send_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    publisher: DeliveryQueue = Depends(get_publisher),
) -> Response:
    """Send a pending notification immediately instead of waiting for the scheduler."""

    try:
        send_notification_uc(db, notification_id, publisher=publisher)
    except NotFoundOrAlreadySentError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except PublishError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
