"""Aggregate application use cases."""

from .notifications import (
    create_notification,
    delete_notification,
    dispatch_due_notifications,
    list_pending_notifications,
    send_notification,
    update_notification,
)

__all__ = [
    "create_notification",
    "delete_notification",
    "dispatch_due_notifications",
    "list_pending_notifications",
    "send_notification",
    "update_notification",
]
