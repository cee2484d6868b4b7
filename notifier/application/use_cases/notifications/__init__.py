"""Use cases for scheduling and dispatching notifications."""

from .create_notification import create_notification
from .delete_notification import delete_notification
from .dispatch_due_notifications import DispatchReport, dispatch_due_notifications
from .list_pending_notifications import list_pending_notifications
from .send_notification import send_notification
from .update_notification import update_notification

__all__ = [
    "DispatchReport",
    "create_notification",
    "delete_notification",
    "dispatch_due_notifications",
    "list_pending_notifications",
    "send_notification",
    "update_notification",
]
