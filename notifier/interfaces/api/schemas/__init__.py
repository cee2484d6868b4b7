from .health import HealthRead
from .notification import (
    NotificationCreate,
    NotificationListResponse,
    NotificationRead,
    NotificationUpdate,
)

__all__ = [
    "HealthRead",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationUpdate",
]
