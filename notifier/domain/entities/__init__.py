"""Domain entities exposed by the application."""

from .notification import Channel, Notification

__all__ = ["Channel", "Notification"]
