"""Channel senders consuming the delivery queue."""

from .base import ChannelSender, LoggingSender
from .router import ChannelRouter, build_channel_router

__all__ = ["ChannelSender", "LoggingSender", "ChannelRouter", "build_channel_router"]
