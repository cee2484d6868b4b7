"""Route consumed notifications to the sender for their channel."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from notifier.config import Settings
from notifier.domain.entities import Channel, Notification

from .base import ChannelSender, LoggingSender

logger = logging.getLogger(__name__)


class ChannelRouter:
    """Dispatch each notification to the sender registered for its channel."""

    def __init__(self, senders: Iterable[ChannelSender] = ()) -> None:
        self._senders: dict[Channel, ChannelSender] = {}
        for sender in senders:
            self.register(sender)

    def register(self, sender: ChannelSender) -> None:
        self._senders[sender.channel] = sender

    def configured_channels(self) -> set[Channel]:
        return set(self._senders)

    def sender_for(self, channel: Channel) -> ChannelSender:
        sender = self._senders.get(channel)
        if sender is None:
            return LoggingSender(channel)
        return sender

    def deliver(self, notification: Notification) -> None:
        self.sender_for(notification.channel).send(notification)


def build_channel_router(settings: Settings) -> ChannelRouter:
    """Wire a sender for every channel whose credentials are configured."""

    from .email import SendGridEmailSender
    from .http import (
        DiscordWebhookSender,
        SlackWebhookSender,
        TelegramSender,
        WhatsAppCloudSender,
    )

    timeout = settings.http_timeout_seconds
    senders: list[ChannelSender] = []
    if settings.slack_webhook_url:
        senders.append(SlackWebhookSender(settings.slack_webhook_url, timeout=timeout))
    if settings.discord_webhook_url:
        senders.append(
            DiscordWebhookSender(
                settings.discord_webhook_url,
                username=settings.discord_bot_name,
                timeout=timeout,
            )
        )
    if settings.sendgrid_api_key and settings.sendgrid_sender:
        senders.append(SendGridEmailSender(settings.sendgrid_api_key, settings.sendgrid_sender))
    if settings.telegram_bot_token:
        senders.append(TelegramSender(settings.telegram_bot_token, timeout=timeout))
    if settings.whatsapp_access_token and settings.whatsapp_phone_number_id:
        senders.append(
            WhatsAppCloudSender(
                settings.whatsapp_access_token,
                settings.whatsapp_phone_number_id,
                timeout=timeout,
            )
        )

    router = ChannelRouter(senders)
    configured = router.configured_channels()
    missing = [channel.value for channel in Channel if channel not in configured]
    if missing:
        logger.warning("No credentials for channels %s; they will only be logged", ", ".join(missing))
    return router


__all__ = ["ChannelRouter", "build_channel_router"]
