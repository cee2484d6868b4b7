"""Channel senders that talk to chat platforms over HTTP."""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any

import requests

from notifier.domain.entities import Channel, Notification
from notifier.domain.errors import ChannelDeliveryError

from .base import ChannelSender

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
WHATSAPP_API_URL = "https://graph.facebook.com/v19.0"
_RETRYABLE_STATUS = {408, 425, 429}


class HttpChannelSender(ChannelSender):
    """POST a JSON payload and translate transport failures into delivery errors.

    Server errors, timeouts and throttling raise ``ChannelDeliveryError`` so the
    queue redelivers. Other client errors will not succeed on retry and are
    logged instead.
    """

    def __init__(self, *, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    @abstractmethod
    def endpoint(self, notification: Notification) -> str:
        """Return the URL ``notification`` is posted to."""

    @abstractmethod
    def payload(self, notification: Notification) -> dict[str, Any]:
        """Return the JSON body for ``notification``."""

    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def send(self, notification: Notification) -> None:
        url = self.endpoint(notification)
        try:
            resp = self._session.post(
                url,
                json=self.payload(notification),
                headers=self.headers(),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise ChannelDeliveryError(
                f"{self.channel.value} request failed for notification {notification.id}: {exc}"
            ) from exc

        if resp.status_code >= 500 or resp.status_code in _RETRYABLE_STATUS:
            raise ChannelDeliveryError(
                f"{self.channel.value} responded with {resp.status_code} for notification {notification.id}"
            )
        if resp.status_code >= 400:
            logger.error(
                "%s rejected notification %s with %s: %s",
                self.channel.value,
                notification.id,
                resp.status_code,
                resp.text[:200],
            )
            return
        logger.info(
            "Sent %s notification %s to %s",
            self.channel.value,
            notification.id,
            notification.recipient,
        )


def _is_webhook_url(value: str) -> bool:
    return value.startswith("https://")


class SlackWebhookSender(HttpChannelSender):
    """Post the message to a Slack incoming webhook."""

    channel = Channel.SLACK

    def __init__(self, webhook_url: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._webhook_url = webhook_url

    def endpoint(self, notification: Notification) -> str:
        if _is_webhook_url(notification.recipient):
            return notification.recipient
        if not self._webhook_url:
            raise ChannelDeliveryError("SLACK_WEBHOOK_URL is not configured")
        return self._webhook_url

    def payload(self, notification: Notification) -> dict[str, Any]:
        body: dict[str, Any] = {"text": notification.message}
        if not _is_webhook_url(notification.recipient):
            body["channel"] = notification.recipient
        return body


class DiscordWebhookSender(HttpChannelSender):
    """Post the message to a Discord webhook."""

    channel = Channel.DISCORD

    def __init__(
        self, webhook_url: str | None = None, *, username: str = "Notifier", **kwargs: Any
    ) -> None:
        super().__init__(**kwargs)
        self._webhook_url = webhook_url
        self._username = username

    def endpoint(self, notification: Notification) -> str:
        if _is_webhook_url(notification.recipient):
            return notification.recipient
        if not self._webhook_url:
            raise ChannelDeliveryError("DISCORD_WEBHOOK_URL is not configured")
        return self._webhook_url

    def payload(self, notification: Notification) -> dict[str, Any]:
        content = notification.message
        if not _is_webhook_url(notification.recipient):
            content = f"{notification.recipient} {content}"
        return {"username": self._username, "content": content}


class TelegramSender(HttpChannelSender):
    """Send the message with the Telegram Bot API; the recipient is a chat id."""

    channel = Channel.TELEGRAM

    def __init__(self, bot_token: str, *, api_url: str = TELEGRAM_API_URL, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._bot_token = bot_token
        self._api_url = api_url.rstrip("/")

    def endpoint(self, notification: Notification) -> str:
        return f"{self._api_url}/bot{self._bot_token}/sendMessage"

    def payload(self, notification: Notification) -> dict[str, Any]:
        return {"chat_id": notification.recipient, "text": notification.message}


class WhatsAppCloudSender(HttpChannelSender):
    """Send a text message through the WhatsApp Cloud API."""

    channel = Channel.WHATSAPP

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        *,
        api_url: str = WHATSAPP_API_URL,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._access_token = access_token
        self._phone_number_id = phone_number_id
        self._api_url = api_url.rstrip("/")

    def endpoint(self, notification: Notification) -> str:
        return f"{self._api_url}/{self._phone_number_id}/messages"

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._access_token}",
        }

    def payload(self, notification: Notification) -> dict[str, Any]:
        return {
            "messaging_product": "whatsapp",
            "to": notification.recipient.lstrip("+"),
            "type": "text",
            "text": {"body": notification.message},
        }


__all__ = [
    "HttpChannelSender",
    "SlackWebhookSender",
    "DiscordWebhookSender",
    "TelegramSender",
    "WhatsAppCloudSender",
]
