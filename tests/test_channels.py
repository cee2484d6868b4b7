"""Tests for the channel senders and the channel router."""

from __future__ import annotations

import logging
import types
from datetime import datetime, timezone

import pytest
import requests

from notifier.config import Settings
from notifier.domain.entities import Channel, Notification
from notifier.domain.errors import ChannelDeliveryError
from notifier.infrastructure.channels import ChannelRouter, LoggingSender, build_channel_router
from notifier.infrastructure.channels.email import SendGridEmailSender
from notifier.infrastructure.channels.http import (
    DiscordWebhookSender,
    HttpChannelSender,
    SlackWebhookSender,
    TelegramSender,
    WhatsAppCloudSender,
)


def _notification(channel: Channel, recipient: str) -> Notification:
    return Notification(
        id="n-1",
        message="Standup in 5 minutes",
        channel=channel,
        recipient=recipient,
        send_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        sent=True,
    )


class FakeSession:
    """Stand-in for ``requests.Session`` that records outgoing requests."""

    def __init__(self, status_code: int = 200, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.requests: list[dict] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return types.SimpleNamespace(status_code=self.status_code, text="response body")


def test_slack_sender_uses_configured_webhook_and_channel() -> None:
    session = FakeSession()
    sender = SlackWebhookSender("https://hooks.slack.test/abc", session=session, timeout=3)

    sender.send(_notification(Channel.SLACK, "#ops"))

    [request] = session.requests
    assert request["url"] == "https://hooks.slack.test/abc"
    assert request["json"] == {"text": "Standup in 5 minutes", "channel": "#ops"}
    assert request["timeout"] == 3


def test_slack_sender_accepts_recipient_webhook() -> None:
    session = FakeSession()
    sender = SlackWebhookSender(None, session=session)

    sender.send(_notification(Channel.SLACK, "https://hooks.slack.test/recipient"))

    [request] = session.requests
    assert request["url"] == "https://hooks.slack.test/recipient"
    assert request["json"] == {"text": "Standup in 5 minutes"}


def test_discord_sender_posts_username_and_content() -> None:
    session = FakeSession(status_code=204)
    sender = DiscordWebhookSender("https://discord.test/hook", username="Bot", session=session)

    sender.send(_notification(Channel.DISCORD, "<@123>"))

    [request] = session.requests
    assert request["json"] == {"username": "Bot", "content": "<@123> Standup in 5 minutes"}


def test_telegram_sender_targets_bot_api() -> None:
    session = FakeSession()
    sender = TelegramSender("TOKEN", session=session)

    sender.send(_notification(Channel.TELEGRAM, "987654"))

    [request] = session.requests
    assert request["url"] == "https://api.telegram.org/botTOKEN/sendMessage"
    assert request["json"] == {"chat_id": "987654", "text": "Standup in 5 minutes"}


def test_whatsapp_sender_authenticates_and_strips_plus() -> None:
    session = FakeSession()
    sender = WhatsAppCloudSender("secret", "555000", session=session)

    sender.send(_notification(Channel.WHATSAPP, "+5215512345678"))

    [request] = session.requests
    assert request["url"].endswith("/555000/messages")
    assert request["headers"]["Authorization"] == "Bearer secret"
    assert request["json"]["to"] == "5215512345678"
    assert request["json"]["text"] == {"body": "Standup in 5 minutes"}


def test_http_sender_requires_endpoint_and_payload() -> None:
    class IncompleteSender(HttpChannelSender):
        channel = Channel.SLACK

    with pytest.raises(TypeError):
        IncompleteSender(session=FakeSession())


@pytest.mark.parametrize("status_code", [429, 500, 503])
def test_http_sender_raises_on_retryable_status(status_code: int) -> None:
    sender = TelegramSender("TOKEN", session=FakeSession(status_code=status_code))

    with pytest.raises(ChannelDeliveryError):
        sender.send(_notification(Channel.TELEGRAM, "1"))


def test_http_sender_raises_on_transport_error() -> None:
    sender = TelegramSender("TOKEN", session=FakeSession(error=requests.ConnectionError("boom")))

    with pytest.raises(ChannelDeliveryError):
        sender.send(_notification(Channel.TELEGRAM, "1"))


def test_http_sender_logs_permanent_rejections(caplog: pytest.LogCaptureFixture) -> None:
    sender = TelegramSender("TOKEN", session=FakeSession(status_code=400))

    with caplog.at_level(logging.ERROR):
        sender.send(_notification(Channel.TELEGRAM, "1"))

    assert "rejected notification n-1" in caplog.text


class FakeSendGridClient:
    def __init__(self, status_code: int = 202, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.messages: list = []

    def send(self, message):
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        return types.SimpleNamespace(status_code=self.status_code, body=None)


def test_email_sender_sends_message_through_sendgrid() -> None:
    client = FakeSendGridClient()
    sender = SendGridEmailSender("key", "bot@example.com", client=client)

    sender.send(_notification(Channel.EMAIL, "a@x.com"))

    [message] = client.messages
    payload = message.get()
    assert payload["from"]["email"] == "bot@example.com"
    assert payload["personalizations"][0]["to"][0]["email"] == "a@x.com"


def test_email_sender_raises_on_error_status() -> None:
    sender = SendGridEmailSender(
        "key", "bot@example.com", client=FakeSendGridClient(status_code=500)
    )

    with pytest.raises(ChannelDeliveryError):
        sender.send(_notification(Channel.EMAIL, "a@x.com"))


def test_email_sender_wraps_client_exceptions() -> None:
    sender = SendGridEmailSender(
        "key", "bot@example.com", client=FakeSendGridClient(error=RuntimeError("timeout"))
    )

    with pytest.raises(ChannelDeliveryError):
        sender.send(_notification(Channel.EMAIL, "a@x.com"))


def test_router_delivers_to_registered_sender() -> None:
    session = FakeSession()
    router = ChannelRouter([TelegramSender("TOKEN", session=session)])

    router.deliver(_notification(Channel.TELEGRAM, "42"))

    assert len(session.requests) == 1


def test_router_falls_back_to_logging_sender(caplog: pytest.LogCaptureFixture) -> None:
    router = ChannelRouter()

    assert isinstance(router.sender_for(Channel.DISCORD), LoggingSender)
    with caplog.at_level(logging.INFO):
        router.deliver(_notification(Channel.DISCORD, "someone"))

    assert "Sending notification n-1 via discord" in caplog.text


def test_build_channel_router_wires_configured_channels() -> None:
    settings = Settings(
        database_url="sqlite://",
        sendgrid_api_key="key",
        sendgrid_sender="bot@example.com",
        telegram_bot_token="TOKEN",
        slack_webhook_url="https://hooks.slack.test/abc",
    )

    router = build_channel_router(settings)

    assert router.configured_channels() == {Channel.EMAIL, Channel.TELEGRAM, Channel.SLACK}
    assert isinstance(router.sender_for(Channel.WHATSAPP), LoggingSender)
