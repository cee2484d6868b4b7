"""Email channel sender backed by the SendGrid REST API."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from notifier.domain.entities import Channel, Notification
from notifier.domain.errors import ChannelDeliveryError

from .base import ChannelSender

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "You have a new notification"


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages = [
                str(item["message"])
                for item in errors
                if isinstance(item, dict) and item.get("message")
            ]
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    return None


class SendGridEmailSender(ChannelSender):
    """Deliver notifications as plain emails through SendGrid."""

    channel = Channel.EMAIL

    def __init__(
        self,
        api_key: str,
        sender: str,
        *,
        subject: str = DEFAULT_SUBJECT,
        client: SendGridAPIClient | None = None,
    ) -> None:
        self._sender = sender
        self._subject = subject
        self._client = client or SendGridAPIClient(api_key)

    def build_message(self, notification: Notification) -> Mail:
        return Mail(
            from_email=self._sender,
            to_emails=notification.recipient,
            subject=self._subject,
            plain_text_content=notification.message,
            html_content=f"<p>{html.escape(notification.message)}</p>",
        )

    def send(self, notification: Notification) -> None:
        message = self.build_message(notification)
        try:
            response = self._client.send(message)
        except Exception as exc:
            details = _extract_sendgrid_error_details(getattr(exc, "body", None))
            status_code = getattr(exc, "status_code", None)
            logger.error(
                "SendGrid API request failed with status %s: %s", status_code, details or exc
            )
            raise ChannelDeliveryError(
                f"SendGrid rejected notification {notification.id}"
            ) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_sendgrid_error_details(getattr(response, "body", None))
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
            raise ChannelDeliveryError(
                f"SendGrid responded with status {status_code} for notification {notification.id}"
            )

        logger.info("Sent email notification %s to %s", notification.id, notification.recipient)


__all__ = ["SendGridEmailSender"]
