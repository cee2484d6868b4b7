"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to interpret naive timestamps in API responses",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    scheduler_enabled: bool = Field(
        default=True,
        description="Start the periodic dispatch scheduler together with the API",
    )
    scheduler_interval_seconds: int = Field(
        default=60,
        description="Seconds between two dispatch sweeps",
        gt=0,
    )

    delivery_backend: Literal["celery", "memory"] = Field(
        default="celery",
        description="Queue implementation used to hand sent notifications to channel senders",
    )
    celery_broker_url: str = Field(
        default="redis://localhost:6379/0",
        description="Broker URL used by the Celery delivery queue",
    )
    celery_result_backend: str | None = Field(
        default=None,
        description="Optional Celery result backend; results are not needed for delivery",
    )
    delivery_queue: str = Field(
        default="notifications",
        description="Name of the broker queue consumed by the delivery worker",
        min_length=1,
    )
    delivery_max_retries: int = Field(
        default=5,
        description="Maximum number of redeliveries for a failing channel send",
        ge=0,
    )

    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    slack_webhook_url: str | None = Field(default=None, description="Default Slack incoming webhook")
    discord_webhook_url: str | None = Field(default=None, description="Default Discord webhook")
    discord_bot_name: str = Field(default="Notifier", description="Username shown on Discord posts")
    telegram_bot_token: str | None = Field(default=None, description="Telegram Bot API token")
    whatsapp_access_token: str | None = Field(
        default=None, description="WhatsApp Cloud API access token"
    )
    whatsapp_phone_number_id: str | None = Field(
        default=None, description="WhatsApp Cloud API sender phone number id"
    )
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to outbound channel HTTP requests",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_credential_pairs(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        if bool(self.whatsapp_access_token) ^ bool(self.whatsapp_phone_number_id):
            raise ValueError(
                "WHATSAPP_ACCESS_TOKEN and WHATSAPP_PHONE_NUMBER_ID must both be provided"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
