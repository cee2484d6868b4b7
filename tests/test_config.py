"""Tests for configuration loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notifier.config import Settings, get_settings, reset_settings_cache


def test_defaults() -> None:
    settings = Settings(database_url="sqlite://")

    assert settings.scheduler_interval_seconds == 60
    assert settings.delivery_queue == "notifications"
    assert settings.app_timezone == "UTC"


@pytest.mark.parametrize(
    "overrides",
    [
        {"sendgrid_api_key": "key"},
        {"sendgrid_sender": "bot@example.com"},
        {"sendgrid_api_key": "key", "sendgrid_sender": "not-an-email"},
        {"whatsapp_access_token": "token"},
        {"scheduler_interval_seconds": 0},
        {"delivery_backend": "kafka"},
    ],
)
def test_invalid_settings_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", **overrides)


def test_settings_are_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCHEDULER_INTERVAL_SECONDS", "15")
    reset_settings_cache()
    try:
        assert get_settings().scheduler_interval_seconds == 15
    finally:
        monkeypatch.undo()
        reset_settings_cache()
