"""Shared fixtures for Google Calendar unit tests."""

from __future__ import annotations

import pytest

from cal_notifier.config import Settings


@pytest.fixture()
def settings() -> Settings:
    """Return Settings populated with fake OAuth and calendar values."""
    return Settings(
        google_client_id="fake-client-id.apps.googleusercontent.com",
        google_client_secret="fake-client-secret",
        google_refresh_token="fake-refresh-token",
        calendar_id="family@group.calendar.google.com",
        gcp_project="fake-project",
        webhook_url="https://discord.example.com/api/webhooks/1/abc",
    )
