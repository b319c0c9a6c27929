"""Shared fixtures for calendar-notifier tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

_ALL_ENV_VARS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
    "CALENDAR_ID",
    "GOOGLE_CLOUD_PROJECT",
    "DISCORD_WEBHOOK_URL",
    "GOOGLE_CLOUD_DATABASE",
    "LOG_LEVEL",
    "PORT",
    "WATCH_PATH",
)


@pytest.fixture()
def monkeypatch_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set all required environment variables to valid defaults.

    Also patches ``load_dotenv`` so that a real ``.env`` file on disk does not
    override the test values, and clears the optional variables.

    Returns the dict of variables so tests can inspect or override values.
    """
    monkeypatch.setattr("cal_notifier.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ALL_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    env_vars = {
        "GOOGLE_CLIENT_ID": "test-client-id.apps.googleusercontent.com",
        "GOOGLE_CLIENT_SECRET": "test-client-secret",
        "GOOGLE_REFRESH_TOKEN": "test-refresh-token",
        "CALENDAR_ID": "family@group.calendar.google.com",
        "GOOGLE_CLOUD_PROJECT": "test-project",
        "DISCORD_WEBHOOK_URL": "https://discord.example.com/api/webhooks/1/abc",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all calendar-notifier environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("cal_notifier.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ALL_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
