"""Configuration loading for calendar-notifier.

Reads settings from environment variables (with .env support via python-dotenv)
and validates that all required values are present.  The resulting
:class:`Settings` is built once at startup and handed to every collaborator
constructor; no other module reads the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


_DEFAULT_PORT = 8080
_DEFAULT_WATCH_PATH = "/watch/v2"
_DEFAULT_DATABASE = "(default)"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        google_client_id: OAuth client ID used for the refresh-token exchange.
        google_client_secret: OAuth client secret.
        google_refresh_token: Long-lived refresh token for the calendar owner.
        calendar_id: Identifier of the single watched calendar.
        gcp_project: Google Cloud project holding the Firestore database.
        webhook_url: Chat webhook that receives event notifications.
        firestore_database: Firestore database ID (default ``"(default)"``).
        log_level: Logging level (default ``"INFO"``).
        port: TCP port the HTTP server listens on (default ``8080``).
        watch_path: Path of the push-notification route
            (default ``"/watch/v2"``).
    """

    google_client_id: str
    google_client_secret: str
    google_refresh_token: str
    calendar_id: str
    gcp_project: str
    webhook_url: str
    firestore_database: str = _DEFAULT_DATABASE
    log_level: str = "INFO"
    port: int = _DEFAULT_PORT
    watch_path: str = _DEFAULT_WATCH_PATH

    def __repr__(self) -> str:
        return (
            f"Settings(google_client_id={self.google_client_id!r}, "
            f"google_client_secret='***', "
            f"google_refresh_token='***', "
            f"calendar_id={self.calendar_id!r}, "
            f"gcp_project={self.gcp_project!r}, "
            f"webhook_url='***', "
            f"firestore_database={self.firestore_database!r}, "
            f"log_level={self.log_level!r}, "
            f"port={self.port!r}, "
            f"watch_path={self.watch_path!r})"
        )


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Calls :func:`dotenv.load_dotenv` so a ``.env`` file in the project root
    is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If any required environment variable is missing,
            empty, or whitespace-only (the message names **all** missing
            variables), or if ``PORT`` / ``WATCH_PATH`` are malformed.
    """
    load_dotenv()

    required = {
        "GOOGLE_CLIENT_ID": "google_client_id",
        "GOOGLE_CLIENT_SECRET": "google_client_secret",
        "GOOGLE_REFRESH_TOKEN": "google_refresh_token",
        "CALENDAR_ID": "calendar_id",
        "GOOGLE_CLOUD_PROJECT": "gcp_project",
        "DISCORD_WEBHOOK_URL": "webhook_url",
    }

    values: dict[str, str | int] = {}
    missing: list[str] = []

    for env_var, field_name in required.items():
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            missing.append(env_var)
        else:
            values[field_name] = raw.strip()

    if missing:
        names = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {names}")

    # Optional settings with defaults handled by the dataclass.
    database = os.environ.get("GOOGLE_CLOUD_DATABASE", "").strip()
    log_level = os.environ.get("LOG_LEVEL", "").strip()
    port = os.environ.get("PORT", "").strip()
    watch_path = os.environ.get("WATCH_PATH", "").strip()

    if database:
        values["firestore_database"] = database
    if log_level:
        values["log_level"] = log_level
    if port:
        values["port"] = _parse_port(port)
    if watch_path:
        if not watch_path.startswith("/"):
            raise ConfigError(f"WATCH_PATH must start with '/': {watch_path!r}")
        values["watch_path"] = watch_path

    return Settings(**values)  # type: ignore[arg-type]


def _parse_port(raw: str) -> int:
    """Parse and range-check the ``PORT`` value."""
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"PORT must be an integer: {raw!r}") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"PORT out of range (1-65535): {port}")
    return port
