"""Refresh-token authentication for the Google Calendar API.

The service runs unattended, so there is no browser flow: the calendar
owner's long-lived refresh token is exchanged for a short-lived access
token at Google's token endpoint.  The resulting
:class:`~google.oauth2.credentials.Credentials` keep the refresh token, so
google-auth refreshes them again on its own whenever the access token
expires.

Usage::

    from cal_notifier.calendar.auth import get_calendar_credentials

    creds = get_calendar_credentials(settings)
"""

from __future__ import annotations

import logging

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from cal_notifier.calendar.exceptions import CalendarAuthError
from cal_notifier.config import Settings

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
"""Google OAuth 2.0 token endpoint used for the refresh-token grant."""


def get_calendar_credentials(settings: Settings) -> Credentials:
    """Exchange the configured refresh token for valid credentials.

    The exchange is performed eagerly so that a revoked or mistyped
    refresh token fails at startup instead of on the first push.

    Args:
        settings: Application settings holding the OAuth client ID,
            client secret and refresh token.

    Returns:
        Refreshed :class:`Credentials` carrying a bearer access token.

    Raises:
        CalendarAuthError: If the token endpoint rejects the exchange or
            cannot be reached.
    """
    creds = Credentials(
        token=None,
        refresh_token=settings.google_refresh_token,
        token_uri=TOKEN_URI,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
    )

    try:
        creds.refresh(Request())
    except RefreshError as exc:
        logger.error("Refresh-token exchange rejected: %s", exc)
        raise CalendarAuthError(f"Refresh-token exchange failed: {exc}") from exc
    except TransportError as exc:
        logger.error("Token endpoint unreachable: %s", exc)
        raise CalendarAuthError(f"Token endpoint unreachable: {exc}") from exc

    logger.info("Access token obtained (expires %s)", creds.expiry)
    return creds
