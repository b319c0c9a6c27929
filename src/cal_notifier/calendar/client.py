"""Google Calendar client for incremental event listing and push channels.

Provides :class:`GoogleCalendarClient`, a thin wrapper around the
``googleapiclient`` service resource scoped to the one watched calendar:

- **List** -- fetch a single page of event deltas, driven by a page token
  and/or a sync token.
- **Watch** -- register a ``web_hook`` push channel for the calendar's
  events so Google notifies the HTTP endpoint on every change.

HTTP, token-refresh and network errors are translated into the
:mod:`~cal_notifier.calendar.exceptions` hierarchy; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any

from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from httplib2 import HttpLib2Error
from pydantic import ValidationError

from cal_notifier.calendar.exceptions import (
    CalendarAPIError,
    CalendarAuthError,
    classify_http_error,
)
from cal_notifier.models.event import EventPage, EventRecord

logger = logging.getLogger(__name__)

# Fixed list parameters: expand recurring events into instances, skip
# working-location / focus-time / out-of-office entries.
PAGE_SIZE = 10
_EVENT_TYPES = "default"


class GoogleCalendarClient:
    """Client for the incremental-sync and watch endpoints of one calendar.

    Args:
        credentials: Google OAuth 2.0 credentials (refreshable).
        calendar_id: ID of the watched calendar.
        service: Optional pre-built ``googleapiclient`` service resource.
            If ``None``, one is built from *credentials*.  Pass a mock here
            in tests.
    """

    def __init__(
        self,
        credentials: Credentials | None,
        calendar_id: str,
        service: Any | None = None,
    ) -> None:
        self._calendar_id = calendar_id
        self._service = service or build(
            "calendar", "v3", credentials=credentials, cache_discovery=False
        )

    @property
    def calendar_id(self) -> str:
        """ID of the calendar this client is bound to."""
        return self._calendar_id

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def list_events_page(
        self,
        page_token: str | None = None,
        sync_token: str | None = None,
    ) -> EventPage:
        """Fetch one page of events.

        With a *sync_token* the API returns only entries changed since that
        token was issued, including cancelled ones.  Without one it returns
        every event (a full sync).  The last page of a traversal carries a
        fresh ``nextSyncToken`` instead of a ``nextPageToken``.

        Args:
            page_token: Token of the page to fetch within the current
                traversal, or ``None`` for the first page.
            sync_token: Sync token from a previous traversal, or ``None``.

        Returns:
            The parsed :class:`EventPage`.

        Raises:
            CalendarSyncTokenExpiredError: If Google answers 410 Gone for
                *sync_token*.
            CalendarAuthError: If the access token cannot be refreshed.
            CalendarAPIError: For any other API or network failure, or if an
                event resource in the response cannot be parsed.
        """
        params: dict[str, Any] = {
            "calendarId": self._calendar_id,
            "singleEvents": True,
            "eventTypes": _EVENT_TYPES,
            "maxResults": PAGE_SIZE,
        }
        if page_token:
            params["pageToken"] = page_token
        if sync_token:
            params["syncToken"] = sync_token

        response = _execute(self._service.events().list(**params))

        try:
            items = [EventRecord.from_api(item) for item in response.get("items", [])]
        except ValidationError as exc:
            logger.error("Unparseable event in list response: %s", exc)
            raise CalendarAPIError(f"Malformed event resource: {exc}") from exc

        page = EventPage(
            items=items,
            next_page_token=response.get("nextPageToken") or None,
            next_sync_token=response.get("nextSyncToken"),
        )
        logger.debug(
            "Fetched page with %d event(s) (last=%s)", len(items), page.is_last
        )
        return page

    # ------------------------------------------------------------------
    # Watch
    # ------------------------------------------------------------------

    def watch_events(
        self,
        channel_id: str,
        address: str,
        ttl_seconds: int | None = None,
    ) -> dict:
        """Register a push-notification channel for the calendar's events.

        Args:
            channel_id: Unique ID for the new channel (a UUID).
            address: HTTPS URL of the push endpoint.
            ttl_seconds: Requested channel lifetime; Google applies its own
                default and maximum when omitted.

        Returns:
            The channel resource returned by the API (``id``,
            ``resourceId``, ``expiration``...).

        Raises:
            CalendarAPIError: If the API rejects the request or cannot be
                reached.
        """
        body: dict[str, Any] = {
            "id": channel_id,
            "type": "web_hook",
            "address": address,
        }
        if ttl_seconds is not None:
            body["params"] = {"ttl": str(ttl_seconds)}

        result = _execute(
            self._service.events().watch(calendarId=self._calendar_id, body=body)
        )

        logger.info(
            "Registered watch channel %s -> %s (resource=%s, expiration=%s)",
            channel_id,
            address,
            result.get("resourceId", "?"),
            result.get("expiration", "?"),
        )
        return result


def _execute(request: Any) -> dict:
    """Execute a ``googleapiclient`` request, mapping failures to calendar errors.

    Raises:
        CalendarAuthError: If google-auth cannot refresh the access token
            (revoked or expired refresh token).
        CalendarAPIError: For HTTP errors (via :func:`classify_http_error`)
            and for network failures talking to Google.
    """
    try:
        return request.execute()
    except HttpError as exc:
        raise classify_http_error(exc) from exc
    except RefreshError as exc:
        logger.error("Access token refresh rejected: %s", exc)
        raise CalendarAuthError(f"Access token refresh failed: {exc}") from exc
    except (TransportError, HttpLib2Error, OSError, TimeoutError) as exc:
        logger.error("Network error calling Calendar API: %s", exc)
        raise CalendarAPIError(f"Network error: {exc}") from exc
