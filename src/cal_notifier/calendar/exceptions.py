"""Custom exceptions for Google Calendar API operations.

Defines a hierarchy of calendar-specific exceptions and the mapping from
``googleapiclient`` HTTP errors onto it.  Nothing here retries: failures
are surfaced to the sync engine, which only recovers from an expired
sync token.

Exception hierarchy::

    CalendarAPIError                (base for all Calendar API errors)
    +-- CalendarAuthError           (authentication / 401 failures)
    +-- CalendarNotFoundError       (HTTP 404)
    +-- CalendarRateLimitError      (HTTP 429 rate-limit responses)
    +-- CalendarSyncTokenExpiredError (HTTP 410, sync token no longer valid)
"""

from __future__ import annotations

from googleapiclient.errors import HttpError


class CalendarAPIError(Exception):
    """Base exception for Google Calendar API errors.

    Attributes:
        status_code: HTTP status code from the API, or ``None`` if the
            error did not originate from an HTTP response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CalendarAuthError(CalendarAPIError):
    """Raised when Calendar API authentication fails.

    Covers HTTP 401 responses and refresh-token exchange failures.
    """

    def __init__(self, message: str = "Calendar authentication failed") -> None:
        super().__init__(message, status_code=401)


class CalendarNotFoundError(CalendarAPIError):
    """Raised when a Calendar resource is not found (HTTP 404)."""

    def __init__(self, message: str = "Calendar resource not found") -> None:
        super().__init__(message, status_code=404)


class CalendarRateLimitError(CalendarAPIError):
    """Raised when the Calendar API returns HTTP 429 (rate limit exceeded)."""

    def __init__(self, message: str = "Calendar API rate limit exceeded") -> None:
        super().__init__(message, status_code=429)


class CalendarSyncTokenExpiredError(CalendarAPIError):
    """Raised when the API rejects a sync token with HTTP 410 Gone.

    Google invalidates sync tokens after some time or after ACL changes;
    the only recovery is to drop the token and run a full sync.
    """

    def __init__(self, message: str = "Calendar sync token is no longer valid") -> None:
        super().__init__(message, status_code=410)


def classify_http_error(error: HttpError) -> CalendarAPIError:
    """Map an ``HttpError`` to the appropriate calendar exception.

    Args:
        error: The ``googleapiclient.errors.HttpError`` to classify.

    Returns:
        A :class:`CalendarAPIError` subclass matching the HTTP status code.
    """
    status = error.resp.status

    if status == 410:
        return CalendarSyncTokenExpiredError(str(error))
    if status == 404:
        return CalendarNotFoundError(str(error))
    if status == 429:
        return CalendarRateLimitError(str(error))
    if status == 401:
        return CalendarAuthError(str(error))
    return CalendarAPIError(str(error), status_code=status)
