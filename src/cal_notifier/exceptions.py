"""Custom exceptions for the calendar-notifier sync run.

Exception hierarchy::

    NotifierError              (base for all sync-run failures)
    +-- CursorStoreError       (cursor read/write/clear failed)
    |   +-- CursorPersistError (cursor save after a complete traversal failed)
    +-- SyncTokenInvalidError  (cursor rejected again after a full resync)
    +-- DispatchError          (chat webhook delivery failed)

Google Calendar API failures live in :mod:`cal_notifier.calendar.exceptions`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cal_notifier.models.event import EventRecord


class NotifierError(Exception):
    """Base exception for failures inside a single sync run."""


class CursorStoreError(NotifierError):
    """Raised when the cursor store cannot be read, written or cleared.

    A missing cursor is *not* an error; stores report it by returning
    ``None`` from ``get()``.
    """


class CursorPersistError(CursorStoreError):
    """Raised when the new cursor could not be saved after the last page.

    The delta was fetched in full, so the events are attached for callers
    that want them.  The stored cursor is unchanged, which means the next
    trigger re-delivers the same delta.

    Attributes:
        events: Every event fetched during the failed run.
    """

    def __init__(self, message: str, events: list[EventRecord] | None = None) -> None:
        super().__init__(message)
        self.events = list(events or [])


class SyncTokenInvalidError(NotifierError):
    """Raised when the provider rejects the cursor during a full resync too."""


class DispatchError(NotifierError):
    """Raised when a notification could not be delivered to the chat webhook.

    Attributes:
        status_code: HTTP status returned by the webhook, or ``None`` for
            transport-level failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
