"""Incremental sync engine for the watched calendar.

Provides :class:`SyncEngine`, which turns a push notification into the
exact set of events that changed since the last successful run:

1. Load the stored sync cursor (``None`` means "full sync").
2. Page through ``events.list`` -- the cursor goes on the first request
   only; later pages are addressed by page token alone.
3. After the last page, save the fresh cursor from that page.  The cursor
   is never written mid-traversal, so a crash or error leaves the previous
   cursor in place and the next run re-fetches the same delta.
4. If Google rejects the cursor (410 Gone), clear it and restart once as a
   full sync.  A second rejection is fatal.

Delivery is therefore at-least-once: a failed save re-delivers the delta
on the next trigger.
"""

from __future__ import annotations

import logging
from typing import Protocol

from cal_notifier.calendar.exceptions import CalendarSyncTokenExpiredError
from cal_notifier.calendar.store import CursorStore
from cal_notifier.exceptions import (
    CursorPersistError,
    CursorStoreError,
    SyncTokenInvalidError,
)
from cal_notifier.models.event import EventPage, EventRecord

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """Paginated event listing, as offered by :class:`GoogleCalendarClient`."""

    def list_events_page(
        self,
        page_token: str | None = None,
        sync_token: str | None = None,
    ) -> EventPage: ...


class SyncEngine:
    """Fetches calendar deltas and advances the stored cursor.

    Args:
        source: Where event pages come from.
        store: Where the sync cursor lives between runs.
    """

    def __init__(self, source: EventSource, store: CursorStore) -> None:
        self._source = source
        self._store = store
        self.last_run_was_full_resync = False

    def fetch_delta(self) -> list[EventRecord]:
        """Return every event changed since the last successful run.

        Returns:
            Events of any status, in provider order.

        Raises:
            CursorStoreError: If the stored cursor cannot be read or cleared.
            CursorPersistError: If the delta was fetched but the new cursor
                could not be saved.  The events are on ``exc.events``.
            SyncTokenInvalidError: If the cursor is rejected again after
                clearing it for a full sync.
            CalendarAPIError: For any other Calendar API failure.
        """
        # An empty stored cursor behaves like a missing one.
        cursor = self._store.get() or None
        self.last_run_was_full_resync = cursor is None
        if cursor is None:
            logger.info("No stored cursor, performing full sync")

        try:
            return self._traverse(cursor)
        except CalendarSyncTokenExpiredError as exc:
            if cursor is None:
                raise SyncTokenInvalidError(
                    f"Sync rejected without a cursor: {exc}"
                ) from exc
            logger.warning("Stored cursor rejected (%s); clearing for full sync", exc)

        self._store.clear()
        self.last_run_was_full_resync = True

        try:
            return self._traverse(None)
        except CalendarSyncTokenExpiredError as exc:
            logger.error("Full sync rejected after cursor reset: %s", exc)
            raise SyncTokenInvalidError(
                f"Sync token rejected again after full resync: {exc}"
            ) from exc

    def _traverse(self, cursor: str | None) -> list[EventRecord]:
        """Walk all pages of one traversal and persist the resulting cursor."""
        events: list[EventRecord] = []
        page_token: str | None = None
        pages = 0

        while True:
            page = self._source.list_events_page(
                page_token=page_token,
                sync_token=cursor if page_token is None else None,
            )
            pages += 1
            events.extend(page.items)

            if page.is_last:
                break
            page_token = page.next_page_token

        try:
            self._store.save(page.next_sync_token or "")
        except CursorStoreError as exc:
            raise CursorPersistError(
                f"Fetched {len(events)} event(s) but failed to save cursor: {exc}",
                events=events,
            ) from exc

        logger.info("Fetched %d event(s) across %d page(s)", len(events), pages)
        return events
