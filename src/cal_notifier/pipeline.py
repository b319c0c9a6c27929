"""Sync-and-notify orchestration.

Wires the components together: credentials, calendar client, cursor store,
sync engine and webhook dispatcher.  :func:`run_sync` is what one push
notification triggers; :func:`build_sync_engine` and
:func:`build_dispatcher` construct the production collaborators from
:class:`~cal_notifier.config.Settings`.
"""

from __future__ import annotations

import logging
import time

from cal_notifier.calendar.auth import get_calendar_credentials
from cal_notifier.calendar.client import GoogleCalendarClient
from cal_notifier.calendar.store import FirestoreCursorStore
from cal_notifier.calendar.sync import SyncEngine
from cal_notifier.config import Settings
from cal_notifier.models.sync import SyncRunResult
from cal_notifier.notify import Dispatcher, WebhookDispatcher, filter_confirmed, notify_confirmed

logger = logging.getLogger(__name__)


def build_calendar_client(settings: Settings) -> GoogleCalendarClient:
    """Authenticate with the refresh token and bind a client to the calendar."""
    credentials = get_calendar_credentials(settings)
    return GoogleCalendarClient(credentials, settings.calendar_id)


def build_sync_engine(settings: Settings) -> SyncEngine:
    """Create the production :class:`SyncEngine` (Calendar API + Firestore)."""
    return SyncEngine(
        source=build_calendar_client(settings),
        store=FirestoreCursorStore.from_settings(settings),
    )


def build_dispatcher(settings: Settings) -> WebhookDispatcher:
    """Create the production webhook dispatcher."""
    return WebhookDispatcher(settings.webhook_url)


def run_sync(engine: SyncEngine, dispatcher: Dispatcher) -> SyncRunResult:
    """Fetch the calendar delta and notify every confirmed event.

    Args:
        engine: The sync engine holding the event source and cursor store.
        dispatcher: Where notifications are delivered.

    Returns:
        A :class:`SyncRunResult` describing the run.

    Raises:
        NotifierError: For cursor, resync and delivery failures.
        CalendarAPIError: For Calendar API failures.
    """
    start = time.monotonic()

    events = engine.fetch_delta()
    confirmed = filter_confirmed(events)

    result = SyncRunResult(
        fetched=len(events),
        confirmed=len(confirmed),
        full_resync=engine.last_run_was_full_resync,
    )
    result.notified = notify_confirmed(confirmed, dispatcher)

    logger.info(
        "Sync run complete: %d fetched, %d confirmed, %d dropped, %d notified%s "
        "(%.2fs)",
        result.fetched,
        result.confirmed,
        result.dropped,
        result.notified,
        ", full resync" if result.full_resync else "",
        time.monotonic() - start,
    )
    return result
