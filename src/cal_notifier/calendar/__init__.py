"""Google Calendar integration for calendar-notifier."""

from __future__ import annotations

from cal_notifier.calendar.auth import get_calendar_credentials
from cal_notifier.calendar.client import GoogleCalendarClient
from cal_notifier.calendar.store import CursorStore, FirestoreCursorStore
from cal_notifier.calendar.sync import SyncEngine

__all__ = [
    "CursorStore",
    "FirestoreCursorStore",
    "GoogleCalendarClient",
    "SyncEngine",
    "get_calendar_credentials",
]
