"""Data models for calendar-notifier."""

from __future__ import annotations

from cal_notifier.models.event import CONFIRMED, EventPage, EventRecord, EventStatus
from cal_notifier.models.sync import SyncRunResult

__all__ = [
    "CONFIRMED",
    "EventPage",
    "EventRecord",
    "EventStatus",
    "SyncRunResult",
]
