"""calendar-notifier: Google Calendar push-to-chat bridge.

Receives Google Calendar push notifications, fetches the incremental
event delta with a persisted sync token, and posts newly confirmed events
to a chat webhook.
"""

from __future__ import annotations

from cal_notifier.config import ConfigError, Settings, load_settings
from cal_notifier.exceptions import (
    CursorPersistError,
    CursorStoreError,
    DispatchError,
    NotifierError,
    SyncTokenInvalidError,
)
from cal_notifier.models.event import EventPage, EventRecord
from cal_notifier.models.sync import SyncRunResult

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "CursorPersistError",
    "CursorStoreError",
    "DispatchError",
    "EventPage",
    "EventRecord",
    "NotifierError",
    "Settings",
    "SyncRunResult",
    "SyncTokenInvalidError",
    "load_settings",
]
