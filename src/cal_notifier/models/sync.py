"""Data models for sync-and-notify run results.

Defines the structured output of :func:`cal_notifier.pipeline.run_sync`:

- :class:`SyncRunResult` -- what one push-triggered run fetched and sent.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SyncRunResult:
    """Aggregated result of one push-triggered sync run.

    Attributes:
        fetched: Number of events in the delta, any status.
        confirmed: Number of confirmed events among them.
        notified: Number of notifications delivered.
        full_resync: Whether the run started without a stored cursor.
    """

    fetched: int = 0
    confirmed: int = 0
    notified: int = 0
    full_resync: bool = False

    @property
    def dropped(self) -> int:
        """Events filtered out because they were not confirmed."""
        return self.fetched - self.confirmed
