"""Data models for Google Calendar event deltas.

- :class:`EventRecord` -- a single event as reported in a sync delta,
  validated with Pydantic from the raw API resource dict.
- :class:`EventPage` -- one page of an ``events.list`` response.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

EventStatus = Literal["confirmed", "cancelled", "tentative"]

CONFIRMED: EventStatus = "confirmed"


class EventRecord(BaseModel):
    """A calendar event as returned in an incremental sync delta.

    Read-only from this service's point of view and never persisted.
    Deltas for deleted events usually carry nothing but ``id`` and
    ``status``, so every descriptive field defaults to an empty string.

    Attributes:
        id: Google Calendar event ID.
        status: ``"confirmed"``, ``"cancelled"`` or ``"tentative"``.
        summary: Event title.
        start: Start as shown to users -- ``dateTime`` for timed events,
            ``date`` for all-day events.
        end: End, same format as *start*.
        location: Free-text location.
        description: Free-text description.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    status: EventStatus
    summary: str = ""
    start: str = ""
    end: str = ""
    location: str = ""
    description: str = ""

    @classmethod
    def from_api(cls, resource: dict[str, Any]) -> EventRecord:
        """Build an :class:`EventRecord` from a Google Calendar event resource.

        Args:
            resource: An event resource dict from ``events.list``.

        Returns:
            The validated record.

        Raises:
            pydantic.ValidationError: If ``id`` is missing or ``status``
                is not one of the known values.
        """
        return cls(
            id=resource.get("id", ""),
            status=resource.get("status", ""),
            summary=resource.get("summary") or "",
            start=_display_time(resource.get("start")),
            end=_display_time(resource.get("end")),
            location=resource.get("location") or "",
            description=resource.get("description") or "",
        )

    @property
    def is_confirmed(self) -> bool:
        """Whether the event is a confirmed, actionable calendar entry."""
        return self.status == CONFIRMED


def _display_time(value: dict[str, Any] | None) -> str:
    """Pick ``dateTime`` (timed) or ``date`` (all-day) from a start/end object."""
    if not value:
        return ""
    return value.get("dateTime") or value.get("date") or ""


@dataclass(frozen=True)
class EventPage:
    """One page of an ``events.list`` response.

    Attributes:
        items: Events on this page, in provider order.
        next_page_token: Token for the following page, or ``None`` on the
            last page.
        next_sync_token: Fresh sync token; only present on the last page.
    """

    items: list[EventRecord] = field(default_factory=list)
    next_page_token: str | None = None
    next_sync_token: str | None = None

    @property
    def is_last(self) -> bool:
        """Whether this is the final page of the current traversal."""
        return not self.next_page_token
