"""Chat-webhook notifications for newly confirmed calendar events.

- :class:`WebhookDispatcher` POSTs ``{"content": text}`` to a Discord-style
  webhook URL.
- :func:`filter_confirmed` keeps only confirmed events; cancelled and
  tentative entries are not actionable and are dropped.
- :func:`notify_confirmed` renders and sends confirmed events one by one,
  stopping at the first delivery failure.  Messages already sent are not
  rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

import httpx

from cal_notifier.exceptions import DispatchError
from cal_notifier.models.event import EventRecord

logger = logging.getLogger(__name__)

MESSAGE_TEMPLATE = (
    "The following event was added\n"
    "\n"
    "Event: {summary}\n"
    "Start: {start}\n"
    "End: {end}\n"
    "Location: {location}\n"
    "Description: {description}"
)

# Discord rejects messages whose content exceeds this many characters.
MAX_CONTENT_LENGTH = 2000
_TRUNCATION_MARK = "..."


class Dispatcher(Protocol):
    """Anything that can deliver one text message."""

    def send(self, text: str) -> None: ...


class WebhookDispatcher:
    """Posts messages to a chat webhook.

    Args:
        webhook_url: Target webhook URL.
        http_client: Optional ``httpx.Client``; one with default timeouts
            is created when omitted.  Pass a client with a mock transport
            in tests.
    """

    def __init__(self, webhook_url: str, http_client: httpx.Client | None = None) -> None:
        self._webhook_url = webhook_url
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client()

    def send(self, text: str) -> None:
        """POST *text* as ``{"content": text}``.

        Text longer than :data:`MAX_CONTENT_LENGTH` is cut to fit and ends
        with ``"..."``.

        Raises:
            DispatchError: On transport failure or a non-2xx response.
        """
        if len(text) > MAX_CONTENT_LENGTH:
            logger.warning(
                "Message of %d characters truncated to %d", len(text), MAX_CONTENT_LENGTH
            )
            text = text[: MAX_CONTENT_LENGTH - len(_TRUNCATION_MARK)] + _TRUNCATION_MARK

        try:
            response = self._client.post(self._webhook_url, json={"content": text})
        except httpx.HTTPError as exc:
            logger.error("Webhook request failed: %s", exc)
            raise DispatchError(f"Webhook request failed: {exc}") from exc

        if not response.is_success:
            logger.error(
                "Webhook rejected message (HTTP %d): %s",
                response.status_code,
                response.text[:200],
            )
            raise DispatchError(
                f"Webhook returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

    def close(self) -> None:
        """Close the underlying HTTP client if this dispatcher created it."""
        if self._owns_client:
            self._client.close()


def format_event_message(event: EventRecord) -> str:
    """Render the notification text for one event."""
    return MESSAGE_TEMPLATE.format(
        summary=event.summary,
        start=event.start,
        end=event.end,
        location=event.location,
        description=event.description,
    )


def filter_confirmed(events: Iterable[EventRecord]) -> list[EventRecord]:
    """Return the confirmed events, preserving provider order."""
    confirmed: list[EventRecord] = []
    for event in events:
        if event.is_confirmed:
            confirmed.append(event)
        else:
            logger.debug("Skipping %s event %s", event.status, event.id)
    return confirmed


def notify_confirmed(events: Iterable[EventRecord], dispatcher: Dispatcher) -> int:
    """Send one notification per confirmed event, in order.

    Args:
        events: The fetched delta, any status.
        dispatcher: Where messages are delivered.

    Returns:
        Number of notifications sent.

    Raises:
        DispatchError: From the first failed delivery; later events are
            not attempted.
    """
    sent = 0
    for event in filter_confirmed(events):
        message = format_event_message(event)
        logger.info("Notifying event '%s' (id=%s)", event.summary, event.id)
        try:
            dispatcher.send(message)
        except DispatchError:
            logger.error(
                "Delivery failed for event %s after %d notification(s); "
                "remaining events skipped",
                event.id,
                sent,
            )
            raise
        sent += 1
    return sent
