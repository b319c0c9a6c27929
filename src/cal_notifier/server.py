"""HTTP endpoint receiving Google Calendar push notifications.

Google calls the registered channel address with an empty POST whose
headers describe the change.  ``X-Goog-Resource-State: sync`` is the
handshake sent once when a channel is created; ``exists`` means something
in the calendar changed.  Only the latter triggers a sync run.

Sync runs are serialized with a single-flight lock so overlapping pushes
cannot race on the stored cursor.  A failed run is logged and answered
with HTTP 500; the server keeps serving.
"""

from __future__ import annotations

import logging
import threading

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse

from cal_notifier.calendar.exceptions import CalendarAPIError
from cal_notifier.calendar.sync import SyncEngine
from cal_notifier.exceptions import NotifierError
from cal_notifier.notify import Dispatcher
from cal_notifier.pipeline import run_sync

logger = logging.getLogger(__name__)

RESOURCE_STATE_EXISTS = "exists"
DEFAULT_WATCH_PATH = "/watch/v2"


def create_app(
    engine: SyncEngine,
    dispatcher: Dispatcher,
    watch_path: str = DEFAULT_WATCH_PATH,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        engine: Sync engine run on every ``exists`` notification.
        dispatcher: Where confirmed events are delivered.
        watch_path: Route Google posts notifications to.

    Returns:
        The configured :class:`FastAPI` app.
    """
    app = FastAPI(title="calendar-notifier", docs_url=None, redoc_url=None)
    sync_lock = threading.Lock()
    app.state.sync_lock = sync_lock

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    # Sync handler: FastAPI runs it in its thread pool, so blocking on the
    # lock and on the Calendar API does not stall the event loop.
    def receive_push(
        x_goog_resource_state: str | None = Header(default=None),
        x_goog_channel_id: str | None = Header(default=None),
        x_goog_resource_id: str | None = Header(default=None),
        x_goog_message_number: str | None = Header(default=None),
    ) -> JSONResponse:
        logger.debug(
            "Push received (state=%s, channel=%s, resource=%s, message=%s)",
            x_goog_resource_state,
            x_goog_channel_id,
            x_goog_resource_id,
            x_goog_message_number,
        )

        if x_goog_resource_state != RESOURCE_STATE_EXISTS:
            logger.info("Ignoring push with resource state %r", x_goog_resource_state)
            return JSONResponse({"status": "ignored"})

        with sync_lock:
            try:
                result = run_sync(engine, dispatcher)
            except (NotifierError, CalendarAPIError) as exc:
                logger.exception("Sync run failed")
                return JSONResponse(
                    status_code=500,
                    content={
                        "status": "error",
                        "detail": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )

        return JSONResponse(
            {"status": "ok", "events": result.fetched, "notified": result.notified}
        )

    app.add_api_route(watch_path, receive_push, methods=["POST"])
    logger.info("Push endpoint mounted at POST %s", watch_path)
    return app
