"""Entry point for ``python -m cal_notifier``.

Subcommands:
    serve -- Run the push-notification HTTP server.
    watch -- Register a Google Calendar push channel pointing at the server.

Exit codes:
    0 -- Command completed successfully.
    1 -- An error occurred (configuration, authentication, API failure).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid

import uvicorn
from google.auth.exceptions import GoogleAuthError

from cal_notifier.calendar.exceptions import CalendarAPIError
from cal_notifier.config import ConfigError, Settings, load_settings
from cal_notifier.log import setup_logging
from cal_notifier.pipeline import build_calendar_client, build_dispatcher, build_sync_engine
from cal_notifier.server import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cal-notifier",
        description="Forward new Google Calendar events to a chat webhook.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging (overrides LOG_LEVEL).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "serve",
        help="Run the push-notification HTTP server.",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Register a push channel for the calendar's events.",
    )
    watch_parser.add_argument(
        "--address",
        required=True,
        help="Public HTTPS URL of the push endpoint, including WATCH_PATH.",
    )
    watch_parser.add_argument(
        "--ttl",
        type=int,
        default=None,
        help="Requested channel lifetime in seconds (Google's default if omitted).",
    )
    watch_parser.add_argument(
        "--channel-id",
        default=None,
        help="Channel ID to use (a random UUID if omitted).",
    )

    return parser


def _handle_serve(settings: Settings) -> int:
    """Start the HTTP server and block until it stops."""
    engine = build_sync_engine(settings)
    dispatcher = build_dispatcher(settings)
    app = create_app(engine, dispatcher, watch_path=settings.watch_path)

    logger.info("Listening on port %d", settings.port)
    try:
        uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)
    finally:
        dispatcher.close()
    return 0


def _handle_watch(settings: Settings, args: argparse.Namespace) -> int:
    """Register a push channel and print the API response."""
    channel_id = args.channel_id or str(uuid.uuid4())
    client = build_calendar_client(settings)
    channel = client.watch_events(channel_id, args.address, ttl_seconds=args.ttl)
    print(json.dumps(channel, indent=4))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the calendar-notifier CLI.

    Args:
        argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: ``0`` on success, ``1`` on error.
    """
    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        setup_logging("DEBUG" if args.verbose else settings.log_level)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command == "watch":
            return _handle_watch(settings, args)
        return _handle_serve(settings)
    except (CalendarAPIError, GoogleAuthError) as exc:
        logger.error("Startup failed: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
