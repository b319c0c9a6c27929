"""Tests for calendar-notifier logging setup."""

from __future__ import annotations

import logging
import re

import pytest

from cal_notifier.log import setup_logging

_LINE = r"^\d{{4}}-\d{{2}}-\d{{2}}T\d{{2}}:\d{{2}}:\d{{2}} \| {level}\s+\| {name} \| {message}$"


def _last_line(capsys: pytest.CaptureFixture[str]) -> str:
    return capsys.readouterr().err.strip().splitlines()[-1]


class TestSetupLogging:
    """Root logger level and handler."""

    def test_setup_logging_sets_level(self) -> None:
        """setup_logging('DEBUG') must set root logger to DEBUG."""
        setup_logging("DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_default_level_is_info(self) -> None:
        setup_logging()

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_accepts_lowercase(self) -> None:
        """Level names are case-insensitive."""
        setup_logging("warning")

        assert logging.getLogger().level == logging.WARNING

    def test_setup_logging_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("INVALID")

    def test_repeated_calls_reuse_handler(self) -> None:
        """A second call updates the level instead of adding a handler."""
        setup_logging()
        handlers_after_first = list(logging.getLogger().handlers)

        setup_logging("DEBUG")

        assert logging.getLogger().handlers == handlers_after_first
        assert handlers_after_first[-1].level == logging.DEBUG

    def test_log_format_is_pipe_separated(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Emitted records follow 'timestamp | LEVEL | name | message'."""
        setup_logging("INFO")

        logging.getLogger("cal_notifier.test").info("hello")

        assert re.match(
            _LINE.format(level="INFO", name=r"cal_notifier\.test", message="hello"),
            _last_line(capsys),
        )


class TestUvicornLoggers:
    """uvicorn output shares the project handler."""

    def test_uvicorn_loggers_propagate_to_root(self) -> None:
        access = logging.getLogger("uvicorn.access")
        access.addHandler(logging.NullHandler())
        access.propagate = False

        setup_logging()

        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            uvicorn_logger = logging.getLogger(name)
            assert uvicorn_logger.handlers == []
            assert uvicorn_logger.propagate is True

    def test_access_log_uses_project_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging("INFO")

        logging.getLogger("uvicorn.access").info('1.2.3.4 - "POST /watch/v2 HTTP/1.1" 200')

        assert re.match(
            _LINE.format(level="INFO", name=r"uvicorn\.access", message=".*POST /watch/v2.*"),
            _last_line(capsys),
        )


class TestQuietLoggers:
    """HTTP client request logs never reach the output."""

    def test_httpx_request_log_suppressed_even_at_debug(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        setup_logging("DEBUG")

        logging.getLogger("httpx").info(
            "HTTP Request: POST https://discord.example.com/api/webhooks/1/abc"
        )

        assert "api/webhooks" not in capsys.readouterr().err

    def test_httpx_warnings_still_emitted(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging()

        logging.getLogger("httpx").warning("connection pool full")

        assert "connection pool full" in capsys.readouterr().err
