"""Tests for feedwatch.core.logging."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest
from rich.console import Console
from rich.logging import RichHandler

from structlog.stdlib import ProcessorFormatter

from feedwatch.core.logging import configure_logging, json_formatter


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger("feedwatch")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_console_uses_rich(self) -> None:
        configure_logging("DEBUG", "console", console=Console(file=io.StringIO()))
        logger = logging.getLogger("feedwatch")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging("INFO", "console", console=Console(file=io.StringIO()))
        configure_logging("WARNING", "json")
        logger = logging.getLogger("feedwatch")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, ProcessorFormatter)

    def test_apscheduler_quieted(self) -> None:
        configure_logging("DEBUG", "json")
        assert logging.getLogger("apscheduler").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JSON log lines."""

    def test_fields(self) -> None:
        record = logging.LogRecord("feedwatch.core", logging.ERROR, __file__, 1, "feed '%s' failed", ("x",), None)
        payload = json.loads(json_formatter().format(record))
        assert payload["level"] == "error"
        assert payload["logger"] == "feedwatch.core"
        assert payload["event"] == "feed 'x' failed"
        assert "timestamp" in payload
        assert "_record" not in payload

    def test_exception_included(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord("feedwatch", logging.ERROR, __file__, 1, "oops", None, sys.exc_info())
        payload = json.loads(json_formatter().format(record))
        assert "ValueError: bad" in payload["exception"]

    def test_json_handler_writes_one_line(self, capsys) -> None:
        configure_logging("INFO", "json")
        logging.getLogger("feedwatch.core.feedwatch").info("check finished")
        lines = capsys.readouterr().err.strip().splitlines()
        assert json.loads(lines[-1])["event"] == "check finished"
