# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py: logger factory and formatters."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from endecode.logging.context import clear_context, set_batch_context, set_copy_context
from endecode.logging.logger import (
    ROOT_LOGGER,
    ContextFilter,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "Hello", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="endecode.test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )
    ContextFilter().filter(record)
    return record


@pytest.fixture
def root_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    saved = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert parsed["logger"] == "endecode.test"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_batch_context("b1")
        set_copy_context("005", "encode")
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {
            "batch_id": "b1", "order_number": "005", "step": "encode",
        }

    def test_format_exception(self):
        try:
            raise OSError("disk full")
        except OSError:
            record = _record(exc_info=sys.exc_info())
        parsed = json.loads(JsonFormatter().format(record))
        assert "disk full" in parsed["exception"]


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "[INFO    ]" in output
        assert output.endswith("- Hello text")

    def test_format_with_copy_context(self):
        set_copy_context("007", "swap")
        output = TextFormatter().format(_record())
        assert "[007]" in output
        assert "(swap)" in output


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger("batch").name == "endecode.batch"


class TestSetupLogging:
    def test_console_only(self, root_logger):
        assert setup_logging(level="DEBUG") is root_logger
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, TextFormatter)

    def test_json_and_file(self, root_logger, tmp_path: Path):
        log_file = tmp_path / "logs" / "endecode.log"
        setup_logging(level="INFO", log_format="json", log_file=str(log_file))
        assert len(root_logger.handlers) == 2
        file_handler = root_logger.handlers[1]
        assert isinstance(file_handler, RotatingFileHandler)
        assert isinstance(file_handler.formatter, JsonFormatter)

        get_logger("test").info("to file")
        file_handler.flush()
        assert json.loads(log_file.read_text().splitlines()[-1])["message"] == "to file"

    def test_reinit_does_not_duplicate(self, root_logger):
        setup_logging()
        setup_logging()
        assert len(root_logger.handlers) == 1


class TestContextFilter:
    def setup_method(self):
        clear_context()

    def test_attaches_fields(self):
        set_batch_context("b9")
        record = _record()
        assert record.batch_id == "b9"
        assert record.order_number is None

    def test_formatters_tolerate_unfiltered_records(self):
        record = logging.LogRecord(
            name="x", level=logging.WARNING, pathname="", lineno=0,
            msg="plain", args=(), exc_info=None,
        )
        assert TextFormatter().format(record).endswith("- plain")
        assert "context" not in json.loads(JsonFormatter().format(record))

    def test_quiets_pillow(self, root_logger):
        setup_logging(level="DEBUG")
        assert logging.getLogger("PIL").level == logging.WARNING
