"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from blackroc.config import BaseConfig
from blackroc.logging_config import JSONFormatter, get_logger, setup_logging
from blackroc.services.notifications import NotificationKind, NotificationQueue


def _record(level=logging.INFO, msg="Test message", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(logging.ERROR, "Error occurred", exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_keeps_extra_fields():
    record = _record()
    record.identity_id = "user-1"
    record.failed_reads = ["total_orders"]

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"identity_id": "user-1", "failed_reads": ["total_orders"]}


def test_setup_logging(tmp_path):
    """Logging setup creates a rotating JSON log under the data directory."""
    config = BaseConfig()
    config.DATA_DIR = tmp_path
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "blackroc"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "blackroc.log"
    assert log_file.exists()

    NotificationQueue().notify(NotificationKind.ERROR, "Error loading dashboard data", "Please retry.")
    for handler in logger.handlers:
        handler.flush()

    entries = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert entries[0]["message"] == "Logging initialized"
    warning = entries[-1]
    assert warning["level"] == "WARNING"
    assert warning["logger"] == "blackroc.services.notifications"
    assert warning["extra"]["kind"] == "error"


def test_setup_logging_twice_does_not_duplicate_handlers(tmp_path):
    config = BaseConfig()
    config.DATA_DIR = tmp_path

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    assert get_logger("module1").name == "blackroc.module1"
    assert get_logger("blackroc.services.auth").name == "blackroc.services.auth"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config = BaseConfig()
    config.DATA_DIR = tmp_path
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    assert console_handler.level == (logging.INFO if dev_mode else logging.WARNING)
