"""Tests for the application logger utility."""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import flowtask.utils.logger as logger_mod
from flowtask.utils.logger import get_logger


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    logger = get_logger()

    log_file = tmp_path / "flowtask.log"
    assert log_file.exists(), "Log file should be created on first use"
    assert isinstance(logger, logging.Logger)
    assert logger.name == "flowtask"


def test_get_logger_returns_singleton():
    """Repeated calls return the same logger instance."""
    assert get_logger() is get_logger()


def test_get_logger_writes_message(tmp_path):
    """Messages written to the logger appear in the log file."""
    logger = get_logger()
    logger.info("hello from test")

    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / "flowtask.log").read_text()
    assert "hello from test" in content


def test_module_loggers_share_the_file(tmp_path):
    """Child loggers (logging.getLogger(__name__)) write to the same file."""
    logger = get_logger()
    logging.getLogger("flowtask.utils.recurrence_parser").debug("child message")

    for handler in logger.handlers:
        handler.flush()

    assert "child message" in (tmp_path / "flowtask.log").read_text()


def test_get_logger_creates_parent_dirs(tmp_path):
    """Logger creates nested directories if they do not exist."""
    logger_mod._logger = None
    logging.getLogger("flowtask").handlers.clear()
    nested = tmp_path / "a" / "b" / "c"
    with patch("flowtask.utils.logger.user_log_dir", return_value=str(nested)):
        get_logger()

    assert nested.is_dir()


def test_log_file_path(tmp_path):
    assert logger_mod.log_file_path() == tmp_path / "flowtask.log"


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("FLOWTASK_LOG_LEVEL", "warning")
    assert get_logger().level == logging.WARNING


def test_unknown_level_defaults_to_debug(monkeypatch):
    monkeypatch.setenv("FLOWTASK_LOG_LEVEL", "chatty")
    assert get_logger().level == logging.DEBUG


def test_file_handler_added_next_to_foreign_handlers(tmp_path):
    """A handler attached by someone else does not suppress the log file."""
    foreign = logging.NullHandler()
    logging.getLogger("flowtask").addHandler(foreign)

    logger = get_logger()
    logger.info("still written")
    for handler in logger.handlers:
        handler.flush()

    assert foreign in logger.handlers
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
    assert "still written" in (tmp_path / "flowtask.log").read_text()


def test_file_handler_not_duplicated():
    """Resetting the singleton does not stack a second file handler."""
    get_logger()
    logger_mod._logger = None
    logger = get_logger()

    file_handlers = [
        h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(file_handlers) == 1
