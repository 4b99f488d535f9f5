"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest

import cfgowatch.logging as cfg_logging
from cfgowatch.config.schema import LoggingConfig
from cfgowatch.logging import TRACE, VERBOSE, get_logger, resolve_level, setup_logging


@pytest.fixture
def fresh_logger(monkeypatch: pytest.MonkeyPatch):
    """Allow setup_logging to run again and restore handlers afterwards."""
    logger = cfg_logging.logger
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    monkeypatch.setattr(cfg_logging, "_initialized", False)
    yield logger
    for handler in logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


class TestResolveLevel:
    def test_default_is_info(self) -> None:
        assert resolve_level(None) == logging.INFO
        assert resolve_level(LoggingConfig()) == logging.INFO

    def test_verbose_takes_precedence(self) -> None:
        assert resolve_level(LoggingConfig(level="ERROR", verbose=3)) == VERBOSE

    def test_verbosity_bounds(self) -> None:
        assert resolve_level(LoggingConfig(verbose=0)) == logging.ERROR
        assert resolve_level(LoggingConfig(verbose=9)) == TRACE
        assert resolve_level(LoggingConfig(verbose=-1)) == logging.ERROR

    def test_level_names(self) -> None:
        assert resolve_level(LoggingConfig(level="warn")) == logging.WARNING
        assert resolve_level(LoggingConfig(level="bogus")) == logging.INFO


class TestSetupLogging:
    def test_file_logging(self, fresh_logger, tmp_path) -> None:
        log_file = tmp_path / "cfgowatch.log"
        setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))

        get_logger("registry").info("Watching module: /proj")
        for handler in fresh_logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "info: Watching module: /proj" in text

    def test_second_call_is_noop(self, fresh_logger, tmp_path) -> None:
        setup_logging(LoggingConfig(file=str(tmp_path / "a.log")))
        count = len(fresh_logger.handlers)
        setup_logging(LoggingConfig(file=str(tmp_path / "b.log")))
        assert len(fresh_logger.handlers) == count

    def test_child_logger_names(self) -> None:
        assert get_logger().name == "cfgowatch"
        assert get_logger("dispatcher").name == "cfgowatch.dispatcher"
