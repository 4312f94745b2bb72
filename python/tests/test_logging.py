"""Tests for structlog configuration."""

import logging

import structlog

from corsgate.logging import configure_logging, get_logger


class TestConfigureLogging:
    """configure_logging routes stdlib logging through one structlog handler."""

    def test_single_root_handler_with_processor_formatter(self):
        configure_logging(json_format=False)
        root_logger = logging.getLogger()

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_level_applied(self):
        configure_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG

    def test_uvicorn_access_silenced(self):
        configure_logging()
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_get_logger_returns_structlog_logger(self):
        logger = get_logger("corsgate.test")
        assert hasattr(logger, "info")
