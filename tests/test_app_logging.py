"""Tests for logging configuration."""

import logging

from contribution_logger.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("contribution_logger")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_requests_are_logged(client, caplog) -> None:
    logger = logging.getLogger("contribution_logger")
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="contribution_logger.requests"):
            client.get("/health")
    finally:
        logger.propagate = False

    assert any("path=/health status=200" in message for message in caplog.messages)
