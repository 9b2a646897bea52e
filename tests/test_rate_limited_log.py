"""
Tests for the rate-limited logging helper.
"""
from unittest.mock import MagicMock

from smart_account_sdk._rate_limited_log import rate_limited_log, reset_rate_limits


def _logger(name="test"):
    logger = MagicMock()
    logger.name = name
    return logger


def test_repeated_message_is_suppressed():
    logger = _logger()

    assert rate_limited_log("Test message", level="warning", logger_instance=logger) is True
    assert rate_limited_log("Test message", level="warning", logger_instance=logger) is False
    logger.warning.assert_called_once_with("Test message")


def test_level_and_message_are_part_of_the_key():
    logger = _logger()

    rate_limited_log("Test message", level="warning", logger_instance=logger)
    assert rate_limited_log("Test message", level="error", logger_instance=logger) is True
    assert rate_limited_log("Other message", level="warning", logger_instance=logger) is True

    logger.error.assert_called_once_with("Test message")
    assert logger.warning.call_count == 2


def test_loggers_are_throttled_separately():
    first, second = _logger("first"), _logger("second")

    rate_limited_log("Test message", logger_instance=first)
    rate_limited_log("Test message", logger_instance=second)

    first.warning.assert_called_once()
    second.warning.assert_called_once()


def test_reset():
    logger = _logger()

    rate_limited_log("Test message", logger_instance=logger)
    reset_rate_limits()
    rate_limited_log("Test message", logger_instance=logger)

    assert logger.warning.call_count == 2


def test_unknown_level_falls_back_to_warning():
    logger = MagicMock(spec=["name", "warning"])
    logger.name = "test"

    rate_limited_log("Test message", level="verbose", logger_instance=logger)

    logger.warning.assert_called_once_with("Test message")
