"""Tests for singleton logging configuration."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from supportdesk.logging_config import (
    _SUPPRESSED_LOGGERS,
    LOG_DATEFMT,
    LOG_FORMAT,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_flag() -> None:
    """Reset the singleton flag before each test."""
    import supportdesk.logging_config as mod

    mod._configured = False


def test_setup_logging_is_idempotent() -> None:
    """basicConfig runs once even when called twice."""
    with patch(
        "supportdesk.logging_config.logging.basicConfig"
    ) as mock_bc:
        setup_logging()
        setup_logging()  # second call is no-op
        mock_bc.assert_called_once()


def test_level_is_passed_through() -> None:
    with patch(
        "supportdesk.logging_config.logging.basicConfig"
    ) as mock_bc:
        setup_logging("debug")
    assert mock_bc.call_args.kwargs["level"] == logging.DEBUG
    assert mock_bc.call_args.kwargs["format"] == LOG_FORMAT


def test_suppressed_loggers_at_warning() -> None:
    setup_logging()
    for name in _SUPPRESSED_LOGGERS:
        lg = logging.getLogger(name)
        assert lg.level == logging.WARNING, (
            f"Logger {name!r} level is {lg.level}, expected WARNING"
        )


def test_log_format_constants() -> None:
    """LOG_FORMAT and LOG_DATEFMT are non-empty strings."""
    assert "%(message)s" in LOG_FORMAT
    assert len(LOG_DATEFMT) > 0
