# =============================================================================
# tests/unit/test_logging.py
# Unit Tests for LogContext
# =============================================================================

import logging

import pytest

from vanbox_core.logging import LogContext, get_logger


def test_log_context_reports_completion(caplog):
    logger = get_logger("vanbox_core.tests")

    with caplog.at_level(logging.INFO, logger="vanbox_core.tests"):
        with LogContext(logger, "Saving note") as ctx:
            pass

    assert "Saving note... started" in caplog.messages
    assert any(m.startswith("Saving note... completed (") for m in caplog.messages)
    assert ctx.elapsed >= 0


def test_log_context_reports_failure_and_reraises(caplog):
    logger = get_logger("vanbox_core.tests")

    with caplog.at_level(logging.INFO, logger="vanbox_core.tests"):
        with pytest.raises(ValueError):
            with LogContext(logger, "Loading entries"):
                raise ValueError("select failed")

    [failure] = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert "Loading entries... failed" in failure.getMessage()
    assert "select failed" in failure.getMessage()
    assert failure.exc_info is not None
