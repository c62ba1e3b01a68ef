# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for structured logging setup."""

import json
import logging

import pytest
import structlog

from src.core.config.settings import Settings
from src.utils.logging import bind_context, clear_context, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """Restore root handlers and structlog defaults after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    clear_context()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def production_settings() -> Settings:
    """Settings rendering JSON logs."""
    return Settings(environment="production", debug=False, log_level="INFO")


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_output_outside_development(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that stdlib records are rendered as JSON with bound context."""
        setup_logging(production_settings())
        bind_context(request_id="req-1")

        logging.getLogger("src.domains.adaptive").info("Served %s", "heuristic")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Served heuristic"
        assert record["level"] == "info"
        assert record["request_id"] == "req-1"
        assert record["logger"] == "src.domains.adaptive"

    def test_clear_context_drops_bound_fields(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that cleared context is not carried over."""
        setup_logging(production_settings())
        bind_context(request_id="req-1")
        clear_context()

        logging.getLogger("src").warning("after request")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert "request_id" not in record

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that records below the configured level are dropped."""
        setup_logging(production_settings())

        logging.getLogger("src").debug("hidden")

        assert "hidden" not in capsys.readouterr().out

    def test_noisy_loggers_raised_to_warning(self) -> None:
        """Test that third-party loggers are quietened."""
        setup_logging(Settings(environment="development", log_level="DEBUG"))

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("src").level == logging.DEBUG

    def test_get_logger_uses_structlog(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that structlog loggers share the same output."""
        setup_logging(production_settings())

        get_logger("src.test").info("Recommendation served", source="ml")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "Recommendation served"
        assert record["source"] == "ml"
