"""Unit tests for the structlog setup."""

import logging

import pytest
from structlog.testing import capture_logs

from mortgagebroker.utils.logger import (
    configure_logging,
    log_api_request,
    log_indicator_fetch,
    log_llm_interaction,
)


@pytest.fixture
def restore_logging():
    yield
    configure_logging(log_level="INFO", log_format="console")


class TestConfigureLogging:
    """Test cases for logging configuration."""

    def test_level_applied_after_import(self, restore_logging):
        configure_logging(log_level="warning", log_format="console")
        assert logging.getLogger().level == logging.WARNING

        configure_logging(log_level="DEBUG", log_format="json")
        assert logging.getLogger().level == logging.DEBUG


class TestBoundLoggers:
    """Test cases for the context-binding helpers."""

    def test_api_request_context(self):
        with capture_logs() as logs:
            log_api_request("POST", "/tools/mortgageAdvisor", content_length=42).info(
                "Processing advisor question"
            )

        assert logs[0]["method"] == "POST"
        assert logs[0]["path"] == "/tools/mortgageAdvisor"
        assert logs[0]["content_length"] == 42

    def test_indicator_and_llm_context(self):
        with capture_logs() as logs:
            log_indicator_fetch("MORTGAGE30US", "rates").warning("FRED request failed")
            log_llm_interaction("gpt-4o-mini", 12.5, answer_length=80).info(
                "Generated mortgage answer"
            )

        assert logs[0]["series_id"] == "MORTGAGE30US"
        assert logs[0]["intent"] == "rates"
        assert logs[1]["model"] == "gpt-4o-mini"
        assert logs[1]["response_time_ms"] == 12.5
        assert logs[1]["answer_length"] == 80
