"""
Unit tests for observability features.

Tests cover:
- Structured logging with JSON format
- Suite and scenario context propagation
- Logger configuration
"""

import asyncio
import json
import logging
import sys

import pytest

from fluentcheck.core.observability import (
    StructuredFormatter,
    configure_structured_logging,
    get_logger,
    get_scenario_title,
    get_suite_title,
    scenario_context,
)


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fluentcheck.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestScenarioContext:
    """Tests for the suite/scenario context variables."""

    def test_context_set_and_reset(self):
        """Test that titles are bound inside the block only."""
        assert get_suite_title() == ""
        with scenario_context("Site", "Home"):
            assert get_suite_title() == "Site"
            assert get_scenario_title() == "Home"
        assert get_suite_title() == ""
        assert get_scenario_title() == ""

    @pytest.mark.anyio
    async def test_context_isolated_between_tasks(self):
        """Test that concurrent tasks never see each other's titles."""
        seen = {}

        async def run(title):
            with scenario_context("Site", title):
                await asyncio.sleep(0)
                seen[title] = get_scenario_title()

        await asyncio.gather(run("One"), run("Two"))
        assert seen == {"One": "One", "Two": "Two"}


class TestStructuredFormatter:
    """Tests for JSON log formatting."""

    def test_basic_fields(self):
        """Test that the standard fields are present."""
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "fluentcheck.test"
        assert entry["message"] == "hello"
        assert entry["line"] == 10
        assert "timestamp" in entry
        assert "suite" not in entry
        assert "scenario" not in entry

    def test_includes_context(self):
        """Test that suite and scenario titles are attached inside a scenario."""
        with scenario_context("Site", "Home"):
            entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["suite"] == "Site"
        assert entry["scenario"] == "Home"

    def test_includes_extra(self):
        """Test that logging extra fields are nested under extra."""
        entry = json.loads(StructuredFormatter().format(_record(category="usage")))
        assert entry["extra"]["category"] == "usage"

    def test_includes_exception(self):
        """Test that exception type and message are captured."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["exception"] == {"type": "ValueError", "message": "boom"}


class TestConfigureLogging:
    """Tests for configure_structured_logging."""

    def test_configures_package_logger(self):
        """Test that a single handler is installed at the requested level."""
        configure_structured_logging(level="debug", structured=True)
        configure_structured_logging(level="debug", structured=True)
        logger = logging.getLogger("fluentcheck")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_plain_text_mode(self):
        configure_structured_logging(level="WARNING", structured=False)
        logger = logging.getLogger("fluentcheck")
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_get_logger(self):
        assert get_logger("fluentcheck.suite") is logging.getLogger("fluentcheck.suite")
