"""
Observability module for fluentcheck.

Provides:
- Structured logging with JSON format
- Suite and scenario context propagated into every log record

Usage:
    from fluentcheck.core.observability import (
        configure_structured_logging,
        get_logger,
        scenario_context,
    )
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime

# ============================================================================
# Context Variables for Scenario Tracking
# ============================================================================

# Title of the suite the current scenario belongs to
_suite_ctx: ContextVar[str] = ContextVar("suite", default="")

# Title of the scenario whose pipeline is running
_scenario_ctx: ContextVar[str] = ContextVar("scenario", default="")


def get_suite_title() -> str:
    """Get the current suite title from context."""
    return _suite_ctx.get()


def get_scenario_title() -> str:
    """Get the current scenario title from context."""
    return _scenario_ctx.get()


@contextmanager
def scenario_context(suite_title: str, scenario_title: str) -> Iterator[None]:
    """
    Bind suite and scenario titles to log records emitted inside the block.

    Each asyncio task gets its own copy of the context, so concurrently
    executing scenarios never see each other's titles.
    """
    suite_token = _suite_ctx.set(suite_title)
    scenario_token = _scenario_ctx.set(scenario_title)
    try:
        yield
    finally:
        _scenario_ctx.reset(scenario_token)
        _suite_ctx.reset(suite_token)


# ============================================================================
# Structured Logging Configuration
# ============================================================================

_RESERVED_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - logger: Logger name
    - message: Log message
    - suite: Suite title (if available)
    - scenario: Scenario title (if available)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python logging LogRecord

        Returns:
            JSON-formatted log string
        """
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        suite = get_suite_title()
        if suite:
            log_entry["suite"] = suite

        scenario = get_scenario_title()
        if scenario:
            log_entry["scenario"] = scenario

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        log_entry["file"] = record.pathname
        log_entry["line"] = record.lineno
        log_entry["function"] = record.funcName

        # These come from logger.info("msg", extra={"key": "value"})
        extra_keys = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO", structured: bool = True) -> None:
    """
    Configure the fluentcheck logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Emit JSON lines when True, plain text otherwise
    """
    package_logger = logging.getLogger("fluentcheck")
    package_logger.handlers.clear()
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    package_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with structured formatting configured.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
