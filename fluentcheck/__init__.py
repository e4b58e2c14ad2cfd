"""fluentcheck: fluent assertions against fetched HTML, JSON, CSS, images and media."""

from fluentcheck.core.errors import (
    ConfigurationError,
    ContentFormatError,
    FluentCheckError,
    UnsupportedOperationError,
    UsageError,
)
from fluentcheck.domain.enums import HttpMethod, LogType, ResponseType, ScenarioState
from fluentcheck.node import Node
from fluentcheck.responses import GenericResponse, create_response
from fluentcheck.scenario import LogLine, Scenario
from fluentcheck.suite import Suite
from fluentcheck.value import UNDEFINED

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ContentFormatError",
    "FluentCheckError",
    "GenericResponse",
    "HttpMethod",
    "LogLine",
    "LogType",
    "Node",
    "ResponseType",
    "Scenario",
    "ScenarioState",
    "Suite",
    "UNDEFINED",
    "UnsupportedOperationError",
    "UsageError",
    "create_response",
]
