"""
Pytest configuration and shared fixtures.

Provides:
- anyio backend selection (asyncio only)
- A scenario opened at a fixed url, with no fetcher or suite
- Response factories that build a response without any network access
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Add the project root to path so tests can import tests.support
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402 (import after path setup)

from fluentcheck.domain.enums import ResponseType  # noqa: E402
from fluentcheck.responses import GenericResponse, create_response  # noqa: E402
from fluentcheck.scenario import Scenario  # noqa: E402
from tests.support import (  # noqa: E402
    CONTENT_TYPES,
    SAMPLE_DATA,
    SAMPLE_HTML,
    make_http_response,
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def scenario() -> Scenario:
    return Scenario(None, "Fixture scenario").open("https://example.com/page")


@pytest.fixture
def make_response(scenario: Scenario) -> Callable[..., GenericResponse]:
    """Factory fixture: build a response of any kind from a literal body."""

    def _make(
        response_type: ResponseType | str,
        body: str | bytes,
        content_type: str | None = None,
        status_code: int = 200,
    ) -> GenericResponse:
        kind = ResponseType(response_type)
        http_response = make_http_response(
            body,
            content_type=content_type or CONTENT_TYPES[kind],
            status_code=status_code,
            url=scenario.get_url() or "",
        )
        return create_response(kind, scenario, http_response)

    return _make


@pytest.fixture
def html_response(make_response) -> GenericResponse:
    return make_response(ResponseType.HTML, SAMPLE_HTML)


@pytest.fixture
def json_response(make_response) -> GenericResponse:
    return make_response(ResponseType.JSON, json.dumps(SAMPLE_DATA))
