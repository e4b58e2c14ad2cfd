"""
Shared test data and helpers that are not fixtures.

Imported by conftest.py and by test modules that need to build responses
or fetchers inline.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from fluentcheck.domain.enums import ResponseType
from fluentcheck.http_client import HttpResponse, ResourceFetcher
from fluentcheck.scenario import Scenario

SAMPLE_HTML = (
    "<html><head><title>Sample page</title></head><body>"
    '<nav id="menu" class="main nav"><ul>'
    '<li class="item first"><a href="/one" data-item-id="1">One</a></li>'
    '<li class="item"><a href="two.html" data-active="true">Two</a></li>'
    '<li class="item last"><a href="https://other.test/three">Three</a></li>'
    "</ul></nav>"
    '<form id="search" action="/search" method="get">'
    '<input type="text" name="q" value="kittens">'
    '<input type="checkbox" name="safe" checked>'
    '<input type="checkbox" name="unchecked">'
    '<select name="sort"><option value="new">Newest</option>'
    '<option value="top" selected>Top</option></select>'
    '<textarea name="note">hi</textarea>'
    '<input type="submit" name="go" value="Go">'
    '<button type="submit" id="search-button">Search</button>'
    "</form>"
    '<form id="login" method="post" action="/login">'
    '<input name="user" value="">'
    '<button id="login-button">Log in</button>'
    "</form>"
    '<p class="note">Plain paragraph</p>'
    "</body></html>"
)

SAMPLE_DATA: dict[str, Any] = {
    "meta": {"count": 3, "status": "ok"},
    "data": {
        "items": [
            {"id": 1, "title": "First", "tags": ["a", "b"]},
            {"id": 2, "title": "Second", "tags": []},
            {"id": 3, "title": None, "tags": ["c"]},
        ],
        "owner": {"name": " Ada Lovelace ", "active": True},
    },
    "price": "12.50 USD",
}

CONTENT_TYPES = {
    ResponseType.HTML: "text/html; charset=utf-8",
    ResponseType.JSON: "application/json",
    ResponseType.IMAGE: "image/png",
    ResponseType.STYLESHEET: "text/css",
    ResponseType.SCRIPT: "application/javascript",
    ResponseType.VIDEO: "video/mp4",
    ResponseType.RESOURCE: "application/octet-stream",
}


def make_http_response(
    body: str | bytes,
    content_type: str = "text/html; charset=utf-8",
    status_code: int = 200,
    url: str = "https://example.com/page",
    headers: dict[str, str] | None = None,
) -> HttpResponse:
    """Build an HttpResponse the way the fetcher would."""
    all_headers = {"content-type": content_type}
    all_headers.update({k.lower(): v for k, v in (headers or {}).items()})
    return HttpResponse(
        url=url,
        status_code=status_code,
        headers=all_headers,
        body=body.encode("utf-8") if isinstance(body, str) else body,
        elapsed_ms=12.5,
    )


def log_entries(scenario: Scenario) -> list[tuple[str, str]]:
    """(type, message) pairs of a scenario log, for compact assertions."""
    return [(line.type.value, line.message) for line in scenario.get_log()]


def mock_fetcher(handler: Callable[[httpx.Request], httpx.Response]) -> ResourceFetcher:
    """A real ResourceFetcher whose requests are answered by ``handler``."""
    return ResourceFetcher(transport=httpx.MockTransport(handler))


class RecordingFetcher:
    """In-memory fetcher: serves canned bodies by url and records each call."""

    def __init__(self, pages: dict[str, tuple[str, str]] | None = None):
        self.pages = pages or {}
        self.calls: list[dict[str, Any]] = []

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        form: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        verify: bool = True,
    ) -> HttpResponse:
        self.calls.append(
            {"method": method, "url": url, "form": form, "headers": headers, "verify": verify}
        )
        path = url.split("?")[0]
        if path not in self.pages:
            return make_http_response("not found", content_type="text/plain", status_code=404, url=url)
        content_type, body = self.pages[path]
        return make_http_response(body, content_type=content_type, url=url)
