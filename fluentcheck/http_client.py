"""
HTTP client for fetching scenario resources.

Handles making the request a scenario was opened with and normalizing the
result into an ``HttpResponse`` that every response kind reads its status,
headers, body and timing from.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from fluentcheck.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """A fetched resource, detached from the transport that produced it."""

    url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    elapsed_ms: float = 0.0
    encoding: str = "utf-8"

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding or "utf-8", errors="replace")

    @property
    def content_type(self) -> str:
        return self.header("content-type") or ""

    def header(self, key: str) -> str | None:
        return self.headers.get(key.lower())

    @classmethod
    def from_httpx(cls, response: httpx.Response, elapsed_ms: float) -> HttpResponse:
        return cls(
            url=str(response.url),
            status_code=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=response.content,
            elapsed_ms=elapsed_ms,
            encoding=response.encoding or "utf-8",
        )


class Fetcher(Protocol):
    async def fetch(
        self,
        method: str,
        url: str,
        *,
        form: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        verify: bool = True,
    ) -> HttpResponse: ...


class ResourceFetcher:
    """Fetches scenario urls with httpx.

    One ``httpx.AsyncClient`` is kept per SSL verification mode, since
    verification is fixed when a client is created.
    """

    def __init__(
        self,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.user_agent = user_agent or settings.user_agent
        self.transport = transport
        self._clients: dict[bool, httpx.AsyncClient] = {}

    def _client(self, verify: bool) -> httpx.AsyncClient:
        if verify not in self._clients:
            self._clients[verify] = httpx.AsyncClient(
                timeout=self.timeout,
                verify=verify,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            )
        return self._clients[verify]

    async def aclose(self) -> None:
        """Close the HTTP clients."""
        for client in self._clients.values():
            await client.aclose()
        self._clients.clear()

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        form: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        verify: bool = True,
    ) -> HttpResponse:
        """Make the request and normalize the response.

        Form data goes into the query string for GET and HEAD, and into an
        urlencoded body otherwise. Transport errors propagate as
        ``httpx.HTTPError``.
        """
        method = method.upper()
        params = form if form and method in ("GET", "HEAD") else None
        data = form if form and method not in ("GET", "HEAD") else None

        start_time = time.monotonic()
        response = await self._client(verify).request(
            method,
            url,
            params=params,
            data=data,
            headers=headers,
        )
        elapsed_ms = (time.monotonic() - start_time) * 1000

        logger.debug(
            "Fetched %s %s -> %s in %.1fms",
            method,
            url,
            response.status_code,
            elapsed_ms,
        )
        return HttpResponse.from_httpx(response, elapsed_ms)
