"""
Suites: a titled group of scenarios sharing a base url and one HTTP client.

A suite is done when every scenario it created is done. The completion
callback registered with ``on_done`` fires exactly once.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urljoin, urlsplit

from fluentcheck.core.config import settings
from fluentcheck.core.errors import ConfigurationError
from fluentcheck.core.observability import configure_structured_logging
from fluentcheck.domain.enums import ScenarioState
from fluentcheck.http_client import Fetcher, ResourceFetcher
from fluentcheck.scenario import Scenario

logger = logging.getLogger(__name__)

_ABSOLUTE_SCHEMES = ("http://", "https://", "data:")


class Suite:
    """A group of scenarios run together."""

    def __init__(self, title: str, fetcher: Fetcher | None = None):
        self.title = title
        self.scenarios: list[Scenario] = []
        self.base_url: str | None = None
        self.fetcher: Fetcher = fetcher if fetcher is not None else ResourceFetcher()
        self._wait = settings.defer_execution
        self._verify_ssl = settings.verify_ssl
        self._callback: Callable[[Suite], Any] | None = None
        self._finalized = False
        self._created_at = time.monotonic()
        self._finished_at: float | None = None

    def __repr__(self) -> str:
        return f"Suite({self.title!r}, scenarios={len(self.scenarios)})"

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def wait(self, flag: bool = True) -> Suite:
        """Scenarios created after this call wait for an explicit execute()."""
        self._wait = flag
        return self

    def verify_ssl_cert(self, verify: bool) -> Suite:
        """Applies to scenarios created after this call."""
        self._verify_ssl = verify
        return self

    def on_done(self, callback: Callable[[Suite], Any]) -> Suite:
        self._callback = callback
        return self

    def base(self, url: str | Mapping[str, str]) -> Suite:
        """Set the base url, or a mapping of environment name to base url.

        With a mapping, the entry for the configured environment wins and
        the first entry is the fallback.
        """
        if isinstance(url, Mapping):
            base = url.get(settings.environment)
            if base is None and url:
                base = next(iter(url.values()))
        else:
            base = url
        if not base:
            raise ConfigurationError("Invalid base url", details={"base": url})
        parsed = urlsplit(base)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(
                "Base url must include a scheme and host",
                details={"base": base},
            )
        self.base_url = base
        return self

    def build_url(self, path: str) -> str:
        """Resolve a scenario path against the base url."""
        if not self.base_url or path.startswith(_ABSOLUTE_SCHEMES):
            return path
        if path.startswith("/"):
            parsed = urlsplit(self.base_url)
            return f"{parsed.scheme}://{parsed.netloc}{path}"
        return urljoin(self.base_url, path)

    # ------------------------------------------------------------------
    # Scenarios
    # ------------------------------------------------------------------

    def scenario(self, title: str) -> Scenario:
        scenario = Scenario(self, title)
        scenario.verify_ssl_cert(self._verify_ssl)
        if self._wait:
            scenario.wait()
        scenario.subscribe(self._on_scenario_done)
        self.scenarios.append(scenario)
        return scenario

    def html(self, title: str) -> Scenario:
        return self.scenario(title).html()

    def json(self, title: str) -> Scenario:
        return self.scenario(title).json()

    def image(self, title: str) -> Scenario:
        return self.scenario(title).image()

    def stylesheet(self, title: str) -> Scenario:
        return self.scenario(title).stylesheet()

    def script(self, title: str) -> Scenario:
        return self.scenario(title).script()

    def video(self, title: str) -> Scenario:
        return self.scenario(title).video()

    def resource(self, title: str) -> Scenario:
        return self.scenario(title).resource()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def is_done(self) -> bool:
        return all(scenario.is_done() for scenario in self.scenarios)

    def passed(self) -> bool:
        return all(scenario.passed() for scenario in self.scenarios)

    def failed(self) -> bool:
        return any(scenario.failed() for scenario in self.scenarios)

    def _in_flight(self) -> list[Scenario]:
        return [
            s
            for s in self.scenarios
            if not s.is_done() and (s.state is ScenarioState.EXECUTING or s.is_scheduled())
        ]

    async def execute(self) -> Suite:
        """Execute every opened scenario, including ones opened while running."""
        if not self.scenarios:
            self._finalize()
            return self
        await asyncio.gather(*(scenario.execute() for scenario in self.scenarios))
        # click/submit can open further scenarios while the first round runs
        while in_flight := self._in_flight():
            await asyncio.gather(*(scenario.execute() for scenario in in_flight))
        pending = [s.title for s in self.scenarios if not s.is_done()]
        if pending:
            logger.info("Suite '%s' has scenarios that were never opened: %s", self.title, pending)
        return self

    async def _execute_and_close(self) -> Suite:
        try:
            return await self.execute()
        finally:
            close = getattr(self.fetcher, "aclose", None)
            if close is not None:
                await close()

    def run(self) -> Suite:
        """Execute the suite on a fresh event loop and close its HTTP clients."""
        configure_structured_logging(settings.log_level, settings.structured_logs)
        return asyncio.run(self._execute_and_close())

    def _on_scenario_done(self, scenario: Scenario) -> None:
        logger.debug("Suite '%s': scenario '%s' finished", self.title, scenario.title)
        if self.is_done():
            self._finalize()

    def _finalize(self) -> None:
        if self._finalized:
            return
        self._finalized = True
        self._finished_at = time.monotonic()
        logger.info(
            "Suite '%s' finished: %s",
            self.title,
            "passed" if self.passed() else "failed",
            extra={"scenarios": len(self.scenarios), "duration_ms": self.get_duration()},
        )
        if self._callback is not None:
            self._callback(self)

    def get_duration(self) -> float:
        """Milliseconds since the suite was created, frozen once it is done."""
        end = self._finished_at if self._finished_at is not None else time.monotonic()
        return (end - self._created_at) * 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "base_url": self.base_url,
            "done": self.is_done(),
            "passed": self.passed(),
            "duration": self.get_duration(),
            "scenarios": [scenario.to_dict() for scenario in self.scenarios],
        }
