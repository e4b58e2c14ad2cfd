"""
Scenario lifecycle: one fetch-then-assert run against one response.

    CREATED --wait()--> WAITING
    CREATED --configured without wait--> READY
    WAITING | READY --execute()--> EXECUTING --pipeline settles--> DONE

A scenario owns the ordered log of Pass/Fail/Comment lines its assertions
produce. Subscribers (the owning suite) are notified exactly once, on the
transition to DONE.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import httpx

from fluentcheck.core.config import settings
from fluentcheck.core.errors import ConfigurationError, FluentCheckError, UsageError, get_error_category
from fluentcheck.core.observability import scenario_context
from fluentcheck.domain.enums import HttpMethod, LogType, ResponseType, ScenarioState
from fluentcheck.http_client import Fetcher, ResourceFetcher
from fluentcheck.responses import GenericResponse, create_response

if TYPE_CHECKING:
    from fluentcheck.suite import Suite

logger = logging.getLogger(__name__)

AssertionCallback = Callable[[GenericResponse], Any]

_NOT_STARTED = (ScenarioState.CREATED, ScenarioState.WAITING, ScenarioState.READY)


@dataclass(frozen=True)
class LogLine:
    """One timestamped outcome in a scenario log."""

    type: LogType
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.type.value.upper()}: {self.message}"


class Scenario:
    """A single test run: open a url, build the response, run the assertions."""

    def __init__(self, suite: Suite | None, title: str, fetcher: Fetcher | None = None):
        self.suite = suite
        self.title = title
        self.state = ScenarioState.CREATED
        self.response: GenericResponse | None = None

        self._log: list[LogLine] = []
        self._subscribers: list[Callable[[Scenario], Any]] = []
        self._fetcher = fetcher

        self._url: str | None = None
        self._method = HttpMethod.GET
        self._form: dict[str, Any] | None = None
        self._headers: dict[str, str] = {}
        self._verify_ssl = settings.verify_ssl
        self._response_type = ResponseType.HTML
        self._callback: AssertionCallback | None = None

        self._done_event: asyncio.Event | None = None
        self._task: asyncio.Task[Scenario] | None = None
        self._started_at: float | None = None
        self._finished_at: float | None = None

    def __repr__(self) -> str:
        return f"Scenario({self.title!r}, state={self.state.value})"

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def _ensure_not_started(self, action: str) -> None:
        if self.has_started():
            raise UsageError(
                f"Cannot {action} scenario '{self.title}' after it started",
                details={"state": self.state.value},
            )

    def _configured(self) -> Scenario:
        if self.state is ScenarioState.CREATED:
            self.state = ScenarioState.READY
        if self.state is ScenarioState.READY and self._url is not None and self._callback is not None:
            self.start()
        return self

    def open(self, url: str) -> Scenario:
        self._ensure_not_started("open")
        self._url = url
        return self._configured()

    def method(self, method: str | HttpMethod) -> Scenario:
        self._ensure_not_started("change the method of")
        try:
            self._method = HttpMethod(str(getattr(method, "value", method)).upper())
        except ValueError as exc:
            raise ConfigurationError(f"Unsupported HTTP method: {method}") from exc
        return self

    def form(self, data: dict[str, Any]) -> Scenario:
        self._ensure_not_started("set form data on")
        self._form = dict(data)
        return self

    def request_headers(self, headers: dict[str, str]) -> Scenario:
        self._ensure_not_started("set headers on")
        self._headers.update(headers)
        return self

    def verify_ssl_cert(self, verify: bool) -> Scenario:
        self._verify_ssl = verify
        return self

    def wait(self, flag: bool = True) -> Scenario:
        """Do not run until execute() is called explicitly."""
        if self.state in _NOT_STARTED:
            self.state = ScenarioState.WAITING if flag else ScenarioState.READY
        if not flag:
            return self._configured()
        # Drop an auto-start scheduled earlier in the same chain
        if self.state is ScenarioState.WAITING and self.is_scheduled():
            self._task.cancel()
            self._task = None
        return self

    def assertions(self, callback: AssertionCallback) -> Scenario:
        """Set the function (or coroutine function) that asserts against the response."""
        self._ensure_not_started("set assertions on")
        self._callback = callback
        return self._configured()

    def _set_type(self, response_type: ResponseType) -> Scenario:
        self._ensure_not_started("change the type of")
        self._response_type = response_type
        return self._configured()

    def html(self) -> Scenario:
        return self._set_type(ResponseType.HTML)

    def json(self) -> Scenario:
        return self._set_type(ResponseType.JSON)

    def image(self) -> Scenario:
        return self._set_type(ResponseType.IMAGE)

    def stylesheet(self) -> Scenario:
        return self._set_type(ResponseType.STYLESHEET)

    def script(self) -> Scenario:
        return self._set_type(ResponseType.SCRIPT)

    def video(self) -> Scenario:
        return self._set_type(ResponseType.VIDEO)

    def resource(self) -> Scenario:
        return self._set_type(ResponseType.RESOURCE)

    @property
    def response_type(self) -> ResponseType:
        return self._response_type

    def get_url(self) -> str | None:
        if self._url is None:
            return None
        return self.suite.build_url(self._url) if self.suite is not None else self._url

    def subscribe(self, callback: Callable[[Scenario], Any]) -> Scenario:
        """Call ``callback(scenario)`` once, when this scenario reaches DONE."""
        self._subscribers.append(callback)
        return self

    # ------------------------------------------------------------------
    # Log
    # ------------------------------------------------------------------

    def _append(self, log_type: LogType, message: str) -> Scenario:
        if self.state is ScenarioState.DONE:
            logger.debug("Ignoring %s line on finished scenario: %s", log_type.value, message)
            return self
        self._log.append(LogLine(log_type, message))
        return self

    def pass_(self, message: str) -> Scenario:
        return self._append(LogType.PASS, message)

    def fail(self, message: str) -> Scenario:
        return self._append(LogType.FAIL, message)

    def comment(self, message: str) -> Scenario:
        return self._append(LogType.COMMENT, message)

    def get_log(self) -> list[LogLine]:
        return list(self._log)

    def passed(self) -> bool:
        return not self.failed()

    def failed(self) -> bool:
        return any(line.type is LogType.FAIL for line in self._log)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def is_done(self) -> bool:
        return self.state is ScenarioState.DONE

    def has_started(self) -> bool:
        return self.state in (ScenarioState.EXECUTING, ScenarioState.DONE)

    def is_scheduled(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> Scenario:
        """Schedule execution on the running event loop.

        Without a running loop the scenario stays put and runs when its
        suite executes.
        """
        if self.has_started() or self._url is None or self.is_scheduled():
            return self
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return self
        self._task = loop.create_task(self.execute())
        return self

    async def execute(self) -> Scenario:
        """Run the fetch-and-assert pipeline once.

        Awaiting this on a running scenario waits for it to finish; on a
        finished scenario it returns immediately. A scenario that has not
        been opened yet is left untouched.
        """
        if self.state is ScenarioState.DONE:
            return self
        if self.state is ScenarioState.EXECUTING:
            assert self._done_event is not None
            await self._done_event.wait()
            return self
        if self._url is None:
            logger.debug("Scenario '%s' has no url yet, not executing", self.title)
            return self

        self.state = ScenarioState.EXECUTING
        self._done_event = asyncio.Event()
        self._started_at = time.monotonic()
        suite_title = self.suite.title if self.suite is not None else ""
        with scenario_context(suite_title, self.title):
            logger.debug("Scenario '%s' executing", self.title)
            try:
                await self._run()
            finally:
                self._finish()
        return self

    def _get_fetcher(self) -> Fetcher:
        if self._fetcher is None:
            self._fetcher = self.suite.fetcher if self.suite is not None else ResourceFetcher()
        return self._fetcher

    async def _run(self) -> None:
        url = self.get_url() or ""
        try:
            http_response = await self._get_fetcher().fetch(
                self._method.value,
                url,
                form=self._form,
                headers=self._headers or None,
                verify=self._verify_ssl,
            )
        except httpx.HTTPError as exc:
            logger.warning("Failed to load %s: %s", url, exc)
            self.fail(f"Failed to load {url}: {exc}")
            return

        try:
            self.response = create_response(self._response_type, self, http_response)
            if self._callback is not None:
                result = self._callback(self.response)
                if inspect.isawaitable(result):
                    await result
        except FluentCheckError as exc:
            logger.warning(
                "Scenario '%s' stopped: %s",
                self.title,
                exc.message,
                extra={"category": get_error_category(exc), "details": exc.details},
            )
            self.fail(exc.message)
        except Exception as exc:
            logger.exception("Scenario '%s' assertions raised", self.title)
            self.fail(f"Assertions raised {type(exc).__name__}: {exc}")

    def _finish(self) -> None:
        self._finished_at = time.monotonic()
        self.state = ScenarioState.DONE
        if self._done_event is not None:
            self._done_event.set()
        logger.debug(
            "Scenario '%s' done: %s",
            self.title,
            "passed" if self.passed() else "failed",
        )
        for callback in self._subscribers:
            callback(self)

    def get_duration(self) -> float | None:
        """Milliseconds spent executing, None before execution."""
        if self._started_at is None:
            return None
        end = self._finished_at if self._finished_at is not None else time.monotonic()
        return (end - self._started_at) * 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "state": self.state.value,
            "done": self.is_done(),
            "url": self.get_url(),
            "duration": self.get_duration(),
            "pass_count": sum(1 for line in self._log if line.type is LogType.PASS),
            "fail_count": sum(1 for line in self._log if line.type is LogType.FAIL),
            "log": [line.to_dict() for line in self._log],
        }
