"""
Response abstraction shared by every content kind.

A response owns one parsed document and mediates between it and Node-level
selection. It also owns the per-scenario selection context ("last
selected" node and path) and the assertion sink stack that
``every``/``some`` use to evaluate callbacks without logging them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from fluentcheck.context import AssertionSink, DiscardingSink, ScenarioSink, SelectionContext
from fluentcheck.core.errors import UnsupportedOperationError
from fluentcheck.document import ElementCollection
from fluentcheck.domain.enums import ResponseType
from fluentcheck.http_client import HttpResponse
from fluentcheck.node import Node
from fluentcheck.paths import join_path, normalize_path, resolve_path
from fluentcheck.value import UNDEFINED

if TYPE_CHECKING:
    from fluentcheck.scenario import Scenario

logger = logging.getLogger(__name__)


class GenericResponse:
    """Base response: metadata, selection state and assertion routing."""

    response_type: ResponseType = ResponseType.RESOURCE
    type_name: str = "Resource"

    def __init__(self, scenario: Scenario, http_response: HttpResponse):
        self.scenario = scenario
        self.http_response = http_response
        self.document: Any = None
        self._selection = SelectionContext()
        self._sinks: list[AssertionSink] = [ScenarioSink(scenario)]
        self._negate_next = False
        self._next_label: str | None = None
        self.init()

    def init(self) -> None:
        """Parse the body and run construction-time checks. Subclasses extend this."""
        return None

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    def header(self, key: str) -> str | None:
        return self.http_response.header(key)

    def headers(self, key: str | None = None) -> Node:
        if key is None:
            return Node(self, "HTTP Headers", dict(self.http_response.headers))
        return Node(self, f"HTTP Headers[{key}]", self.header(key))

    def status(self) -> Node:
        return Node(self, "HTTP Status", self.status_code)

    def load_time(self) -> Node:
        return Node(self, "Load Time", self.http_response.elapsed_ms)

    # ------------------------------------------------------------------
    # Construction-time checks
    # ------------------------------------------------------------------

    def _check_status_ok(self) -> None:
        code = self.status_code
        self.assert_(
            200 <= code <= 299,
            f"HTTP Status OK ({code})",
            f"HTTP Status is not OK ({code})",
        )

    def _check_content_type(self, pattern: str, description: str) -> None:
        content_type = self.http_response.content_type
        self.assert_(
            re.search(pattern, content_type, re.IGNORECASE) is not None,
            f"{description} ({content_type})",
            f"{description} failed ({content_type or 'no Content-Type'})",
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selection(self) -> SelectionContext:
        return self._selection

    def get_root(self) -> Any:
        return self.document

    def get_last_element(self) -> Node | None:
        return self._selection.node

    def get_last_element_path(self) -> str | None:
        return self._selection.path

    def set_last_element(self, path: str | None, node: Node) -> Node:
        self._selection = self._selection.advance(path, node)
        return node

    def and_(self) -> Node:
        """Get back to the last element selected."""
        last = self.get_last_element()
        return last if last is not None else Node(self, "last selected", None)

    def select(self, path: str, find_in: Any = None, base_path: str | None = None) -> Node:
        """Select one node, relative to ``find_in`` when given."""
        if find_in is not None and not isinstance(find_in, ElementCollection):
            return self._select_data(path, find_in, base_path)
        return self.find(path, find_in)

    def select_all(self, path: str, find_in: Any = None, base_path: str | None = None) -> list[Node]:
        """Select one node per match, relative to ``find_in`` when given."""
        if find_in is not None and not isinstance(find_in, ElementCollection):
            return self._select_all_data(path, find_in, base_path)
        return self.find_all(path, find_in)

    def find(self, path: str, find_in: ElementCollection | None = None) -> Node:
        raise UnsupportedOperationError(
            f"{self.type_name} responses do not support select",
            details={"path": path, "response_type": self.response_type.value},
        )

    def find_all(self, path: str, find_in: ElementCollection | None = None) -> list[Node]:
        raise UnsupportedOperationError(
            f"{self.type_name} responses do not support select_all",
            details={"path": path, "response_type": self.response_type.value},
        )

    def evaluate(self, callback: Callable[[Any], Any]) -> Any:
        raise UnsupportedOperationError(
            f"Evaluate does not support {self.type_name.lower()} responses",
            details={"response_type": self.response_type.value},
        )

    def _select_data(self, path: str, data: Any, base_path: str | None) -> Node:
        value = resolve_path(data, path)
        node = Node(self, path, value)
        return self.set_last_element(join_path(base_path, normalize_path(path)), node)

    def _select_all_data(self, path: str, data: Any, base_path: str | None) -> list[Node]:
        value = resolve_path(data, path)
        full_path = join_path(base_path, normalize_path(path))
        self.set_last_element(full_path, Node(self, path, value))
        if value is UNDEFINED:
            return []
        if isinstance(value, (list, tuple)):
            return [Node(self, f"{path}[{i}]", item) for i, item in enumerate(value)]
        return [Node(self, path, value)]

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    @property
    def ignoring_depth(self) -> int:
        return len(self._sinks) - 1

    def start_ignoring_assertions(self) -> None:
        self._sinks.append(DiscardingSink())

    def stop_ignoring_assertions(self) -> None:
        if len(self._sinks) > 1:
            self._sinks.pop()

    @contextmanager
    def ignoring_assertions(self) -> Iterator[None]:
        """Evaluate assertions inside the block without logging them."""
        self.start_ignoring_assertions()
        try:
            yield
        finally:
            self.stop_ignoring_assertions()

    def not_(self) -> GenericResponse:
        """Flip the next assertion."""
        self._negate_next = True
        return self

    def label(self, message: str) -> GenericResponse:
        """Override the message of the next assertion."""
        self._next_label = message
        return self

    def assert_(self, statement: bool, pass_message: str, fail_message: str) -> GenericResponse:
        if self._negate_next:
            statement = not statement
            pass_message, fail_message = f"NOT: {fail_message}", f"NOT: {pass_message}"
            self._negate_next = False
        if self._next_label is not None:
            pass_message = fail_message = self._next_label
            self._next_label = None
        self._sinks[-1].record(bool(statement), pass_message if statement else fail_message)
        return self

    def pass_(self, message: str) -> GenericResponse:
        self._sinks[-1].record(True, message)
        return self

    def fail(self, message: str) -> GenericResponse:
        self._sinks[-1].record(False, message)
        return self

    def comment(self, message: str) -> GenericResponse:
        self._sinks[-1].comment(message)
        return self
