"""
Selection state and assertion sinks owned by a response.

``SelectionContext`` is an immutable record of the most recent selection;
a response replaces it on every traversal instead of mutating fields, so a
Node read of ``response.selection`` always sees one consistent pair of
node and path.

An ``AssertionSink`` decides what happens to an evaluated assertion. The
scenario sink writes log lines and comments; the discarding sink is pushed while
``every``/``some`` run their callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fluentcheck.scenario import Scenario


@dataclass(frozen=True, slots=True)
class SelectionContext:
    """The last selected node and, for data-backed values, its accessor path."""

    node: Any = None
    path: str | None = None

    def advance(self, path: str | None, node: Any) -> SelectionContext:
        return SelectionContext(node=node, path=path)


class AssertionSink(Protocol):
    def record(self, passed: bool, message: str) -> None: ...

    def comment(self, message: str) -> None: ...


class ScenarioSink:
    """Records assertion outcomes as Pass/Fail lines in a scenario log."""

    def __init__(self, scenario: Scenario):
        self.scenario = scenario

    def record(self, passed: bool, message: str) -> None:
        if passed:
            self.scenario.pass_(message)
        else:
            self.scenario.fail(message)

    def comment(self, message: str) -> None:
        self.scenario.comment(message)


class DiscardingSink:
    """Records nothing; outcomes and comments are dropped."""

    def record(self, passed: bool, message: str) -> None:
        return None

    def comment(self, message: str) -> None:
        return None
