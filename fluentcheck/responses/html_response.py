"""HTML responses: selection delegates to the parsed markup tree."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fluentcheck.document import ElementCollection, HtmlDocument
from fluentcheck.domain.enums import ResponseType
from fluentcheck.node import Node
from fluentcheck.responses.base import GenericResponse


class HtmlResponse(GenericResponse):
    response_type = ResponseType.HTML
    type_name = "HTML"

    def init(self) -> None:
        self.document = HtmlDocument(self.http_response.body)

    def get_root(self) -> ElementCollection:
        return self.document.root()

    def _matches(self, path: str, find_in: ElementCollection | None) -> ElementCollection:
        if find_in is not None:
            return find_in.find(path)
        return self.document.query_all(path)

    def find(self, path: str, find_in: ElementCollection | None = None) -> Node:
        """Wrap every match of ``path`` as one node named after the selector."""
        return self.set_last_element(None, Node(self, path, self._matches(path, find_in)))

    def find_all(self, path: str, find_in: ElementCollection | None = None) -> list[Node]:
        """One node per match of ``path``, named ``<path> [<index>]``."""
        matches = self._matches(path, find_in)
        self.set_last_element(None, Node(self, path, matches))
        return [Node(self, f"{path} [{i}]", element) for i, element in enumerate(matches)]

    def evaluate(self, callback: Callable[[Any], Any]) -> Any:
        return callback(self.document.soup)
