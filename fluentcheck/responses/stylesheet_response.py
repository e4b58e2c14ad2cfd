"""Stylesheet responses: selection looks up rules by their exact selector text."""

from __future__ import annotations

from typing import Any

import tinycss2

from fluentcheck.document import ElementCollection
from fluentcheck.domain.enums import ResponseType
from fluentcheck.node import Node
from fluentcheck.responses.base import GenericResponse


def _squash(text: str) -> str:
    return " ".join(text.split())


def parse_rules(body: bytes) -> tuple[list[dict[str, Any]], int]:
    """Parse a stylesheet into qualified rules and a count of parse errors.

    Each rule is ``{"selectors": [...], "declarations": {name: value}}``.
    At-rules (``@media``, ``@import``...) are skipped.
    """
    nodes, _encoding = tinycss2.parse_stylesheet_bytes(body, skip_comments=True, skip_whitespace=True)
    rules: list[dict[str, Any]] = []
    errors = 0
    for node in nodes:
        if node.type == "error":
            errors += 1
            continue
        if node.type != "qualified-rule":
            continue
        declarations: dict[str, str] = {}
        for item in tinycss2.parse_declaration_list(node.content, skip_comments=True, skip_whitespace=True):
            if item.type == "error":
                errors += 1
            elif item.type == "declaration":
                declarations[item.lower_name] = tinycss2.serialize(item.value).strip()
        selectors = [_squash(s) for s in tinycss2.serialize(node.prelude).split(",")]
        rules.append({"selectors": selectors, "declarations": declarations})
    return rules, errors


class StylesheetResponse(GenericResponse):
    response_type = ResponseType.STYLESHEET
    type_name = "Stylesheet"

    def init(self) -> None:
        self._check_status_ok()
        self._check_content_type(r"text/css", "Content-Type contains text/css")
        self.document, errors = parse_rules(self.http_response.body)
        self.assert_(errors == 0, "CSS is valid", f"CSS is not valid ({errors} parse errors)")

    def _matching_rules(self, selector: str) -> list[dict[str, Any]]:
        wanted = _squash(selector)
        return [rule for rule in self.document if wanted in rule["selectors"]]

    def find(self, path: str, find_in: ElementCollection | None = None) -> Node:
        rules = self._matching_rules(path)
        declarations = rules[0]["declarations"] if rules else None
        return self.set_last_element(None, Node(self, f"CSS Rule for {path}", declarations))

    def find_all(self, path: str, find_in: ElementCollection | None = None) -> list[Node]:
        return [
            Node(self, f"CSS Rule for {path}", rule["declarations"])
            for rule in self._matching_rules(path)
        ]
