"""JSON responses: selection resolves accessor paths against the parsed body."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from fluentcheck.core.errors import ContentFormatError
from fluentcheck.document import ElementCollection
from fluentcheck.domain.enums import ResponseType
from fluentcheck.node import Node
from fluentcheck.responses.base import GenericResponse


class JsonResponse(GenericResponse):
    response_type = ResponseType.JSON
    type_name = "JSON"

    def init(self) -> None:
        try:
            self.document = json.loads(self.http_response.text)
        except ValueError as exc:
            raise ContentFormatError(
                "JSON is not valid",
                details={"url": self.http_response.url, "error": str(exc)},
            ) from exc
        self.pass_("JSON is valid")

    def find(self, path: str, find_in: ElementCollection | None = None) -> Node:
        return self._select_data(path, self.document, None)

    def find_all(self, path: str, find_in: ElementCollection | None = None) -> list[Node]:
        return self._select_all_data(path, self.document, None)

    def evaluate(self, callback: Callable[[Any], Any]) -> Any:
        return callback(self.document)
