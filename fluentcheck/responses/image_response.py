"""Image responses: selection runs against the probed image metadata."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from fluentcheck.core.errors import ContentFormatError
from fluentcheck.document import ElementCollection
from fluentcheck.domain.enums import ResponseType
from fluentcheck.node import Node
from fluentcheck.responses.base import GenericResponse


class ImageResponse(GenericResponse):
    """
    Image resource checked for status and MIME type, then opened with Pillow.

    The document is a metadata dict:
    ``{"width", "height", "format", "mode", "bytes"}``.
    """

    response_type = ResponseType.IMAGE
    type_name = "Image"

    def init(self) -> None:
        self._check_status_ok()
        self._check_content_type(r"^image/", "MIME type is image/*")
        body = self.http_response.body
        try:
            with Image.open(io.BytesIO(body)) as image:
                self.document = {
                    "width": image.width,
                    "height": image.height,
                    "format": image.format,
                    "mode": image.mode,
                    "bytes": len(body),
                }
        except (UnidentifiedImageError, OSError) as exc:
            raise ContentFormatError(
                "Image could not be opened",
                details={"url": self.http_response.url, "error": str(exc)},
            ) from exc

    def find(self, path: str, find_in: ElementCollection | None = None) -> Node:
        return self._select_data(path, self.document, None)

    def find_all(self, path: str, find_in: ElementCollection | None = None) -> list[Node]:
        return self._select_all_data(path, self.document, None)
