"""Responses that only carry metadata: generic resources, scripts and videos.

None of these support select, select_all or evaluate; calling them raises
``UnsupportedOperationError`` from the base class.
"""

from __future__ import annotations

from fluentcheck.domain.enums import ResponseType
from fluentcheck.responses.base import GenericResponse


class ResourceResponse(GenericResponse):
    response_type = ResponseType.RESOURCE
    type_name = "Resource"

    def init(self) -> None:
        self._check_status_ok()


class ScriptResponse(GenericResponse):
    response_type = ResponseType.SCRIPT
    type_name = "Script"

    def init(self) -> None:
        self._check_status_ok()
        self._check_content_type(r"javascript", "Content-Type contains javascript")


class VideoResponse(GenericResponse):
    response_type = ResponseType.VIDEO
    type_name = "Video"

    def init(self) -> None:
        self._check_status_ok()
        self._check_content_type(r"(video|mpegurl)", "MIME Type matches expected value for video")
