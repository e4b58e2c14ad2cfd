"""Response kinds and the factory scenarios build them through."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fluentcheck.domain.enums import ResponseType
from fluentcheck.responses.base import GenericResponse
from fluentcheck.responses.html_response import HtmlResponse
from fluentcheck.responses.image_response import ImageResponse
from fluentcheck.responses.json_response import JsonResponse
from fluentcheck.responses.resource_response import ResourceResponse, ScriptResponse, VideoResponse
from fluentcheck.responses.stylesheet_response import StylesheetResponse

if TYPE_CHECKING:
    from fluentcheck.http_client import HttpResponse
    from fluentcheck.scenario import Scenario

RESPONSE_CLASSES: dict[ResponseType, type[GenericResponse]] = {
    ResponseType.HTML: HtmlResponse,
    ResponseType.JSON: JsonResponse,
    ResponseType.IMAGE: ImageResponse,
    ResponseType.STYLESHEET: StylesheetResponse,
    ResponseType.SCRIPT: ScriptResponse,
    ResponseType.VIDEO: VideoResponse,
    ResponseType.RESOURCE: ResourceResponse,
}


def create_response(
    response_type: ResponseType | str, scenario: Scenario, http_response: HttpResponse
) -> GenericResponse:
    """Build the response class registered for ``response_type``."""
    return RESPONSE_CLASSES[ResponseType(response_type)](scenario, http_response)


__all__ = [
    "GenericResponse",
    "HtmlResponse",
    "ImageResponse",
    "JsonResponse",
    "RESPONSE_CLASSES",
    "ResourceResponse",
    "ScriptResponse",
    "StylesheetResponse",
    "VideoResponse",
    "create_response",
]
