"""
Domain enums shared by scenarios, responses and the log structure.
"""

from enum import Enum


class LogType(str, Enum):
    """Kind of a scenario log line."""

    PASS = "pass"
    FAIL = "fail"
    COMMENT = "comment"


class ResponseType(str, Enum):
    """Content kind a scenario expects to fetch."""

    HTML = "html"
    JSON = "json"
    IMAGE = "image"
    STYLESHEET = "stylesheet"
    SCRIPT = "script"
    VIDEO = "video"
    RESOURCE = "resource"


class ScenarioState(str, Enum):
    """
    Lifecycle state of a scenario.

    CREATED -> (WAITING | READY) -> EXECUTING -> DONE
    """

    CREATED = "created"
    WAITING = "waiting"
    READY = "ready"
    EXECUTING = "executing"
    DONE = "done"


class HttpMethod(str, Enum):
    """HTTP methods a scenario can open a url with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
