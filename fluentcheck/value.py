"""Tagged classification of the values a Node can wrap.

Every shape-dependent decision in the Node layer goes through
``classify()`` instead of probing attributes on the wrapped value.
"""

from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any

from fluentcheck.document import ElementCollection


class _Undefined:
    """Marker for a lookup that found nothing (distinct from an explicit null)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


class ValueKind(str, Enum):
    """The five shapes a wrapped value can take."""

    ELEMENT = "element"
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"
    NULL = "null"


def classify(value: Any) -> ValueKind:
    """Return the kind of a wrapped value."""
    if value is None or value is UNDEFINED:
        return ValueKind.NULL
    if isinstance(value, ElementCollection):
        return ValueKind.ELEMENT
    if isinstance(value, dict):
        return ValueKind.OBJECT
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def is_null_or_undefined(value: Any) -> bool:
    return value is None or value is UNDEFINED


def to_type(value: Any) -> str:
    """
    Name the type of a value the way assertions report it.

    Returns one of: null, undefined, boolean, number, string, array, object,
    element, regexp, function.
    """
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    # bool before numbers: bool subclasses int
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    kind = classify(value)
    if kind is ValueKind.ELEMENT:
        return "element"
    if kind is ValueKind.ARRAY:
        return "array"
    if kind is ValueKind.OBJECT:
        return "object"
    if hasattr(value, "pattern") and hasattr(value, "search"):
        return "regexp"
    if callable(value):
        return "function"
    return type(value).__name__.lower()


def stringify(value: Any) -> str:
    """Convert a non-element value to the string assertions compare against."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if is_null_or_undefined(v) else stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)
