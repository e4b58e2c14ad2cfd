"""
Accessor paths for data-backed responses.

A path is a dotted list of segments; each segment may carry bracketed
accessors:

  - "meta" -> top-level field
  - "data.id" -> nested dict
  - "items[0].id" -> list index
  - "items.0.id" -> numeric segment on a list
  - "items[0][title]" -> bracketed key
  - "$.data.id" -> JSONPath-style root

The dotted segments double as the synthetic ancestry of a selection, so
parent/closest/parents on object data work on ``split_path()`` output.
"""

from __future__ import annotations

import re
from typing import Any

from fluentcheck.value import UNDEFINED

_SEGMENT_RE = re.compile(r"^(?P<key>[^\[\]]*)(?P<accessors>(?:\[[^\[\]]*\])*)$")
_ACCESSOR_RE = re.compile(r"\[([^\[\]]*)\]")


def normalize_path(path: str) -> str:
    """Strip a JSONPath-style root and surrounding whitespace."""
    path = path.strip()
    if path == "$":
        return ""
    if path.startswith("$."):
        return path[2:]
    return path


def split_path(path: str | None) -> list[str]:
    """Split a path into its dotted segments. An empty path has no segments."""
    if not path:
        return []
    return normalize_path(path).split(".")


def join_path(*parts: str | None) -> str:
    """Join path fragments, skipping empty ones."""
    return ".".join(p for p in parts if p)


def _step(current: Any, key: str) -> Any:
    if isinstance(current, dict):
        return current[key] if key in current else UNDEFINED
    if isinstance(current, (list, tuple)):
        try:
            index = int(key)
        except ValueError:
            return UNDEFINED
        if 0 <= index < len(current):
            return current[index]
        return UNDEFINED
    return UNDEFINED


def resolve_path(data: Any, path: str) -> Any:
    """Resolve a path against nested dicts and lists.

    Returns the found value (which may be None for an explicit null) or
    UNDEFINED when any segment is missing.
    """
    path = normalize_path(path)
    if not path:
        return data

    current = data
    for token in path.split("."):
        match = _SEGMENT_RE.match(token)
        if not match:
            return UNDEFINED

        key = match.group("key")
        if key:
            current = _step(current, key)
            if current is UNDEFINED:
                return UNDEFINED

        for accessor in _ACCESSOR_RE.findall(match.group("accessors")):
            current = _step(current, accessor.strip().strip("'\""))
            if current is UNDEFINED:
                return UNDEFINED

    return current
