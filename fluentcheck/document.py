"""
Native tree capability for markup-backed responses.

``HtmlDocument`` parses markup with BeautifulSoup and answers CSS queries
with soupsieve. Matches come back as ``ElementCollection`` objects: an
ordered, duplicate-free list of tags with the structural queries (parent,
children, siblings, next, prev, closest, find) and the accessors
(attr, prop, data, text, val, has_class) that Nodes delegate to.

All queries return new collections; the only mutating call is ``set_val``
used when filling in forms.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Iterator
from typing import Any, Protocol
from urllib.parse import urlencode

import soupsieve as sv
from bs4 import BeautifulSoup
from bs4.element import Tag

_BOOLEAN_PROPS = {"checked", "selected", "disabled", "readonly", "multiple", "required", "hidden"}
_NON_SUBMITTABLE_INPUTS = {"submit", "button", "reset", "file", "image"}
_DATA_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


class TreeDocument(Protocol):
    """What a response needs from a tree-structured document."""

    def query_one(self, path: str) -> ElementCollection: ...

    def query_all(self, path: str) -> ElementCollection: ...


def _is_element(node: Any) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def _unique(tags: Iterable[Tag]) -> list[Tag]:
    # bs4 compares tags structurally; identity is what matters here
    seen: set[int] = set()
    out: list[Tag] = []
    for tag in tags:
        if id(tag) not in seen:
            seen.add(id(tag))
            out.append(tag)
    return out


def _matches(tag: Tag, selector: str | None) -> bool:
    return selector is None or sv.match(selector, tag)


def _coerce_data(raw: str | None) -> Any:
    """Convert a data-* attribute string the way jQuery's data() does."""
    if raw is None:
        return None
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw == "null":
        return None
    if _DATA_NUMBER_RE.match(raw):
        return float(raw) if "." in raw else int(raw)
    if raw[:1] in ("{", "["):
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    return raw


class ElementCollection:
    """An ordered set of matched elements from one document."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[Tag] = ()):
        self._tags: list[Tag] = _unique(t for t in tags if _is_element(t))

    # ------------------------------------------------------------------
    # Collection basics
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[ElementCollection]:
        for tag in self._tags:
            yield ElementCollection([tag])

    def __repr__(self) -> str:
        names = ", ".join(t.name for t in self._tags[:5])
        return f"ElementCollection([{names}{', ...' if len(self._tags) > 5 else ''}])"

    @property
    def length(self) -> int:
        return len(self._tags)

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    def eq(self, index: int) -> ElementCollection:
        if 0 <= index < len(self._tags):
            return ElementCollection([self._tags[index]])
        return ElementCollection()

    def _first(self) -> Tag | None:
        return self._tags[0] if self._tags else None

    @property
    def tag_name(self) -> str | None:
        first = self._first()
        return first.name.lower() if first is not None else None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def attr(self, key: str) -> str | None:
        first = self._first()
        if first is None:
            return None
        value = first.get(key)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def prop(self, key: str) -> Any:
        first = self._first()
        if first is None:
            return None
        if key in ("tagName", "nodeName"):
            return first.name.upper()
        if key in _BOOLEAN_PROPS:
            return first.has_attr(key)
        if key == "innerHTML":
            return first.decode_contents()
        if key == "outerHTML":
            return str(first)
        if key in ("textContent", "innerText"):
            return first.get_text()
        if key == "value":
            return self.val()
        return self.attr(key)

    def data(self, key: str) -> Any:
        name = "data-" + re.sub(r"([A-Z])", lambda m: "-" + m.group(1).lower(), key)
        return _coerce_data(self.attr(name))

    def text(self) -> str:
        return "".join(tag.get_text() for tag in self._tags)

    def has_class(self, class_name: str) -> bool:
        return any(class_name in (tag.get("class") or []) for tag in self._tags)

    def val(self) -> Any:
        first = self._first()
        if first is None:
            return None
        return _tag_value(first)

    def set_val(self, value: Any) -> ElementCollection:
        for tag in self._tags:
            _set_tag_value(tag, value)
        return self

    # ------------------------------------------------------------------
    # Structural queries
    # ------------------------------------------------------------------

    def find(self, selector: str) -> ElementCollection:
        return ElementCollection(match for tag in self._tags for match in tag.select(selector))

    def parent(self, selector: str | None = None) -> ElementCollection:
        parents = (tag.parent for tag in self._tags)
        return ElementCollection(p for p in parents if _is_element(p) and _matches(p, selector))

    def parents(self, selector: str | None = None) -> ElementCollection:
        return ElementCollection(
            p
            for tag in self._tags
            for p in tag.parents
            if _is_element(p) and _matches(p, selector)
        )

    def closest(self, selector: str) -> ElementCollection:
        found: list[Tag] = []
        for tag in self._tags:
            node: Any = tag
            while _is_element(node):
                if sv.match(selector, node):
                    found.append(node)
                    break
                node = node.parent
        return ElementCollection(found)

    def children(self, selector: str | None = None) -> ElementCollection:
        return ElementCollection(
            child
            for tag in self._tags
            for child in tag.find_all(recursive=False)
            if _matches(child, selector)
        )

    def siblings(self, selector: str | None = None) -> ElementCollection:
        own = {id(tag) for tag in self._tags}
        return ElementCollection(
            sibling
            for tag in self._tags
            if _is_element(tag.parent)
            for sibling in tag.parent.find_all(recursive=False)
            if id(sibling) not in own and _matches(sibling, selector)
        )

    def next(self, selector: str | None = None) -> ElementCollection:
        following = (tag.find_next_sibling() for tag in self._tags)
        return ElementCollection(t for t in following if t is not None and _matches(t, selector))

    def prev(self, selector: str | None = None) -> ElementCollection:
        preceding = (tag.find_previous_sibling() for tag in self._tags)
        return ElementCollection(t for t in preceding if t is not None and _matches(t, selector))

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def serialize_array(self) -> list[dict[str, str]]:
        """Name/value pairs of the successful controls, in document order."""
        pairs: list[dict[str, str]] = []
        for form in self._tags:
            for control in form.select("input, select, textarea"):
                name = control.get("name")
                if not name or control.has_attr("disabled"):
                    continue
                if control.name == "input":
                    input_type = (control.get("type") or "text").lower()
                    if input_type in _NON_SUBMITTABLE_INPUTS:
                        continue
                    if input_type in ("checkbox", "radio") and not control.has_attr("checked"):
                        continue
                value = _tag_value(control)
                values = value if isinstance(value, list) else [value]
                for v in values:
                    if v is not None:
                        pairs.append({"name": name, "value": v})
        return pairs

    def serialize(self) -> str:
        return urlencode([(p["name"], p["value"]) for p in self.serialize_array()])

    def form_data(self) -> dict[str, Any]:
        """Serialized controls keyed by name; repeated names collect into a list."""
        data: dict[str, Any] = {}
        for pair in self.serialize_array():
            name, value = pair["name"], pair["value"]
            if name not in data:
                data[name] = value
            elif isinstance(data[name], list):
                data[name].append(value)
            else:
                data[name] = [data[name], value]
        return data


def _option_value(option: Tag) -> str:
    value = option.get("value")
    return value if value is not None else option.get_text()


def _tag_value(tag: Tag) -> Any:
    name = tag.name.lower()
    if name == "input":
        value = tag.get("value")
        if value is None and (tag.get("type") or "").lower() in ("checkbox", "radio"):
            return "on"
        return value if value is not None else ""
    if name == "textarea":
        return tag.get_text()
    if name == "option":
        return _option_value(tag)
    if name == "select":
        options = tag.find_all("option")
        selected = [o for o in options if o.has_attr("selected")]
        if tag.has_attr("multiple"):
            return [_option_value(o) for o in selected]
        if selected:
            return _option_value(selected[-1])
        return _option_value(options[0]) if options else None
    return None


def _set_tag_value(tag: Tag, value: Any) -> None:
    name = tag.name.lower()
    if name == "textarea":
        tag.string = str(value)
    elif name == "select":
        wanted = {str(v) for v in value} if isinstance(value, (list, tuple)) else {str(value)}
        for option in tag.find_all("option"):
            if _option_value(option) in wanted:
                option["selected"] = "selected"
            elif option.has_attr("selected"):
                del option["selected"]
    else:
        tag["value"] = str(value)


class HtmlDocument:
    """A parsed HTML document answering CSS selector queries."""

    def __init__(self, markup: str | bytes, parser: str = "html.parser"):
        self.soup = BeautifulSoup(markup, parser)

    def query_one(self, path: str) -> ElementCollection:
        found = self.soup.select_one(path)
        return ElementCollection([found] if found is not None else [])

    def query_all(self, path: str) -> ElementCollection:
        return ElementCollection(self.soup.select(path))

    def root(self) -> ElementCollection:
        return ElementCollection(self.soup.find_all(recursive=False))
