"""
Queryable Node: the chainable wrapper assertions are made against.

A Node wraps one value (an element collection, a dict, a list, a scalar,
None or UNDEFINED), a display name that grows as traversal happens
(``items[2][title]``), and a back-reference to the response it came from.

Nodes are immutable. Every traversal or transform returns a new Node, and
every assertion returns the receiver so chains can continue after a
failure:

    response.select("ul.menu li").nth(2).attribute("href").starts_with("/")
    response.select("data.items").every(lambda item: item.attribute("id").exists())

Two traversal semantics share one interface. Element values use the
document's native structure. Object and array values have no native tree,
so parent/parents/closest/siblings are rebuilt from the dotted path the
response recorded for the last selection.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from fluentcheck.paths import join_path, split_path
from fluentcheck.value import (
    ValueKind,
    classify,
    is_null_or_undefined,
    stringify,
    to_type,
)

if TYPE_CHECKING:
    from fluentcheck.responses.base import GenericResponse
    from fluentcheck.scenario import Scenario

_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(Infinity|(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?)")
_INT_PREFIX_RE = re.compile(r"^[+-]?\d+")


def _parse_float(text: str) -> float:
    """Parse the leading float of a string, NaN when there is none."""
    match = _FLOAT_PREFIX_RE.match(text.strip())
    if not match:
        return math.nan
    return float(match.group(0).replace("Infinity", "inf"))


def _parse_int(text: str) -> int | float:
    """Parse the leading integer of a string, NaN when there is none."""
    match = _INT_PREFIX_RE.match(text.strip())
    if not match:
        return math.nan
    return int(match.group(0))


def _compare(left: Any, right: Any, op: Callable[[Any, Any], bool]) -> bool:
    try:
        return bool(op(left, right))
    except TypeError:
        return False


class Node:
    """An immutable, chainable wrapper around one traversed value."""

    __slots__ = ("_response", "_name", "_value")

    def __init__(self, response: GenericResponse, name: str, value: Any):
        self._response = response
        self._name = name
        self._value = value

    def __repr__(self) -> str:
        return f"Node({self._name!r}, {self._value!r})"

    def __str__(self) -> str:
        return self.to_string()

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> Any:
        return self._value

    @property
    def response(self) -> GenericResponse:
        return self._response

    @property
    def kind(self) -> ValueKind:
        return classify(self._value)

    def _wrap(self, name: str, value: Any) -> Node:
        return Node(self._response, name, value)

    def _remember(self, path: str | None, node: Node) -> Node:
        return self._response.set_last_element(path, node)

    def _synthetic_segments(self) -> list[str]:
        return split_path(self._response.get_last_element_path())

    # ------------------------------------------------------------------
    # Type introspection
    # ------------------------------------------------------------------

    def is_null_or_undefined(self) -> bool:
        return is_null_or_undefined(self._value)

    def is_dom_element(self) -> bool:
        return self.kind is ValueKind.ELEMENT

    def is_array(self) -> bool:
        return self.kind is ValueKind.ARRAY

    def is_object(self) -> bool:
        return self.kind is ValueKind.OBJECT

    def is_string(self) -> bool:
        return isinstance(self._value, str)

    def get_tag_name(self) -> str | None:
        if self.is_dom_element():
            return self._value.tag_name
        return None

    def is_form_element(self) -> bool:
        return self.get_tag_name() == "form"

    def is_button_element(self) -> bool:
        return self.get_tag_name() == "button"

    def is_link_element(self) -> bool:
        return self.get_tag_name() == "a"

    def is_clickable(self) -> bool:
        return self.is_link_element() or self.is_button_element()

    def _is_data(self) -> bool:
        return self.kind in (ValueKind.OBJECT, ValueKind.ARRAY)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    def get(self, index: int | None = None) -> Any:
        """Return the raw value, or one child of an array or element collection."""
        if index is not None:
            if self.is_array():
                return self._value[index] if 0 <= index < len(self._value) else None
            if self.is_dom_element():
                return self._value.eq(index)
        return self._value

    def to_string(self) -> str:
        if self.is_dom_element():
            text = self._value.text()
            if text:
                return text
            value = self._value.val()
            return "" if value is None else stringify(value)
        return stringify(self._value)

    # ------------------------------------------------------------------
    # Response passthroughs
    # ------------------------------------------------------------------

    def select(self, path: str) -> Node:
        return self._response.select(path)

    def headers(self, key: str | None = None) -> Node:
        return self._response.headers(key)

    def status(self) -> Node:
        return self._response.status()

    def load_time(self) -> Node:
        return self._response.load_time()

    def and_(self) -> Node:
        """Get back to the last element selected."""
        return self._response.and_()

    def not_(self) -> Node:
        """Flip the next assertion."""
        self._response.not_()
        return self

    def comment(self, message: str) -> Node:
        self._response.comment(message)
        return self

    def label(self, message: str) -> Node:
        """Use a custom message for the next assertion."""
        self._response.label(message)
        return self

    def echo(self) -> Node:
        return self.comment(f"{self._name} = {self.to_string()}")

    def type_of(self) -> Node:
        return self.comment(f"typeof {self._name} = {to_type(self._value)}")

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def find(self, selector: str) -> Node:
        if self.is_dom_element() or self._is_data():
            return self._response.select(
                selector,
                find_in=self._value,
                base_path=self._response.get_last_element_path(),
            )
        return self._remember(None, self._wrap(selector, None))

    def parent(self) -> Node:
        name = "parent"
        if self.is_dom_element():
            return self._remember(None, self._wrap(name, self._value.parent()))
        if self._is_data():
            segments = self._synthetic_segments()
            if len(segments) > 1:
                return self._response.select(join_path(*segments[:-1]))
            return self._remember("", self._wrap(name, self._response.get_root()))
        return self._remember(None, self._wrap(name, None))

    def parents(self, selector: str | None = None) -> Node:
        if selector is None:
            return self.parent()
        name = f"parents {selector}"
        if self.is_dom_element():
            return self._remember(None, self._wrap(name, self._value.parents(selector)))
        if self._is_data():
            segments = self._synthetic_segments()
            # the node itself is the last segment, so start one above it
            for i in range(len(segments) - 2, -1, -1):
                if segments[i] == selector:
                    return self._response.select(join_path(*segments[: i + 1]))
        return self._remember(None, self._wrap(name, None))

    def closest(self, selector: str) -> Node:
        name = f"closest {selector}"
        if self.is_dom_element():
            return self._remember(None, self._wrap(name, self._value.closest(selector)))
        if self._is_data():
            segments = self._synthetic_segments()
            for i in range(len(segments) - 1, -1, -1):
                if segments[i] == selector:
                    return self._response.select(join_path(*segments[: i + 1]))
        return self._remember(None, self._wrap(name, None))

    def children(self, selector: str | None = None) -> Node:
        name = f"children {selector}" if selector is not None else "children"
        if self.is_dom_element():
            return self._remember(None, self._wrap(name, self._value.children(selector)))
        if self._is_data():
            if selector is not None:
                return self.find(selector)
            return self._remember(self._response.get_last_element_path(), self._wrap(name, self._value))
        return self._remember(None, self._wrap(name, None))

    def siblings(self, selector: str | None = None) -> Node:
        if self.is_dom_element():
            return self._remember(
                None, self._wrap(f"siblings {selector or ''}".strip(), self._value.siblings(selector))
            )
        return self._data_relative("siblings", selector)

    def next(self, selector: str | None = None) -> Node:
        if self.is_dom_element():
            return self._remember(None, self._wrap(f"next {selector or ''}".strip(), self._value.next(selector)))
        return self._data_relative("next", selector)

    def prev(self, selector: str | None = None) -> Node:
        if self.is_dom_element():
            return self._remember(None, self._wrap(f"prev {selector or ''}".strip(), self._value.prev(selector)))
        return self._data_relative("prev", selector)

    def _data_relative(self, relation: str, selector: str | None) -> Node:
        # Object data has no ordinal siblings, only "children of the same parent"
        if self._is_data():
            return self.parent().children(selector)
        return self._remember(None, self._wrap(f"{relation} {selector or ''}".strip(), None))

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def nth(self, i: int) -> Node:
        """Select the nth value of an array or element collection."""
        value: Any = None
        path: str | None = None
        if i >= 0:
            if self.is_array() and i < len(self._value):
                value = self._value[i]
                path = join_path(self._response.get_last_element_path(), str(i))
            elif self.is_dom_element() and i < len(self._value):
                value = self._value.eq(i)
        return self._remember(path, self._wrap(f"{self._name}[{i}]", value))

    def eq(self, i: int) -> Node:
        """Alias for nth, the jQuery name."""
        return self.nth(i)

    def first(self) -> Node:
        return self.nth(0)

    def last(self) -> Node:
        if self.kind in (ValueKind.ARRAY, ValueKind.ELEMENT) and len(self._value) > 0:
            return self.nth(len(self._value) - 1)
        return self.nth(-1)

    # ------------------------------------------------------------------
    # Properties and attributes
    # ------------------------------------------------------------------

    def _own(self, key: str) -> tuple[bool, Any]:
        if self.is_object():
            if key in self._value:
                return True, self._value[key]
        elif self.is_array() and key.isdigit():
            index = int(key)
            if index < len(self._value):
                return True, self._value[index]
        return False, None

    def _lookup(self, key: str, native: Callable[[Any, str], Any]) -> Node:
        found: Any = None
        if self.is_dom_element():
            found = native(self._value, key)
        else:
            has_key, own = self._own(key)
            if has_key:
                found = own
            else:
                last = self._response.get_last_element()
                if last is not None and last.is_dom_element():
                    found = native(last.get(), key)
        return self._wrap(f"{self._name}[{key}]", found)

    def attribute(self, key: str) -> Node:
        """Get the attribute by name of this element, object or last selected element."""
        return self._lookup(key, lambda el, k: el.attr(k))

    def prop(self, key: str) -> Node:
        """Get the property by name of this element, object or last selected element."""
        return self._lookup(key, lambda el, k: el.prop(k))

    def data(self, key: str) -> Node:
        """Get the data attribute by name of this element, object or last selected element."""
        return self._lookup(key, lambda el, k: el.data(k))

    # ------------------------------------------------------------------
    # Scalar transforms
    # ------------------------------------------------------------------

    def val(self) -> Node:
        value: Any = None
        if self.is_dom_element():
            value = self._value.val()
        elif not self.is_null_or_undefined():
            value = self._value
        return self._wrap(f"Value of {self._name}", value)

    def text(self) -> Node:
        value: Any = None
        if self.is_dom_element():
            value = self._value.text()
        elif not self.is_null_or_undefined():
            value = stringify(self._value)
        return self._wrap(f"Text of {self._name}", value)

    def length(self) -> Node:
        """Number of elements, items, keys or characters; 0 for anything else."""
        count = 0
        if isinstance(self._value, (str, list, tuple, dict)) or self.is_dom_element():
            count = len(self._value)
        return self._wrap(f"Length of {self._name}", count)

    def parse_float(self) -> Node:
        return self._wrap(f"Float of {self._name}", _parse_float(self.to_string()))

    def parse_int(self) -> Node:
        return self._wrap(f"Integer of {self._name}", _parse_int(self.to_string()))

    def trim(self) -> Node:
        return self._wrap(f"Trimmed text of {self._name}", self.to_string().strip())

    def lower(self) -> Node:
        return self._wrap(f"Lowercased text of {self._name}", self.to_string().lower())

    def upper(self) -> Node:
        return self._wrap(f"Uppercased text of {self._name}", self.to_string().upper())

    def replace(self, search: str | re.Pattern[str], replacement: str, count: int = 1) -> Node:
        """Replace the first match (or ``count`` matches, 0 meaning all) in the string value."""
        text = self.to_string()
        if isinstance(search, re.Pattern):
            text = search.sub(replacement, text, count=count)
        else:
            text = text.replace(search, replacement, count if count > 0 else -1)
        return self._wrap(f"Replaced text of {self._name}", text)

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    def _iter_children(self) -> Iterator[Node]:
        kind = self.kind
        if kind is ValueKind.ELEMENT:
            items: Any = enumerate(self._value)
        elif kind is ValueKind.ARRAY:
            items = enumerate(self._value)
        elif kind is ValueKind.OBJECT:
            items = self._value.items()
        elif self.is_string():
            items = enumerate(self._value.split())
        else:
            items = ()
        for key, item in items:
            yield self._wrap(f"{self._name}[{key}]", item)

    def each(self, callback: Callable[[Node], Any]) -> Node:
        """Invoke the callback once per element, item, key or word."""
        for child in self._iter_children():
            callback(child)
        return self

    def every(self, callback: Callable[[Node], Any]) -> Node:
        """Assert that the callback returns truthy for every child."""
        with self._response.ignoring_assertions():
            every = all(callback(child) for child in self._iter_children())
        return self.assert_(
            every,
            f"Every {self._name} passed",
            f"Every {self._name} did not pass",
        )

    def some(self, callback: Callable[[Node], Any]) -> Node:
        """Assert that the callback returns truthy for at least one child."""
        with self._response.ignoring_assertions():
            some = any(callback(child) for child in self._iter_children())
        return self.assert_(
            some,
            f"Some {self._name} passed",
            f"No {self._name} passed",
        )

    def any(self, callback: Callable[[Node], Any]) -> Node:
        """Alias for some."""
        return self.some(callback)

    # ------------------------------------------------------------------
    # Assertions
    # ------------------------------------------------------------------

    def assert_(self, statement: Any, pass_message: str, fail_message: str) -> Node:
        """Record one assertion through the owning response and keep chaining."""
        self._response.assert_(bool(statement), pass_message, fail_message)
        return self

    def exists(self) -> Node:
        if self.is_dom_element():
            exists = len(self._value) > 0
        else:
            exists = not self.is_null_or_undefined()
        return self.assert_(exists, f"{self._name} exists", f"{self._name} does not exist")

    def equals(self, value: Any, permissive: bool = False) -> Node:
        match_value = self.to_string()
        expected = value if isinstance(value, str) else stringify(value)
        positive, negative = "equals", "does not equal"
        if permissive:
            expected = expected.lower().strip()
            match_value = match_value.lower().strip()
            positive, negative = "is similar to", "is not similar to"
        return self.assert_(
            match_value == expected,
            f"{self._name} {positive} {expected}",
            f"{self._name} {negative} {expected} ({match_value})",
        )

    def similar_to(self, value: Any) -> Node:
        return self.equals(value, permissive=True)

    def contains(self, needle: Any) -> Node:
        """Does this contain the needle? Works for strings, arrays and objects alike."""
        contains = False
        if self.is_array():
            contains = needle in self._value
        elif self.is_object():
            contains = needle in self._value
        elif not self.is_null_or_undefined():
            contains = stringify(needle) in self.to_string()
        return self.assert_(
            contains,
            f"{self._name} contains {needle}",
            f"{self._name} does not contain {needle}",
        )

    def contain(self, needle: Any) -> Node:
        """Alias for contains."""
        return self.contains(needle)

    def matches(self, pattern: str | re.Pattern[str]) -> Node:
        value = self.to_string()
        compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        return self.assert_(
            compiled.search(value) is not None,
            f"{self._name} matches {compiled.pattern}",
            f"{self._name} does not match {compiled.pattern} ({value})",
        )

    def starts_with(self, match_text: str) -> Node:
        value = "" if self.is_null_or_undefined() else self.to_string()
        return self.assert_(
            not self.is_null_or_undefined() and value.startswith(match_text),
            f"{self._name} starts with {match_text}",
            f"{self._name} does not start with {match_text} ({value})",
        )

    def ends_with(self, match_text: str) -> Node:
        value = "" if self.is_null_or_undefined() else self.to_string()
        return self.assert_(
            not self.is_null_or_undefined() and value.endswith(match_text),
            f"{self._name} ends with {match_text}",
            f"{self._name} does not end with {match_text} ({value})",
        )

    def is_type(self, type_name: str) -> Node:
        my_type = to_type(self._value)
        return self.assert_(
            my_type == type_name.lower(),
            f"{self._name} is type {type_name}",
            f"{self._name} is not type {type_name} ({my_type})",
        )

    def has_class(self, class_name: str) -> Node:
        return self.assert_(
            self.is_dom_element() and self._value.has_class(class_name),
            f"{self._name} has class {class_name}",
            f"{self._name} does not have class {class_name}",
        )

    def greater_than(self, value: Any) -> Node:
        return self.assert_(
            _compare(self._value, value, lambda a, b: a > b),
            f"{self._name} is greater than {value} ({self.to_string()})",
            f"{self._name} is not greater than {value} ({self.to_string()})",
        )

    def greater_than_or_equals(self, value: Any) -> Node:
        return self.assert_(
            _compare(self._value, value, lambda a, b: a >= b),
            f"{self._name} is greater than or equal to {value} ({self.to_string()})",
            f"{self._name} is not greater than or equal to {value} ({self.to_string()})",
        )

    def less_than(self, value: Any) -> Node:
        return self.assert_(
            _compare(self._value, value, lambda a, b: a < b),
            f"{self._name} is less than {value} ({self.to_string()})",
            f"{self._name} is not less than {value} ({self.to_string()})",
        )

    def less_than_or_equals(self, value: Any) -> Node:
        return self.assert_(
            _compare(self._value, value, lambda a, b: a <= b),
            f"{self._name} is less than or equal to {value} ({self.to_string()})",
            f"{self._name} is not less than or equal to {value} ({self.to_string()})",
        )

    # ------------------------------------------------------------------
    # Simulated actions
    # ------------------------------------------------------------------

    def _resolve_url(self, href: str) -> str:
        return urljoin(self._response.scenario.get_url() or "", href)

    def click(self, next_scenario: Scenario) -> Node:
        """Follow a link, or submit the form a submit button belongs to."""
        if self.is_link_element():
            href = self._value.attr("href")
            if href and not next_scenario.has_started():
                next_scenario.open(self._resolve_url(href)).start()
        elif self.is_button_element():
            button_type = (self._value.attr("type") or "submit").lower()
            if button_type == "submit":
                form = self._wrap("form", self._value.parents("form").eq(0))
                form.submit(next_scenario)
        else:
            self._response.fail("Not a clickable element")
        return self

    def submit(self, next_scenario: Scenario) -> Node:
        """Serialize this form and open the next scenario at its action."""
        if not self.is_form_element():
            self._response.fail("Not a form")
            return self
        # No action means submitting to the current page
        action = self._value.attr("action") or self._response.scenario.get_url() or ""
        if action and not next_scenario.has_started():
            method = (self._value.attr("method") or "get").lower()
            next_scenario.method(method)
            if method == "get":
                action = action.split("?")[0] + "?" + self._value.serialize()
            else:
                next_scenario.form(self._value.form_data())
            self.comment("Submitting form")
            next_scenario.open(self._resolve_url(action)).start()
        return self

    def fill_form(self, form_data: dict[str, Any]) -> Node:
        """Set named fields of this form and assert each took the value."""
        if not self.is_form_element():
            self._response.fail("Not a form")
            return self
        self.comment("Filling out form")
        for name, value in form_data.items():
            field = self._value.find(f'[name="{name}"]').set_val(value)
            actual = field.val()
            expected = stringify(value)
            self.assert_(
                actual is not None and stringify(actual) == expected,
                f"Form field {name} equals {expected}",
                f"Form field {name} does not equal {expected}",
            )
        return self

    # Defined last: after this line ``property`` in the class body is the method
    property = prop
