"""Tests for Node values, transforms and assertions."""

import math
import re

import pytest

from fluentcheck.domain.enums import LogType
from tests.support import log_entries


class TestAssertions:
    """Test assertions and the Pass/Fail lines they produce."""

    def test_equals_passes(self, json_response, scenario):
        json_response.select("meta.count").equals(3)
        assert log_entries(scenario)[-1] == ("pass", "meta.count equals 3")

    def test_equals_fails_with_actual_value(self, json_response, scenario):
        json_response.select("data.owner.name").equals("ada lovelace")
        assert log_entries(scenario)[-1] == (
            "fail",
            "data.owner.name does not equal ada lovelace ( Ada Lovelace )",
        )

    def test_permissive_equals(self, json_response, scenario):
        """Permissive comparison ignores case and surrounding whitespace."""
        json_response.select("data.owner.name").equals("ADA LOVELACE", permissive=True)
        assert log_entries(scenario)[-1] == ("pass", "data.owner.name is similar to ada lovelace")
        json_response.select("data.owner.name").similar_to(" ada lovelace")
        assert scenario.get_log()[-1].type is LogType.PASS

    def test_equals_booleans_and_null(self, json_response, scenario):
        json_response.select("data.owner.active").equals(True)
        json_response.select("data.items[2].title").equals(None)
        assert [t for t, _ in log_entries(scenario)[-2:]] == ["pass", "pass"]

    def test_exists(self, json_response, scenario):
        json_response.select("meta").exists()
        json_response.select("nope").exists()
        json_response.select("data.items[2].title").exists()
        assert log_entries(scenario)[-3:] == [
            ("pass", "meta exists"),
            ("fail", "nope does not exist"),
            ("fail", "data.items[2].title does not exist"),
        ]

    def test_exists_on_elements(self, html_response, scenario):
        html_response.select("li").exists()
        html_response.select("table").exists()
        assert log_entries(scenario) == [("pass", "li exists"), ("fail", "table does not exist")]

    def test_not_flips_outcome_and_message(self, json_response, scenario):
        json_response.select("nope").not_().exists()
        json_response.select("meta").not_().exists()
        assert log_entries(scenario)[-2:] == [
            ("pass", "NOT: nope does not exist"),
            ("fail", "NOT: meta exists"),
        ]

    def test_not_applies_once(self, json_response, scenario):
        node = json_response.select("meta")
        node.not_().exists()
        node.exists()
        assert [t for t, _ in log_entries(scenario)[-2:]] == ["fail", "pass"]

    def test_label_overrides_both_messages(self, json_response, scenario):
        json_response.select("meta.status").label("Status is ok").equals("bad")
        json_response.select("meta.status").label("Status is ok").equals("ok")
        assert log_entries(scenario)[-2:] == [("fail", "Status is ok"), ("pass", "Status is ok")]

    def test_assertions_keep_chaining_after_failure(self, json_response, scenario):
        node = json_response.select("meta.status")
        assert node.equals("bad").equals("ok") is node
        assert [t for t, _ in log_entries(scenario)[-2:]] == ["fail", "pass"]

    def test_contains(self, json_response, scenario):
        json_response.select("data.items[0].tags").contains("a")
        json_response.select("meta").contains("count")
        json_response.select("price").contain("USD")
        json_response.select("nope").contains("x")
        assert [t for t, _ in log_entries(scenario)[-4:]] == ["pass", "pass", "pass", "fail"]

    def test_matches(self, json_response, scenario):
        json_response.select("price").matches(r"^\d+\.\d{2}")
        json_response.select("price").matches(re.compile(r"EUR$"))
        assert log_entries(scenario)[-2:] == [
            ("pass", r"price matches ^\d+\.\d{2}"),
            ("fail", "price does not match EUR$ (12.50 USD)"),
        ]

    def test_starts_and_ends_with(self, json_response, scenario):
        json_response.select("price").starts_with("12")
        json_response.select("price").ends_with("USD")
        json_response.select("nope").starts_with("")
        assert [t for t, _ in log_entries(scenario)[-3:]] == ["pass", "pass", "fail"]

    @pytest.mark.parametrize(
        "path,type_name",
        [
            ("data.items", "array"),
            ("meta", "object"),
            ("meta.count", "number"),
            ("meta.status", "string"),
            ("data.owner.active", "boolean"),
            ("data.items[2].title", "null"),
            ("nope", "undefined"),
        ],
    )
    def test_is_type(self, json_response, scenario, path, type_name):
        json_response.select(path).is_type(type_name)
        assert log_entries(scenario)[-1] == ("pass", f"{path} is type {type_name}")

    def test_is_type_failure_reports_actual(self, json_response, scenario):
        json_response.select("meta.count").is_type("string")
        assert log_entries(scenario)[-1] == ("fail", "meta.count is not type string (number)")

    def test_comparisons(self, json_response, scenario):
        count = json_response.select("meta.count")
        count.greater_than(2).greater_than_or_equals(3).less_than(4).less_than_or_equals(3)
        assert [t for t, _ in log_entries(scenario)[-4:]] == ["pass"] * 4

    def test_incomparable_values_fail(self, json_response, scenario):
        json_response.select("meta.count").less_than("x")
        assert log_entries(scenario)[-1][0] == "fail"

    def test_has_class(self, html_response, scenario):
        html_response.select("li").first().has_class("first")
        html_response.select("li").first().has_class("last")
        assert [t for t, _ in log_entries(scenario)] == ["pass", "fail"]

    def test_has_class_on_data_fails(self, json_response, scenario):
        json_response.select("meta").has_class("x")
        assert log_entries(scenario)[-1] == ("fail", "meta does not have class x")


class TestTransforms:
    """Test value transforms; none of them log."""

    def test_text_and_val(self, json_response, html_response):
        assert json_response.select("meta.count").text().value == "3"
        assert json_response.select("nope").text().value is None
        assert html_response.select("input[name=q]").val().value == "kittens"
        assert html_response.select("li").first().text().value == "One"

    def test_length(self, json_response):
        assert json_response.select("data.items").length().value == 3
        assert json_response.select("data.owner").length().value == 2
        assert json_response.select("price").length().value == 9
        assert json_response.select("meta.count").length().value == 0

    def test_length_of_elements(self, html_response):
        assert html_response.select("li").length().value == 3

    def test_parse_numbers(self, json_response):
        assert json_response.select("price").parse_float().value == 12.5
        assert json_response.select("price").parse_int().value == 12
        assert math.isnan(json_response.select("meta.status").parse_float().value)
        assert math.isnan(json_response.select("meta.status").parse_int().value)

    def test_case_and_trim(self, json_response):
        name = json_response.select("data.owner.name")
        assert name.trim().value == "Ada Lovelace"
        assert name.lower().value == " ada lovelace "
        assert name.upper().trim().value == "ADA LOVELACE"

    def test_replace_first_by_default(self, json_response):
        price = json_response.select("price")
        assert price.replace(" ", "_").value == "12.50_USD"
        assert price.replace("0", "9").value == "12.59 USD"

    def test_replace_all_and_regex(self, json_response):
        name = json_response.select("data.owner.name")
        assert name.replace(" ", "", count=0).value == "AdaLovelace"
        assert name.replace(re.compile(r"\s+"), "-", count=0).value == "-Ada-Lovelace-"

    def test_transform_names(self, json_response):
        assert json_response.select("price").length().name == "Length of price"
        assert json_response.select("price").trim().name == "Trimmed text of price"

    def test_transforms_do_not_log(self, json_response, scenario):
        before = len(scenario.get_log())
        json_response.select("price").trim().lower().parse_float()
        assert len(scenario.get_log()) == before


class TestProperties:
    """Test attribute/prop/data lookups and their fallbacks."""

    def test_attribute_on_object(self, json_response):
        name = json_response.select("data.owner").attribute("name")
        assert name.value == " Ada Lovelace "
        assert name.name == "data.owner[name]"

    def test_attribute_on_array_index(self, json_response):
        assert json_response.select("data.items[0].tags").attribute("1").value == "b"

    def test_attribute_on_element(self, html_response):
        assert html_response.select("a").first().attribute("href").value == "/one"
        assert html_response.select("a").first().property("tagName").value == "A"
        assert html_response.select("a").first().data("itemId").value == 1

    def test_falls_back_to_last_selected_element(self, html_response):
        """A scalar node reads attributes from the last selected element."""
        text = html_response.select("a").first().text()
        assert text.attribute("href").value == "/one"

    def test_missing_attribute(self, json_response):
        assert json_response.select("meta").attribute("missing").value is None


class TestExtraction:
    """Test get/to_string and comment passthroughs."""

    def test_get(self, json_response, html_response):
        items = json_response.select("data.items")
        assert items.get(1)["id"] == 2
        assert items.get(9) is None
        assert items.get() is items.value
        assert html_response.select("li").get(2).text() == "Three"

    def test_to_string(self, json_response, html_response):
        assert str(json_response.select("data.owner.active")) == "true"
        assert str(json_response.select("data.items[0].tags")) == "a,b"
        assert str(html_response.select("input[name=q]")) == "kittens"

    def test_echo_and_type_of(self, json_response, scenario):
        json_response.select("meta.count").echo().type_of()
        assert log_entries(scenario)[-2:] == [
            ("comment", "meta.count = 3"),
            ("comment", "typeof meta.count = number"),
        ]

    def test_response_passthroughs(self, html_response, scenario):
        node = html_response.select("li")
        node.status().equals(200)
        node.headers("Content-Type").contains("text/html")
        assert node.and_() is html_response.get_last_element()
        assert node.load_time().value == 12.5
        assert log_entries(scenario) == [
            ("pass", "HTTP Status equals 200"),
            ("pass", "HTTP Headers[Content-Type] contains text/html"),
        ]
