"""Unit tests for the request validation rules."""

import pytest

from products_api.api.validation import (
    RequestInput,
    boolean,
    CheckFailed,
    integer,
    numeric,
    run_rules,
    valid_availability,
    valid_id,
    valid_name,
    valid_price,
)
from products_api.core.errors import RequestValidationFailed


def make_input(params=None, body=None) -> RequestInput:
    return RequestInput(params=params or {}, body=body or {})


class TestIntegerCheck:
    @pytest.mark.parametrize("raw, expected", [("1", 1), ("42", 42), ("-3", -3), (7, 7)])
    def test_accepts_integers(self, raw, expected):
        assert integer(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", "", "1e3", True, None, "١٢"])
    def test_rejects_everything_else(self, raw):
        with pytest.raises(CheckFailed):
            integer(raw)


class TestNumericCheck:
    @pytest.mark.parametrize("raw, expected", [(10, 10.0), (2.5, 2.5), ("3.75", 3.75)])
    def test_accepts_numbers_and_numeric_strings(self, raw, expected):
        assert numeric(raw) == expected

    @pytest.mark.parametrize("raw", ["hola", True, [1], {"a": 1}, "nan", "inf"])
    def test_rejects_non_numbers(self, raw):
        with pytest.raises(CheckFailed):
            numeric(raw)


class TestBooleanCheck:
    @pytest.mark.parametrize(
        "raw, expected",
        [(True, True), (False, False), ("true", True), ("false", False), ("1", True), ("0", False)],
    )
    def test_accepts_booleans(self, raw, expected):
        assert boolean(raw) is expected

    @pytest.mark.parametrize("raw", ["yes", 1, 0, None, "True"])
    def test_rejects_non_booleans(self, raw):
        with pytest.raises(CheckFailed):
            boolean(raw)


class TestRules:
    def test_id_rule_stores_parsed_value(self):
        data = run_rules(make_input(params={"id": "12"}), [valid_id()])

        assert data.cleaned == {"id": 12}

    def test_id_rule_error_shape(self):
        error = valid_id()(make_input(params={"id": "x"}))

        assert error == {
            "type": "field",
            "value": "x",
            "msg": "Id must be an integer",
            "path": "id",
            "location": "params",
        }

    def test_name_is_stripped(self):
        data = run_rules(make_input(body={"name": "  Desk  "}), [valid_name()])

        assert data.cleaned["name"] == "Desk"

    def test_name_must_be_text(self):
        error = valid_name()(make_input(body={"name": 123}))

        assert error["msg"] == "Name is required"

    @pytest.mark.parametrize(
        "body, message",
        [
            ({}, "Price is required"),
            ({"price": ""}, "Price is required"),
            ({"price": None}, "Price is required"),
            ({"price": "abc"}, "Price must be a number"),
            ({"price": 0}, "Price must be greater than 0"),
            ({"price": -5}, "Price must be greater than 0"),
        ],
    )
    def test_price_chain_reports_first_failure(self, body, message):
        error = valid_price()(make_input(body=body))

        assert error["msg"] == message
        assert error["path"] == "price"

    def test_missing_value_is_reported_as_null(self):
        error = valid_availability()(make_input())

        assert error["value"] is None
        assert error["msg"] == "Availability must be a boolean"

    def test_run_rules_collects_every_failure(self):
        rules = [valid_id(), valid_name(), valid_price(), valid_availability()]

        with pytest.raises(RequestValidationFailed) as exc_info:
            run_rules(make_input(params={"id": "nope"}), rules)

        assert [e["path"] for e in exc_info.value.errors] == [
            "id",
            "name",
            "price",
            "availability",
        ]
        assert exc_info.value.status_code == 400

    def test_run_rules_passes_clean_input(self):
        rules = [valid_name(), valid_price(), valid_availability()]
        body = {"name": "Lamp", "price": "19.5", "availability": "false"}

        data = run_rules(make_input(body=body), rules)

        assert data.cleaned == {"name": "Lamp", "price": 19.5, "availability": False}


def test_name_length_limit():
    ok = run_rules(make_input(body={"name": "  " + "y" * 100 + "  "}), [valid_name()])
    error = valid_name()(make_input(body={"name": "y" * 101}))

    assert ok.cleaned["name"] == "y" * 100
    assert error["msg"] == "Name must be at most 100 characters"
