"""
Tests for identifier resolution.
"""

from __future__ import annotations

import pytest

from geo_gazetteer.resolver import (
    ByCode,
    ById,
    ByName,
    ByNameOrCode,
    as_identifier,
    parse_identifier,
    resolve_city,
    resolve_country,
    resolve_state,
)


class TestAsIdentifier:
    def test_int_is_id(self):
        assert as_identifier(7) == ById(7)

    def test_str_is_name_or_code(self):
        assert as_identifier("US") == ByNameOrCode("US")

    def test_variant_passes_through(self):
        assert as_identifier(ByCode("us")) == ByCode("us")

    @pytest.mark.parametrize("raw", [None, True, False, 1.5, ["US"], {"id": 1}])
    def test_other_types_match_nothing(self, raw):
        assert as_identifier(raw) is None


class TestParseIdentifier:
    def test_digits_become_id(self):
        assert parse_identifier("101") == ById(101)
        assert parse_identifier(" 2 ") == ById(2)

    def test_text_stays_text(self):
        assert parse_identifier("California") == ByNameOrCode("California")
        assert parse_identifier("-1") == ByNameOrCode("-1")

    @pytest.mark.parametrize("text", ["\u00b2", "\u2460", "\u0663"])
    def test_non_ascii_digits_stay_text(self, text):
        assert parse_identifier(text) == ByNameOrCode(text)


class TestResolveCountry:
    def test_by_id(self, data):
        assert resolve_country(data, 2).name == "Canada"
        assert resolve_country(data, ById(1)).name == "United States"

    def test_by_iso2_and_iso3_any_case(self, data):
        assert resolve_country(data, "ca").name == "Canada"
        assert resolve_country(data, "usa").name == "United States"
        assert resolve_country(data, ByCode("Can")).name == "Canada"

    def test_by_name_any_case(self, data):
        assert resolve_country(data, "united states").iso2 == "US"

    def test_by_name_ignores_codes(self, data):
        assert resolve_country(data, ByName("US")) is None

    def test_by_code_ignores_names(self, data):
        assert resolve_country(data, ByCode("Canada")) is None

    def test_id_is_not_compared_to_text(self, data):
        assert resolve_country(data, "1") is None

    def test_no_partial_match(self, data):
        assert resolve_country(data, "United") is None

    def test_unknown(self, data):
        assert resolve_country(data, 99) is None
        assert resolve_country(data, None) is None

    def test_first_match_wins(self, data):
        twin = data[1].model_copy(update={"id": 3})
        assert resolve_country([data[1], twin], "Canada").id == 2


class TestResolveState:
    def test_by_code_name_and_id(self, data):
        states = data[0].states
        assert resolve_state(states, "ny").id == 102
        assert resolve_state(states, "california").id == 101
        assert resolve_state(states, 102).name == "New York"

    def test_code_variant(self, data):
        assert resolve_state(data[0].states, ByCode("ca")).name == "California"
        assert resolve_state(data[0].states, ByCode("California")) is None


class TestResolveCity:
    def test_by_name_and_id(self, data):
        cities = data[0].states[0].cities
        assert resolve_city(cities, "los angeles").id == 1002
        assert resolve_city(cities, 1001).name == "San Francisco"

    def test_cities_have_no_codes(self, data):
        assert resolve_city(data[0].states[0].cities, ByCode("San Francisco")) is None
