"""
Tests for the HTTP API, served in-process with FastAPI's TestClient.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from geo_gazetteer.api import create_app
from geo_gazetteer.gazetteer import Gazetteer


@pytest.fixture
def client(data, source):
    return TestClient(create_app(Gazetteer(data, source)))


class TestCountryEndpoints:
    def test_list(self, client):
        resp = client.get("/countries")
        assert resp.status_code == 200
        assert [c["iso3"] for c in resp.json()] == ["USA", "CAN"]

    @pytest.mark.parametrize("ident", ["US", "usa", "United States", "1"])
    def test_get_by_any_identifier(self, client, ident):
        resp = client.get(f"/countries/{ident}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "United States"

    def test_not_found(self, client):
        resp = client.get("/countries/Atlantis")
        assert resp.status_code == 404

    def test_superscript_digit_is_not_found(self, client):
        assert client.get("/countries/\u00b2").status_code == 404


class TestStateEndpoints:
    def test_all_states(self, client):
        states = client.get("/states").json()
        assert len(states) == 3
        assert states[2]["country_name"] == "Canada"

    def test_states_of_country(self, client):
        states = client.get("/countries/CA/states").json()
        assert [s["name"] for s in states] == ["Ontario"]

    def test_states_of_unknown_country(self, client):
        resp = client.get("/countries/XX/states")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_get_state(self, client):
        assert client.get("/countries/US/states/ny").json()["id"] == 102
        assert client.get("/countries/1/states/101").json()["state_code"] == "CA"

    def test_state_not_found(self, client):
        assert client.get("/countries/US/states/FL").status_code == 404


class TestCityEndpoints:
    def test_all_cities(self, client):
        cities = client.get("/cities").json()
        assert len(cities) == 4
        assert cities[3]["country_iso2"] == "CA"
        assert cities[3]["state_code"] == "ON"

    def test_cities_of_country(self, client):
        cities = client.get("/countries/US/cities").json()
        assert len(cities) == 3
        assert cities[0]["state_name"] == "California"

    def test_cities_of_state(self, client):
        cities = client.get("/countries/US/states/California/cities").json()
        assert [c["name"] for c in cities] == ["San Francisco", "Los Angeles"]

    def test_get_city(self, client):
        assert client.get("/countries/US/states/CA/cities/los angeles").json()["id"] == 1002

    def test_city_not_found(self, client):
        assert client.get("/countries/US/states/CA/cities/San Diego").status_code == 404

    def test_neighborhoods(self, client, source):
        resp = client.get("/countries/US/states/CA/cities/San Francisco/neighborhoods")
        assert resp.json() == [{"name": "Mission District"}, {"name": "SoMa"}]
        assert source.calls == [("CA", None)]

    def test_neighborhoods_of_unknown_city(self, client, source):
        resp = client.get("/countries/US/states/CA/cities/Atlantis/neighborhoods")
        assert resp.json() == []
        assert source.calls == []


class TestSearchEndpoint:
    def test_search(self, client):
        body = client.get("/search", params={"q": "San"}).json()
        assert body["total"] == 1
        assert body["cities"][0]["name"] == "San Francisco"
        assert body["cities"][0]["country_name"] == "United States"

    def test_search_in_country(self, client):
        body = client.get("/search", params={"q": "new", "country": "US"}).json()
        assert [c["name"] for c in body["cities"]] == ["New York City"]
        assert body["country"] == "US"

    def test_empty_country_is_unscoped(self, client):
        body = client.get("/search", params={"q": "o", "country": ""}).json()
        assert [c["name"] for c in body["cities"]] == ["San Francisco", "Los Angeles", "New York City", "Toronto"]


class TestNearbyEndpoint:
    def test_nearby(self, client):
        body = client.get("/nearby", params={"lat": 36.5, "lon": -120.5, "radius_km": 400}).json()
        assert [c["name"] for c in body["cities"]] == ["San Francisco", "Los Angeles"]
        assert body["cities"][0]["distance_km"] < body["cities"][1]["distance_km"]
        assert body["total"] == 2

    def test_radius_limit(self, client):
        resp = client.get("/nearby", params={"lat": 0, "lon": 0, "radius_km": 1_000_000})
        assert resp.status_code == 400

    def test_invalid_latitude(self, client):
        resp = client.get("/nearby", params={"lat": 95, "lon": 0, "radius_km": 10})
        assert resp.status_code == 422


class TestHealth:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body == {
            "status": "ok",
            "countries": 2,
            "states": 3,
            "cities": 4,
            "neighborhood_source": "recording",
        }
