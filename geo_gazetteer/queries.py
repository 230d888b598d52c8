"""
Query functions over a loaded gazetteer dataset.

Every function takes the dataset (the list of countries) as its first
argument; there is no module-level dataset. The tree is never modified:
listings that attach ancestor fields build new view objects, and listings
scoped to a single parent return that parent's own list.

Lookups that miss return None, listings that miss return []. Country, state
and city arguments accept an int id, a name or code string, or one of the
variants from geo_gazetteer.resolver.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from geo_gazetteer.geo import haversine_km, parse_coordinate
from geo_gazetteer.models import (
    City,
    CityWithDistance,
    CityWithLocation,
    CityWithState,
    Country,
    Neighborhood,
    State,
    StateWithCountry,
)
from geo_gazetteer.neighborhoods import (
    FileNeighborhoodSource,
    NeighborhoodSource,
    NeighborhoodSourceError,
    build_neighborhood_source,
    filter_for_city,
)
from geo_gazetteer.resolver import (
    ByCode,
    ByName,
    IdentifierLike,
    resolve_city,
    resolve_country,
    resolve_state,
)

logger = logging.getLogger(__name__)

Dataset = Sequence[Country]


# ── Denormalization ───────────────────────────────────────────────────

def _country_fields(country: Country) -> dict:
    return {
        "country_name": country.name,
        "country_id": country.id,
        "country_iso2": country.iso2,
        "country_iso3": country.iso3,
    }


def _state_fields(state: State) -> dict:
    return {
        "state_name": state.name,
        "state_id": state.id,
        "state_code": state.state_code,
    }


# ── Countries ─────────────────────────────────────────────────────────

def get_all_countries(data: Dataset) -> Dataset:
    return data


def get_country_by_code(data: Dataset, code: str) -> Optional[Country]:
    """Country whose ISO2 or ISO3 code equals `code`, ignoring case."""
    if not isinstance(code, str):
        return None
    return resolve_country(data, ByCode(code))


def get_country_by_name(data: Dataset, name: str) -> Optional[Country]:
    if not isinstance(name, str):
        return None
    return resolve_country(data, ByName(name))


# ── States ────────────────────────────────────────────────────────────

def get_all_states(data: Dataset) -> list[StateWithCountry]:
    """Every state of every country, in dataset order, tagged with its country."""
    all_states = []
    for country in data:
        extra = _country_fields(country)
        for state in country.states:
            all_states.append(StateWithCountry.model_validate({**dict(state), **extra}))
    return all_states


def find_country(data: Dataset, country: IdentifierLike) -> Optional[Country]:
    """Country by id, name or either ISO code."""
    return resolve_country(data, country)


def get_states_by_country(data: Dataset, country: IdentifierLike) -> list[State]:
    found = find_country(data, country)
    return found.states if found is not None else []


def get_state_by_code(data: Dataset, country: IdentifierLike, state_code: str) -> Optional[State]:
    if not isinstance(state_code, str):
        return None
    return resolve_state(get_states_by_country(data, country), ByCode(state_code))


def find_state(data: Dataset, country: IdentifierLike, state: IdentifierLike) -> Optional[State]:
    """State by id, name or state code within a resolved country."""
    return resolve_state(get_states_by_country(data, country), state)


# ── Cities ────────────────────────────────────────────────────────────

def get_all_cities(data: Dataset) -> list[CityWithLocation]:
    """Every city in dataset order, tagged with its state and country."""
    all_cities = []
    for country in data:
        country_extra = _country_fields(country)
        for state in country.states:
            extra = {**_state_fields(state), **country_extra}
            for city in state.cities:
                all_cities.append(CityWithLocation.model_validate({**dict(city), **extra}))
    return all_cities


def get_cities_by_country(data: Dataset, country: IdentifierLike) -> list[CityWithState]:
    cities = []
    for state in get_states_by_country(data, country):
        extra = _state_fields(state)
        for city in state.cities:
            cities.append(CityWithState.model_validate({**dict(city), **extra}))
    return cities


def get_cities_by_state(data: Dataset, country: IdentifierLike, state: IdentifierLike) -> list[City]:
    found = find_state(data, country, state)
    return found.cities if found is not None else []


def get_city_by_name(
    data: Dataset, country: IdentifierLike, state: IdentifierLike, city_name: str
) -> Optional[City]:
    if not isinstance(city_name, str):
        return None
    return resolve_city(get_cities_by_state(data, country, state), ByName(city_name))


# ── Neighborhoods ─────────────────────────────────────────────────────

def get_neighborhoods_by_city(
    data: Dataset,
    country: IdentifierLike,
    state: IdentifierLike,
    city: IdentifierLike,
    base_path: Optional[str] = None,
    source: Optional[NeighborhoodSource] = None,
) -> list[Neighborhood]:
    """
    Neighborhoods of one city, read from its state's partition.

    The source is only consulted once both the state and the city resolve.
    With no explicit source, a `base_path` selects a filesystem source rooted
    there; otherwise the configured source is used. Source failures are
    logged and reported as no neighborhoods.
    """
    found_state = find_state(data, country, state)
    if found_state is None:
        return []

    found_city = resolve_city(found_state.cities, city)
    if found_city is None:
        return []

    if source is None:
        source = FileNeighborhoodSource(base_path) if base_path is not None else build_neighborhood_source()

    try:
        records = source.load(found_state.state_code, base_path)
    except NeighborhoodSourceError as e:
        logger.error("Error loading neighborhoods for %s/%s: %s", found_state.state_code, found_city.name, e)
        return []

    return filter_for_city(records, found_city.name)


# ── Search ────────────────────────────────────────────────────────────

def search_cities(
    data: Dataset, query: str, country: Optional[IdentifierLike] = None
) -> list[CityWithState]:
    """
    Cities whose name contains `query`, ignoring case, in dataset order.
    Scoped to one country when given; an empty query matches every city.
    """
    term = query.casefold()
    cities = get_all_cities(data) if country is None else get_cities_by_country(data, country)
    return [c for c in cities if term in c.name.casefold()]


def get_cities_by_geo_location(
    data: Dataset, latitude: float, longitude: float, radius_km: float
) -> list[CityWithDistance]:
    """
    Cities within `radius_km` (inclusive) of a point, nearest first.
    Distances are rounded to 2 decimals; equal distances keep dataset order.
    Cities without parseable coordinates are skipped.
    """
    results = []
    for city in get_all_cities(data):
        lat = parse_coordinate(city.latitude)
        lon = parse_coordinate(city.longitude)
        if lat is None or lon is None:
            continue

        distance = haversine_km(latitude, longitude, lat, lon)
        if distance <= radius_km:
            results.append(
                CityWithDistance.model_validate({**dict(city), "distance_km": round(distance, 2)})
            )

    results.sort(key=lambda c: c.distance_km)
    return results
