"""
Gazetteer: the query functions bound to one dataset and one neighborhood source.

    gz = Gazetteer.from_settings()
    gz.get_city_by_name("US", "CA", "San Francisco")
    gz.get_cities_by_geo_location(37.77, -122.42, 25)

The instance only holds references; it adds no state of its own.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from geo_gazetteer import queries
from geo_gazetteer.dataset import load_default_dataset
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
from geo_gazetteer.neighborhoods import NeighborhoodSource, build_neighborhood_source
from geo_gazetteer.resolver import IdentifierLike


class Gazetteer:
    def __init__(self, data: Sequence[Country], neighborhood_source: Optional[NeighborhoodSource] = None):
        self.data = data
        self.neighborhood_source = neighborhood_source or build_neighborhood_source()

    @classmethod
    def from_settings(cls, dataset_path: Optional[Union[str, Path]] = None) -> "Gazetteer":
        return cls(load_default_dataset(dataset_path), build_neighborhood_source())

    def find_country(self, country: IdentifierLike) -> Optional[Country]:
        return queries.find_country(self.data, country)

    def find_state(self, country: IdentifierLike, state: IdentifierLike) -> Optional[State]:
        return queries.find_state(self.data, country, state)

    def get_all_countries(self) -> Sequence[Country]:
        return queries.get_all_countries(self.data)

    def get_country_by_code(self, code: str) -> Optional[Country]:
        return queries.get_country_by_code(self.data, code)

    def get_country_by_name(self, name: str) -> Optional[Country]:
        return queries.get_country_by_name(self.data, name)

    def get_all_states(self) -> list[StateWithCountry]:
        return queries.get_all_states(self.data)

    def get_states_by_country(self, country: IdentifierLike) -> list[State]:
        return queries.get_states_by_country(self.data, country)

    def get_state_by_code(self, country: IdentifierLike, state_code: str) -> Optional[State]:
        return queries.get_state_by_code(self.data, country, state_code)

    def get_all_cities(self) -> list[CityWithLocation]:
        return queries.get_all_cities(self.data)

    def get_cities_by_country(self, country: IdentifierLike) -> list[CityWithState]:
        return queries.get_cities_by_country(self.data, country)

    def get_cities_by_state(self, country: IdentifierLike, state: IdentifierLike) -> list[City]:
        return queries.get_cities_by_state(self.data, country, state)

    def get_city_by_name(self, country: IdentifierLike, state: IdentifierLike, city_name: str) -> Optional[City]:
        return queries.get_city_by_name(self.data, country, state, city_name)

    def get_neighborhoods_by_city(
        self,
        country: IdentifierLike,
        state: IdentifierLike,
        city: IdentifierLike,
        base_path: Optional[str] = None,
    ) -> list[Neighborhood]:
        return queries.get_neighborhoods_by_city(
            self.data, country, state, city, base_path=base_path, source=self.neighborhood_source
        )

    def search_cities(self, query: str, country: Optional[IdentifierLike] = None) -> list[CityWithState]:
        return queries.search_cities(self.data, query, country)

    def get_cities_by_geo_location(self, latitude: float, longitude: float, radius_km: float) -> list[CityWithDistance]:
        return queries.get_cities_by_geo_location(self.data, latitude, longitude, radius_km)
