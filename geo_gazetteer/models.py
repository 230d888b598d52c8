"""
Pydantic models for the gazetteer hierarchy and the API responses.
These are pure data objects; the loaded tree is never mutated after validation.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny


# ── Dataset tree ──────────────────────────────────────────────────────

class Neighborhood(BaseModel):
    name: str


class City(BaseModel):
    """A city as stored under its state. Coordinates are decimal-degree strings."""
    id: int
    name: str
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    neighborhoods: Optional[list[Neighborhood]] = None

    # The published dataset carries more attributes than we query on
    model_config = ConfigDict(extra="allow")


class State(BaseModel):
    id: int
    name: str
    state_code: str
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    cities: list[City] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class Country(BaseModel):
    id: int
    name: str
    iso2: str
    iso3: str
    capital: Optional[str] = None
    currency: Optional[str] = None
    states: list[State] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


# ── Denormalized views ────────────────────────────────────────────────

class StateWithCountry(State):
    """A state surfaced outside its country, carrying the country's identity."""
    country_name: str
    country_id: int
    country_iso2: str
    country_iso3: str


class CityWithState(City):
    state_name: str
    state_id: int
    state_code: str


class CityWithLocation(CityWithState):
    """A city carrying both its state's and its country's identity."""
    country_name: str
    country_id: int
    country_iso2: str
    country_iso3: str


class CityWithDistance(CityWithLocation):
    distance_km: float


# ── Neighborhood source records ───────────────────────────────────────

class NeighborhoodRecord(BaseModel):
    """One row of a per-state neighborhoods.json file."""
    city: str
    neighborhood: str

    model_config = ConfigDict(extra="ignore")


# ── API response models ───────────────────────────────────────────────

class SearchResponse(BaseModel):
    # Unscoped searches return CityWithLocation, which must keep its country fields
    cities: list[SerializeAsAny[CityWithState]]
    total: int
    query: str
    country: Optional[str] = None


class NearbyResponse(BaseModel):
    cities: list[CityWithDistance]
    total: int
    center_lat: float
    center_lon: float
    radius_km: float


class HealthResponse(BaseModel):
    status: str = "ok"
    countries: int = 0
    states: int = 0
    cities: int = 0
    neighborhood_source: Optional[str] = None
