"""
FastAPI service exposing the gazetteer.

Endpoints:
  GET /countries                                   - All countries
  GET /countries/{country}                         - One country (id, name, ISO2 or ISO3)
  GET /countries/{country}/states                  - States of a country
  GET /countries/{country}/states/{state}          - One state (id, name or code)
  GET /countries/{country}/cities                  - Cities of a country, tagged with their state
  GET /countries/{country}/states/{state}/cities   - Cities of a state
  GET /countries/{country}/states/{state}/cities/{city}                 - One city by name
  GET /countries/{country}/states/{state}/cities/{city}/neighborhoods   - Neighborhoods of a city
  GET /states                                      - All states, tagged with their country
  GET /cities                                      - All cities, tagged with state and country
  GET /search                                      - City name substring search
  GET /nearby                                      - Cities within radius km of a lat/lon point
  GET /health                                      - Dataset counts
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from geo_gazetteer.config import get_settings
from geo_gazetteer.gazetteer import Gazetteer
from geo_gazetteer.models import (
    City,
    CityWithLocation,
    CityWithState,
    Country,
    HealthResponse,
    Neighborhood,
    NearbyResponse,
    SearchResponse,
    State,
    StateWithCountry,
)
from geo_gazetteer.resolver import parse_identifier

logger = logging.getLogger(__name__)


# ── App factory ───────────────────────────────────────────────────────

def create_app(gazetteer: Optional[Gazetteer] = None) -> FastAPI:
    """
    Build the app. Without a gazetteer, the configured dataset is loaded
    once at startup and shared by every request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "gazetteer", None) is None:
            logger.info("Loading gazetteer dataset...")
            app.state.gazetteer = Gazetteer.from_settings()
        gz: Gazetteer = app.state.gazetteer
        logger.info(
            "Gazetteer ready: %d countries, neighborhoods via '%s'",
            len(gz.data), gz.neighborhood_source.name,
        )
        yield
        logger.info("API server shut down.")

    app = FastAPI(
        title="Geo Gazetteer API",
        description="Countries, states, cities and neighborhoods lookup",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.gazetteer = gazetteer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


def get_gazetteer(request: Request) -> Gazetteer:
    return request.app.state.gazetteer


def _not_found(what: str, value: str) -> HTTPException:
    return HTTPException(404, f"{what} '{value}' not found")


# ══════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ══════════════════════════════════════════════════════════════════════

router = APIRouter()


@router.get("/countries", response_model=list[Country])
def list_countries(gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_all_countries()


@router.get("/countries/{country}", response_model=Country)
def get_country(country: str, gz: Gazetteer = Depends(get_gazetteer)):
    """Resolve a country by numeric id, name, ISO2 or ISO3 code."""
    found = gz.find_country(parse_identifier(country))
    if found is None:
        raise _not_found("Country", country)
    return found


@router.get("/countries/{country}/states", response_model=list[State])
def list_states_of_country(country: str, gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_states_by_country(parse_identifier(country))


@router.get("/countries/{country}/states/{state}", response_model=State)
def get_state(country: str, state: str, gz: Gazetteer = Depends(get_gazetteer)):
    """Resolve a state by numeric id, name or state code."""
    found = gz.find_state(parse_identifier(country), parse_identifier(state))
    if found is None:
        raise _not_found("State", state)
    return found


@router.get("/countries/{country}/cities", response_model=list[CityWithState])
def list_cities_of_country(country: str, gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_cities_by_country(parse_identifier(country))


@router.get("/countries/{country}/states/{state}/cities", response_model=list[City])
def list_cities_of_state(country: str, state: str, gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_cities_by_state(parse_identifier(country), parse_identifier(state))


@router.get("/countries/{country}/states/{state}/cities/{city}", response_model=City)
def get_city(country: str, state: str, city: str, gz: Gazetteer = Depends(get_gazetteer)):
    found = gz.get_city_by_name(parse_identifier(country), parse_identifier(state), city)
    if found is None:
        raise _not_found("City", city)
    return found


@router.get(
    "/countries/{country}/states/{state}/cities/{city}/neighborhoods",
    response_model=list[Neighborhood],
)
def list_neighborhoods(country: str, state: str, city: str, gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_neighborhoods_by_city(
        parse_identifier(country), parse_identifier(state), parse_identifier(city)
    )


@router.get("/states", response_model=list[StateWithCountry])
def list_states(gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_all_states()


@router.get("/cities", response_model=list[CityWithLocation])
def list_cities(gz: Gazetteer = Depends(get_gazetteer)):
    return gz.get_all_cities()


@router.get("/search", response_model=SearchResponse)
def search(
    q: str = Query("", max_length=200, description="Substring of the city name"),
    country: Optional[str] = Query(None, description="Limit to one country (id, name or ISO code)"),
    gz: Gazetteer = Depends(get_gazetteer),
):
    scope = parse_identifier(country) if country else None
    cities = gz.search_cities(q, scope)
    return SearchResponse(cities=cities, total=len(cities), query=q, country=country)


@router.get("/nearby", response_model=NearbyResponse)
def nearby(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lon: float = Query(..., ge=-180, le=180, description="Longitude"),
    radius_km: Optional[float] = Query(None, ge=0, description="Search radius in km"),
    gz: Gazetteer = Depends(get_gazetteer),
):
    settings = get_settings().api
    if radius_km is None:
        radius_km = settings.default_radius_km
    if radius_km > settings.max_radius_km:
        raise HTTPException(400, f"radius_km must be <= {settings.max_radius_km}")

    cities = gz.get_cities_by_geo_location(lat, lon, radius_km)
    return NearbyResponse(
        cities=cities,
        total=len(cities),
        center_lat=lat,
        center_lon=lon,
        radius_km=radius_km,
    )


@router.get("/health", response_model=HealthResponse)
def health_check(gz: Gazetteer = Depends(get_gazetteer)):
    states = sum(len(c.states) for c in gz.data)
    cities = sum(len(s.cities) for c in gz.data for s in c.states)
    return HealthResponse(
        status="ok",
        countries=len(gz.data),
        states=states,
        cities=cities,
        neighborhood_source=gz.neighborhood_source.name,
    )


app = create_app()
