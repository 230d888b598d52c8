"""
Shared fixtures: a two-country sample dataset and neighborhood doubles.
"""

from __future__ import annotations

import json
from typing import Optional

import pytest

from geo_gazetteer.dataset import parse_dataset
from geo_gazetteer.models import NeighborhoodRecord
from geo_gazetteer.neighborhoods import NeighborhoodSource, NeighborhoodSourceError

SAMPLE_DATA = [
    {
        "id": 1,
        "name": "United States",
        "iso3": "USA",
        "iso2": "US",
        "capital": "Washington D.C.",
        "currency": "USD",
        "states": [
            {
                "id": 101,
                "name": "California",
                "state_code": "CA",
                "latitude": "36.77826100",
                "longitude": "-119.41793240",
                "cities": [
                    {
                        "id": 1001,
                        "name": "San Francisco",
                        "latitude": "37.77493000",
                        "longitude": "-122.41942000",
                        "neighborhoods": [
                            {"id": 10001, "name": "Mission District"},
                            {"id": 10002, "name": "SoMa"},
                        ],
                    },
                    {
                        "id": 1002,
                        "name": "Los Angeles",
                        "latitude": "34.05223000",
                        "longitude": "-118.24368000",
                    },
                ],
            },
            {
                "id": 102,
                "name": "New York",
                "state_code": "NY",
                "latitude": "40.71277530",
                "longitude": "-74.00597280",
                "cities": [
                    {
                        "id": 1003,
                        "name": "New York City",
                        "latitude": "40.71277530",
                        "longitude": "-74.00597280",
                    },
                ],
            },
        ],
    },
    {
        "id": 2,
        "name": "Canada",
        "iso3": "CAN",
        "iso2": "CA",
        "capital": "Ottawa",
        "currency": "CAD",
        "states": [
            {
                "id": 201,
                "name": "Ontario",
                "state_code": "ON",
                "latitude": "51.25377800",
                "longitude": "-85.32321400",
                "cities": [
                    {
                        "id": 2001,
                        "name": "Toronto",
                        "latitude": "43.65107000",
                        "longitude": "-79.34707000",
                    },
                ],
            },
        ],
    },
]

NEIGHBORHOOD_ROWS = {
    "CA": [
        {"city": "San Francisco", "neighborhood": "Mission District"},
        {"city": "San Francisco", "neighborhood": "SoMa"},
        {"city": "Los Angeles", "neighborhood": "Downtown"},
        {"city": "Los Angeles", "neighborhood": "Hollywood"},
    ],
    "NY": [
        {"city": "New York City", "neighborhood": "Manhattan"},
        {"city": "New York City", "neighborhood": "Brooklyn"},
    ],
}


class RecordingSource(NeighborhoodSource):
    """In-memory source that records every load."""

    name = "recording"

    def __init__(self, partitions: dict[str, list[dict]], error: Optional[Exception] = None):
        self.partitions = partitions
        self.error = error
        self.calls: list[tuple[str, Optional[str]]] = []

    def load(self, state_code: str, base_path: Optional[str] = None) -> list[NeighborhoodRecord]:
        self.calls.append((state_code, base_path))
        if self.error is not None:
            raise self.error
        return [NeighborhoodRecord(**row) for row in self.partitions.get(state_code, [])]


@pytest.fixture
def data():
    return parse_dataset(json.dumps(SAMPLE_DATA))


@pytest.fixture
def source():
    return RecordingSource(NEIGHBORHOOD_ROWS)


@pytest.fixture
def failing_source():
    return RecordingSource({}, error=NeighborhoodSourceError("boom"))


@pytest.fixture
def neighborhoods_dir(tmp_path):
    """A filesystem layout <tmp>/<state_code>/neighborhoods.json."""
    root = tmp_path / "neighborhoods"
    for state_code, rows in NEIGHBORHOOD_ROWS.items():
        (root / state_code).mkdir(parents=True)
        (root / state_code / "neighborhoods.json").write_text(json.dumps(rows), encoding="utf-8")
    return root


@pytest.fixture
def dataset_file(tmp_path):
    path = tmp_path / "countries+states+cities.json"
    path.write_text(json.dumps(SAMPLE_DATA), encoding="utf-8")
    return path
