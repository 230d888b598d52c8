"""
Loading the countries+states+cities dataset from disk.

The file is a JSON array of countries, each nesting its states and each
state its cities. It is read once and validated into models; callers then
pass the result to the query functions.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from geo_gazetteer.config import get_settings
from geo_gazetteer.models import Country

logger = logging.getLogger(__name__)

_COUNTRIES = TypeAdapter(list[Country])


class DatasetError(Exception):
    """The dataset file is missing, unreadable or not in the expected shape."""


def parse_dataset(payload: Union[bytes, str]) -> list[Country]:
    try:
        return _COUNTRIES.validate_json(payload)
    except ValidationError as e:
        raise DatasetError(f"Invalid dataset: {e}") from e


def load_dataset(path: Union[str, Path]) -> list[Country]:
    path = Path(path)
    try:
        with path.open("rb") as f:
            payload = f.read()
    except OSError as e:
        raise DatasetError(f"Cannot read dataset {path}: {e}") from e

    data = parse_dataset(payload)
    logger.info("Loaded %d countries from %s", len(data), path)
    return data


def load_default_dataset(path: Optional[Union[str, Path]] = None) -> list[Country]:
    """Load the dataset at `path`, or at the configured location."""
    return load_dataset(path or get_settings().dataset.path)
