"""
Central configuration loaded from environment variables with sensible defaults.
Paths default to the data/ directory next to the package.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class DatasetConfig:
    path: str = os.getenv(
        "GAZETTEER_DATASET_PATH",
        str(_REPO_ROOT / "data" / "json" / "countries+states+cities.json"),
    )


@dataclass(frozen=True)
class NeighborhoodConfig:
    provider: str = os.getenv("NEIGHBORHOODS_PROVIDER", "file")  # file | bundle | http
    base_path: str = os.getenv(
        "NEIGHBORHOODS_BASE_PATH",
        str(_REPO_ROOT / "data" / "json" / "neighborhoods"),
    )
    base_url: str = os.getenv("NEIGHBORHOODS_BASE_URL", "http://localhost:8000/data/json/neighborhoods")
    # Bundle target: neighborhoods shipped as package resources
    bundle_package: str = os.getenv("NEIGHBORHOODS_BUNDLE_PACKAGE", "geo_gazetteer")
    bundle_path: str = os.getenv("NEIGHBORHOODS_BUNDLE_PATH", "data/neighborhoods")
    request_timeout: float = float(os.getenv("NEIGHBORHOODS_TIMEOUT", "10"))
    # http provider only: retry against the bundle when the fetch fails
    fallback_to_bundle: bool = os.getenv("NEIGHBORHOODS_FALLBACK_TO_BUNDLE", "true").lower() == "true"


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8000"))
    # Default radius for /nearby queries in km
    default_radius_km: float = float(os.getenv("API_DEFAULT_RADIUS_KM", "50.0"))
    max_radius_km: float = float(os.getenv("API_MAX_RADIUS_KM", "2000.0"))


@dataclass(frozen=True)
class Settings:
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    neighborhoods: NeighborhoodConfig = field(default_factory=NeighborhoodConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
