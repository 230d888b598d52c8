"""
Neighborhood data sources.

Neighborhoods are not part of the main dataset. They live in one JSON file
per state, an array of {"city": ..., "neighborhood": ...} rows, addressed as

    <base>/<state_code>/neighborhoods.json

Where that base is depends on how the library is deployed, so the lookup is
behind the NeighborhoodSource interface with one implementation per target:

  - FileNeighborhoodSource      a directory on the local filesystem
  - BundleNeighborhoodSource    resources shipped inside a Python package
  - HttpNeighborhoodSource      a static file server, fetched with httpx
  - FallbackNeighborhoodSource  several of the above in priority order

Contract shared by all of them:
  - a state with no file yields [] (absence is not an error)
  - unreadable, unreachable or malformed data raises NeighborhoodSourceError
  - nothing is cached; each load acquires and releases its own resource
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from geo_gazetteer.config import NeighborhoodConfig, get_settings
from geo_gazetteer.models import Neighborhood, NeighborhoodRecord

logger = logging.getLogger(__name__)

NEIGHBORHOODS_FILENAME = "neighborhoods.json"

_RECORDS = TypeAdapter(list[NeighborhoodRecord])


class NeighborhoodSourceError(Exception):
    """A neighborhood partition exists but could not be read or parsed."""


def parse_records(payload: Union[bytes, str], origin: str) -> list[NeighborhoodRecord]:
    try:
        return _RECORDS.validate_json(payload)
    except ValidationError as e:
        raise NeighborhoodSourceError(f"Malformed neighborhoods data in {origin}: {e}") from e


def filter_for_city(records: Iterable[NeighborhoodRecord], city_name: str) -> list[Neighborhood]:
    """Rows for one city (case-insensitive), projected to {name}, in source order."""
    wanted = city_name.casefold()
    return [
        Neighborhood(name=record.neighborhood)
        for record in records
        if record.city.casefold() == wanted
    ]


class NeighborhoodSource(ABC):
    """Loads the neighborhood rows of one state."""

    name: str = "abstract"

    @abstractmethod
    def load(self, state_code: str, base_path: Optional[str] = None) -> list[NeighborhoodRecord]:
        """
        Return every row of the state's partition.
        `base_path` replaces the configured base for this call only; the
        `<state_code>/neighborhoods.json` suffix is always appended.
        """


# ── Filesystem ────────────────────────────────────────────────────────

class FileNeighborhoodSource(NeighborhoodSource):
    name = "file"

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)

    def path_for(self, state_code: str, base_path: Optional[str] = None) -> Path:
        root = Path(base_path) if base_path is not None else self.base_path
        return root / state_code / NEIGHBORHOODS_FILENAME

    def load(self, state_code: str, base_path: Optional[str] = None) -> list[NeighborhoodRecord]:
        path = self.path_for(state_code, base_path)
        if not path.exists():
            logger.debug("No neighborhoods file at %s", path)
            return []

        try:
            with path.open("rb") as f:
                payload = f.read()
        except OSError as e:
            raise NeighborhoodSourceError(f"Cannot read {path}: {e}") from e

        return parse_records(payload, str(path))


# ── Package resources ─────────────────────────────────────────────────

class BundleNeighborhoodSource(NeighborhoodSource):
    """
    Reads partitions bundled as package data.
    `root` is a package name or any Traversable; `subpath` is the directory
    inside it that holds the per-state folders.
    """

    name = "bundle"

    def __init__(self, root: Union[str, Traversable], subpath: str = ""):
        self._root = root
        self.subpath = subpath

    def _anchor(self) -> Traversable:
        if isinstance(self._root, str):
            try:
                return resources.files(self._root)
            except (ModuleNotFoundError, TypeError) as e:
                raise NeighborhoodSourceError(f"Bundle package {self._root!r} is not an importable package") from e
        return self._root

    def resource_for(self, state_code: str, base_path: Optional[str] = None) -> Traversable:
        node = self._anchor()
        prefix = base_path if base_path is not None else self.subpath
        for part in PurePosixPath(prefix).parts:
            if part not in ("", "."):
                node = node / part
        return node / state_code / NEIGHBORHOODS_FILENAME

    def load(self, state_code: str, base_path: Optional[str] = None) -> list[NeighborhoodRecord]:
        resource = self.resource_for(state_code, base_path)
        if not resource.is_file():
            logger.debug("No bundled neighborhoods for %s", state_code)
            return []

        try:
            with resource.open("rb") as f:
                payload = f.read()
        except OSError as e:
            raise NeighborhoodSourceError(f"Cannot read bundled {resource}: {e}") from e

        return parse_records(payload, str(resource))


# ── HTTP ──────────────────────────────────────────────────────────────

class HttpNeighborhoodSource(NeighborhoodSource):
    """
    Fetches partitions from a static file server.
    A fresh client is opened and closed for every load. `transport` lets
    callers plug in a custom httpx transport (proxies, mocks).
    """

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def url_for(self, state_code: str, base_path: Optional[str] = None) -> str:
        base = base_path if base_path is not None else self.base_url
        return f"{base.rstrip('/')}/{state_code}/{NEIGHBORHOODS_FILENAME}"

    def load(self, state_code: str, base_path: Optional[str] = None) -> list[NeighborhoodRecord]:
        url = self.url_for(state_code, base_path)
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.get(url)
                if resp.status_code == 404:
                    logger.debug("No neighborhoods published at %s", url)
                    return []
                resp.raise_for_status()
                payload = resp.content
        except httpx.HTTPError as e:
            raise NeighborhoodSourceError(f"Fetching {url} failed: {e}") from e

        return parse_records(payload, url)


# ── Priority chain ────────────────────────────────────────────────────

class FallbackNeighborhoodSource(NeighborhoodSource):
    """
    Tries each source in order, moving on only when one raises.
    An empty result is an answer, not a failure, and stops the chain.
    """

    def __init__(self, *sources: NeighborhoodSource):
        if not sources:
            raise ValueError("FallbackNeighborhoodSource needs at least one source")
        self.sources = sources

    @property
    def name(self) -> str:  # type: ignore[override]
        return "+".join(s.name for s in self.sources)

    def load(self, state_code: str, base_path: Optional[str] = None) -> list[NeighborhoodRecord]:
        last_error: Optional[NeighborhoodSourceError] = None
        for source in self.sources:
            try:
                return source.load(state_code, base_path)
            except NeighborhoodSourceError as e:
                logger.warning("Neighborhood source '%s' failed for %s: %s", source.name, state_code, e)
                last_error = e
        assert last_error is not None
        raise last_error


# ── Factory ───────────────────────────────────────────────────────────

def build_neighborhood_source(config: Optional[NeighborhoodConfig] = None) -> NeighborhoodSource:
    """Factory: return the source for the configured deployment target."""
    config = config or get_settings().neighborhoods
    provider = config.provider.lower()

    if provider == "http":
        http = HttpNeighborhoodSource(config.base_url, timeout=config.request_timeout)
        if config.fallback_to_bundle:
            return FallbackNeighborhoodSource(
                http, BundleNeighborhoodSource(config.bundle_package, config.bundle_path)
            )
        return http

    if provider == "bundle":
        return BundleNeighborhoodSource(config.bundle_package, config.bundle_path)

    if provider != "file":
        logger.warning("Unknown neighborhoods provider '%s', using the filesystem", config.provider)
    return FileNeighborhoodSource(config.base_path)
