"""Pytest configuration for the itinerary planner project."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

# Ensure the project root is on sys.path so that import src works under pytest.
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.core.schemas import Coordinates  # noqa: E402
from src.services.geocoding.cache import GeocodeCache  # noqa: E402
from src.services.geocoding.resolver import PlaceResolver  # noqa: E402
from src.services.geocoding.schemas import PlaceCandidate  # noqa: E402


class FakeMapsClient:
    """Stands in for GoogleMapsClient; answers from dictionaries and records calls."""

    def __init__(
        self,
        *,
        places: Optional[Dict[str, PlaceCandidate]] = None,
        details: Optional[Dict[str, Coordinates]] = None,
        geocodes: Optional[Dict[Tuple[str, Optional[str]], Coordinates]] = None,
    ) -> None:
        self.places = places or {}
        self.details = details or {}
        self.geocodes = geocodes or {}
        self.calls: List[Tuple[Any, ...]] = []
        self.fail_with: Optional[Exception] = None
        self.closed = False

    async def find_place(self, text: str) -> Optional[PlaceCandidate]:
        self.calls.append(("find_place", text))
        if self.fail_with is not None:
            raise self.fail_with
        return self.places.get(text)

    async def place_details(self, place_id: str) -> Optional[Coordinates]:
        self.calls.append(("place_details", place_id))
        if self.fail_with is not None:
            raise self.fail_with
        return self.details.get(place_id)

    async def geocode(self, address: str, *, locality: Optional[str] = None) -> Optional[Coordinates]:
        self.calls.append(("geocode", address, locality))
        if self.fail_with is not None:
            raise self.fail_with
        return self.geocodes.get((address, locality))

    async def aclose(self) -> None:
        self.closed = True


class StubResolver:
    """Resolver double keyed by lowercase query text."""

    def __init__(self, places: Optional[Dict[str, Tuple[float, float]]] = None) -> None:
        self.places = {key.lower(): Coordinates(lat=lat, lng=lng) for key, (lat, lng) in (places or {}).items()}
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.closed = False

    async def resolve(self, query: str, city_hint: Optional[str] = None) -> Optional[Coordinates]:
        self.calls.append((query, city_hint))
        return self.places.get(query.lower())

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def maps_client() -> FakeMapsClient:
    return FakeMapsClient()


@pytest.fixture
def geocode_cache() -> GeocodeCache:
    """A fresh cache per test so outcomes never leak between tests."""

    return GeocodeCache(name="test")


@pytest.fixture
def resolver(maps_client: FakeMapsClient, geocode_cache: GeocodeCache) -> PlaceResolver:
    return PlaceResolver(maps_client, geocode_cache)
