"""Place resolution: free text plus an optional city hint to coordinates.

Lookup order for a ``(query, city)`` pair:

1. the cache;
2. Find Place from Text on ``"query, city"``, followed by a Place Details
   call when the candidate only carries a place id;
3. the Geocoding API on ``"query, city"`` restricted to ``locality:city``;
4. once, when the city is not already part of the query, the whole lookup
   again for ``"query, city"`` with no hint.

Upstream failures are never raised. They are kept apart from genuine misses
in ``Resolution`` so logs can tell a degraded service from a place that does
not exist; ``PlaceResolver.resolve`` collapses both to ``None``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from src.core.config import ApiSettings
from src.core.schemas import Coordinates
from src.services.geocoding.cache import GeocodeCache, cache_key, get_default_cache
from src.services.geocoding.client import GoogleMapsClient, GoogleMapsError, create_google_maps_client

logger = logging.getLogger(__name__)

# Everything a Maps call can raise that means "this stage produced nothing".
UPSTREAM_ERRORS = (httpx.HTTPError, GoogleMapsError, ValueError)


class ResolutionStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class Resolution:
    """Outcome of one lookup; ``coordinates`` is set only when ``FOUND``."""

    status: ResolutionStatus
    coordinates: Optional[Coordinates] = None

    @classmethod
    def found(cls, coordinates: Coordinates) -> "Resolution":
        return cls(ResolutionStatus.FOUND, coordinates)

    @classmethod
    def not_found(cls) -> "Resolution":
        return cls(ResolutionStatus.NOT_FOUND)

    @classmethod
    def upstream_error(cls) -> "Resolution":
        return cls(ResolutionStatus.UPSTREAM_ERROR)

    @property
    def is_found(self) -> bool:
        return self.status is ResolutionStatus.FOUND


def _with_city(query: str, city: Optional[str]) -> str:
    return f"{query}, {city}" if city else query


class PlaceResolver:
    """Resolve place descriptions to coordinates through Google Maps, with caching."""

    def __init__(self, client: GoogleMapsClient, cache: Optional[GeocodeCache] = None) -> None:
        self.client = client
        self.cache = cache if cache is not None else get_default_cache()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def resolve(self, query: str, city_hint: Optional[str] = None) -> Optional[Coordinates]:
        """Return coordinates for ``query`` or ``None`` when it cannot be placed."""

        resolution = await self.lookup(query, city_hint)
        return resolution.coordinates

    async def lookup(self, query: str, city_hint: Optional[str] = None) -> Resolution:
        """Run the full lookup and report a three-state outcome."""

        if not query or not query.strip():
            return Resolution.not_found()
        city_hint = city_hint.strip() if city_hint and city_hint.strip() else None

        key = cache_key(query, city_hint)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Geocode cache hit for %r", key)
            return cached

        place = await self._find_place(query, city_hint)
        if place.is_found:
            self.cache.set(key, place)
            return place

        geocoded = await self._geocode(query, city_hint)
        if geocoded.is_found:
            self.cache.set(key, geocoded)
            return geocoded

        degraded = ResolutionStatus.UPSTREAM_ERROR in (place.status, geocoded.status)
        resolution = Resolution.upstream_error() if degraded else Resolution.not_found()

        if city_hint and city_hint.lower() not in query.lower():
            # The broadened call carries no hint, so it cannot recurse again.
            broadened = await self.lookup(_with_city(query, city_hint))
            if broadened.is_found or broadened.status is ResolutionStatus.UPSTREAM_ERROR:
                resolution = broadened

        if resolution.status is ResolutionStatus.UPSTREAM_ERROR:
            logger.warning("Could not resolve %r: Google Maps unavailable", key)
            return resolution

        self.cache.set(key, resolution)
        if not resolution.is_found:
            logger.info("No location found for %r", key)
        return resolution

    async def _find_place(self, query: str, city_hint: Optional[str]) -> Resolution:
        try:
            candidate = await self.client.find_place(_with_city(query, city_hint))
            if candidate is None:
                return Resolution.not_found()
            if candidate.location is not None:
                return Resolution.found(candidate.location)
            if candidate.place_id:
                details = await self.client.place_details(candidate.place_id)
                if details is not None:
                    return Resolution.found(details)
        except UPSTREAM_ERRORS as exc:
            logger.warning("Find Place request failed for %r: %s", query, exc)
            return Resolution.upstream_error()
        return Resolution.not_found()

    async def _geocode(self, query: str, city_hint: Optional[str]) -> Resolution:
        try:
            location = await self.client.geocode(_with_city(query, city_hint), locality=city_hint)
        except UPSTREAM_ERRORS as exc:
            logger.warning("Geocode request failed for %r: %s", query, exc)
            return Resolution.upstream_error()
        if location is None:
            return Resolution.not_found()
        return Resolution.found(location)


def create_place_resolver(settings: ApiSettings, *, cache: Optional[GeocodeCache] = None) -> PlaceResolver:
    """Instantiate a resolver backed by a fresh Google Maps client."""

    return PlaceResolver(create_google_maps_client(settings), cache)
