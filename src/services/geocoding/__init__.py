"""Place resolution backed by the Google Maps Platform.

This module turns free-text place descriptions into coordinates using the
Find Place, Place Details and Geocoding web services, with an injectable
cache of outcomes.

Public API:
    - GoogleMapsClient: Async HTTP client for the three Maps endpoints
    - create_google_maps_client: Factory function to create the client
    - PlaceResolver: Cached, staged resolution of place descriptions
    - create_place_resolver: Factory function to create a resolver
    - GeocodeCache / get_default_cache: Outcome cache and its process-wide instance
"""
from src.services.geocoding.cache import GeocodeCache, cache_key, get_default_cache
from src.services.geocoding.client import GoogleMapsClient, GoogleMapsError, create_google_maps_client
from src.services.geocoding.resolver import (
    PlaceResolver,
    Resolution,
    ResolutionStatus,
    create_place_resolver,
)
from src.services.geocoding.schemas import PlaceCandidate

__all__ = [
    "GeocodeCache",
    "GoogleMapsClient",
    "GoogleMapsError",
    "PlaceCandidate",
    "PlaceResolver",
    "Resolution",
    "ResolutionStatus",
    "cache_key",
    "create_google_maps_client",
    "create_place_resolver",
    "get_default_cache",
]
