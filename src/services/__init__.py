"""External service integrations for itinerary planning.

This package provides clients for the external services the planner calls:

- Geocoding: place search, place details and geocoding on Google Maps,
  wrapped by a cached PlaceResolver

Each service module exports:
    - create_*_client: Factory to create the API client
    - Higher-level helpers built on the client

Example Usage:
    >>> from src.services.geocoding import create_place_resolver
    >>> from src.core.config import ApiSettings
    >>>
    >>> settings = ApiSettings.from_env()
    >>> resolver = create_place_resolver(settings)
    >>> coordinates = await resolver.resolve("Eiffel Tower", "Paris")
"""

# Geocoding
from src.services.geocoding import (
    GeocodeCache,
    GoogleMapsClient,
    PlaceResolver,
    Resolution,
    ResolutionStatus,
    create_google_maps_client,
    create_place_resolver,
    get_default_cache,
)

__all__ = [
    "GeocodeCache",
    "GoogleMapsClient",
    "PlaceResolver",
    "Resolution",
    "ResolutionStatus",
    "create_google_maps_client",
    "create_place_resolver",
    "get_default_cache",
]
