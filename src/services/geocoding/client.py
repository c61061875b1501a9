from typing import Any, Dict, Optional

import httpx

from src.core.config import ApiSettings
from src.core.schemas import Coordinates
from src.services.geocoding.schemas import SUCCESS_STATUSES, PlaceCandidate, location_from


class GoogleMapsError(Exception):
    """The Maps API answered, but not with a usable payload."""

    def __init__(self, status: str, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}" if message else status)


class GoogleMapsClient:
    """Thin async wrapper around the Google Maps Platform place and geocoding services."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://maps.googleapis.com/maps/api",
        timeout_s: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"accept": "application/json"},
            timeout=httpx.Timeout(timeout_s, connect=5.0),
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTPX client."""

        await self._client.aclose()

    async def __aenter__(self) -> "GoogleMapsClient":
        """Support async context-manager usage."""

        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        """Ensure the HTTP client is closed when leaving a context."""

        await self._client.aclose()

    async def _aget(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Execute an authenticated GET request and return the parsed JSON body.

        Raises:
            httpx.HTTPError: transport failure or non-2xx status
            ValueError: body is not JSON
            GoogleMapsError: body is JSON but not a successful Maps answer
        """

        response = await self._client.get(path, params={**params, "key": self.api_key})
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise GoogleMapsError("MALFORMED_RESPONSE", f"expected an object, got {type(data).__name__}")

        status = data.get("status", "OK")
        if status not in SUCCESS_STATUSES:
            raise GoogleMapsError(str(status), data.get("error_message"))
        return data

    async def find_place(self, text: str) -> Optional[PlaceCandidate]:
        """Return the first Find Place candidate for a free-text query."""

        data = await self._aget(
            "/place/findplacefromtext/json",
            {"input": text, "inputtype": "textquery", "fields": "geometry/location,place_id"},
        )
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return None

        first = candidates[0]
        if not isinstance(first, dict):
            return None
        place_id = first.get("place_id")
        return PlaceCandidate(
            place_id=place_id if isinstance(place_id, str) and place_id else None,
            location=location_from(first),
        )

    async def place_details(self, place_id: str) -> Optional[Coordinates]:
        """Return the location of a place looked up by its identifier."""

        data = await self._aget(
            "/place/details/json",
            {"place_id": place_id, "fields": "geometry/location"},
        )
        return location_from(data.get("result"))

    async def geocode(self, address: str, *, locality: Optional[str] = None) -> Optional[Coordinates]:
        """Geocode an address, optionally restricted to a locality component."""

        params: Dict[str, Any] = {"address": address}
        if locality:
            params["components"] = f"locality:{locality}"
        data = await self._aget("/geocode/json", params)

        results = data.get("results")
        if not isinstance(results, list) or not results:
            return None
        return location_from(results[0])


def create_google_maps_client(settings: ApiSettings) -> GoogleMapsClient:
    """Instantiate the Google Maps client using project settings."""

    api_key = settings.ensure("google_maps_api_key")
    return GoogleMapsClient(api_key, timeout_s=settings.maps_timeout_s)
