from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.schemas import Coordinates
from src.core.types import ensure_number


# Statuses the Google Maps web services use for a well-formed answer.
SUCCESS_STATUSES = frozenset({"OK", "ZERO_RESULTS"})


class PlaceCandidate(BaseModel):
    """First candidate of a Find Place request."""

    place_id: Optional[str] = Field(default=None, description="Google place identifier")
    location: Optional[Coordinates] = Field(default=None, description="Candidate geometry, when returned")

    model_config = ConfigDict(frozen=True)


def location_from(result: Any) -> Optional[Coordinates]:
    """Read ``geometry.location`` from a Google result object, if it is finite."""

    if not isinstance(result, Mapping):
        return None
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, Mapping) else None
    if not isinstance(location, Mapping):
        return None

    raw_lat, raw_lng = location.get("lat"), location.get("lng")
    # Only real numbers count; Google never sends numeric strings here.
    if isinstance(raw_lat, str) or isinstance(raw_lng, str):
        return None
    lat, lng = ensure_number(raw_lat), ensure_number(raw_lng)
    if lat is None or lng is None:
        return None
    return Coordinates(lat=lat, lng=lng)
