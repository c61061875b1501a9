"""Pydantic data models for model replies and canonical itineraries.

Two families of models live here:

- Raw* models decode a language-model reply. The reply is a loose union of
  overlapping, optional containers whose fields come under several aliases
  (``lat``/``latitude``, ``stops``/``activities``, ``label``/``title``...).
  Each Raw* model collapses those aliases once, in a ``mode="before"``
  validator, and never rejects input: anything unusable decodes to empty.
- Stop, Day, ItineraryMetadata and Itinerary are the canonical output handed
  to the map renderer. They are frozen and enforce the invariants the
  renderer relies on (finite coordinates, one Day per trip day).
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.core.types import (
    FiniteFloat,
    PositiveInt,
    as_text,
    ensure_number,
    first_present,
    first_text,
)

UNNAMED_STOP = "Unnamed stop"
# Upper bound on trip length; day numbers beyond it are ignored.
MAX_TRIP_DAYS = 30

_LAT_KEYS = ("lat", "latitude")
_LNG_KEYS = ("lng", "lon", "longitude")
_NESTED_COORDINATE_KEYS = ("location", "coordinates")
_CENTER_SOURCES = (
    ("metadata", "city_lat", "city_lng"),
    (None, "city_lat", "city_lng"),
    (None, "lat", "lng"),
)


def default_day_label(index: int) -> str:
    """Return the placeholder label for the 0-based day ``index``."""

    return f"Day {index + 1}"


def _coordinate_pair(data: Mapping[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    lat = ensure_number(first_present(data, _LAT_KEYS))
    lng = ensure_number(first_present(data, _LNG_KEYS))
    if lat is not None and lng is not None:
        return lat, lng

    for key in _NESTED_COORDINATE_KEYS:
        nested = data.get(key)
        if not isinstance(nested, Mapping):
            continue
        nested_lat = ensure_number(first_present(nested, _LAT_KEYS))
        nested_lng = ensure_number(first_present(nested, _LNG_KEYS))
        if nested_lat is not None and nested_lng is not None:
            return nested_lat, nested_lng
    return lat, lng


def _as_int(value: Any) -> Optional[int]:
    number = ensure_number(value)
    return int(number) if number is not None else None


# ---------------------------------------------------------------------------
# Canonical output
# ---------------------------------------------------------------------------


class Coordinates(BaseModel):
    """A finite latitude/longitude pair."""

    lat: FiniteFloat
    lng: FiniteFloat

    model_config = ConfigDict(frozen=True)


class Stop(BaseModel):
    """A single point of interest in a day's plan.

    Attributes:
        name: Display name, never empty
        description: Free-text notes from the model
        address: Street address or location text the model supplied
        lat/lng: Finite coordinates, either from the reply or resolved
        place_type: Category hint such as ``museum`` (``placeType`` on the wire)
        start_time/end_time: Free-form ``HH:MM`` strings, not validated
    """

    name: str = Field(min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None
    lat: FiniteFloat
    lng: FiniteFloat
    place_type: Optional[str] = Field(default=None, alias="placeType")
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Day(BaseModel):
    """Ordered stops for one calendar day of the trip."""

    label: str = Field(min_length=1)
    stops: List[Stop] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ItineraryMetadata(BaseModel):
    """Trip-level facts: destination, resolved length and map focal point."""

    city: str
    days: PositiveInt
    center: Optional[Coordinates] = None

    model_config = ConfigDict(frozen=True)


class Itinerary(BaseModel):
    """Canonical, map-ready itinerary."""

    days: List[Day]
    metadata: ItineraryMetadata
    tips: Optional[List[str]] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_day_count(self) -> "Itinerary":
        if len(self.days) != self.metadata.days:
            raise ValueError(
                f"Itinerary holds {len(self.days)} days but metadata declares {self.metadata.days}"
            )
        return self

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready wire form (camelCase keys, absent fields omitted)."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Raw model replies
# ---------------------------------------------------------------------------


class RawStop(BaseModel):
    """A stop-like record from a model reply with every alias collapsed.

    ``query`` is the text used for place resolution when the record carries
    no usable coordinates. ``day`` is only meaningful for entries of a flat
    ``locations`` list, where it tags the 1-based trip day.
    """

    name: str = UNNAMED_STOP
    query: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    place_type: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    day: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _collapse_aliases(cls, data: Any) -> Any:
        if isinstance(data, RawStop):
            return data
        if isinstance(data, str):
            data = {"name": data}
        if not isinstance(data, Mapping):
            return {}

        lat, lng = _coordinate_pair(data)
        name = as_text(first_present(data, ("name", "title", "place")))
        return {
            "name": name.strip() if name and name.strip() else UNNAMED_STOP,
            "query": first_text(data, ("address", "location", "name", "title")),
            "description": as_text(first_present(data, ("description", "notes"))),
            "address": as_text(first_present(data, ("address", "location"))),
            "place_type": as_text(first_present(data, ("type", "category", "placeType", "place_type"))),
            "lat": lat,
            "lng": lng,
            "start_time": as_text(first_present(data, ("startTime", "start_time"))),
            "end_time": as_text(first_present(data, ("endTime", "end_time"))),
            "day": _as_int(data.get("day")),
        }

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def bucket_index(self) -> int:
        """0-based day bucket for a ``locations`` entry; untagged entries go to day 1."""

        day_number = self.day if self.day is not None else 1
        return max(day_number - 1, 0)


class RawDay(BaseModel):
    """One entry of a ``days`` or ``itinerary`` container."""

    day: Optional[int] = None
    label: Optional[str] = None
    stops: List[RawStop] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _collapse_aliases(cls, data: Any) -> Any:
        if isinstance(data, RawDay):
            return data
        if not isinstance(data, Mapping):
            return {}

        stops = data.get("stops")
        if not isinstance(stops, list):
            stops = data.get("activities")
        label = as_text(first_present(data, ("label", "title")))
        return {
            "day": _as_int(data.get("day")),
            "label": label.strip() if label and label.strip() else None,
            "stops": list(stops) if isinstance(stops, list) else [],
        }

    def day_index(self, position: int) -> int:
        """0-based target index; entries without a day number use their list position."""

        day_number = self.day if self.day is not None else position + 1
        return max(day_number - 1, 0)


class RawItinerary(BaseModel):
    """Whole model reply, reduced to the containers the normalizer understands."""

    days: Optional[List[RawDay]] = None
    itinerary: Optional[List[RawDay]] = None
    locations: List[RawStop] = Field(default_factory=list)
    tips: Optional[List[str]] = None
    declared_days: Optional[int] = None
    center: Optional[Coordinates] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _collapse_aliases(cls, data: Any) -> Any:
        if isinstance(data, RawItinerary):
            return data
        if not isinstance(data, Mapping):
            return {}

        metadata = data.get("metadata")
        if not isinstance(metadata, Mapping):
            metadata = {}

        declared = _as_int(metadata.get("days"))
        if declared is None:
            declared = _as_int(data.get("days"))

        center = None
        for container, lat_key, lng_key in _CENTER_SOURCES:
            source = metadata if container == "metadata" else data
            lat = ensure_number(source.get(lat_key))
            lng = ensure_number(source.get(lng_key))
            if lat is not None and lng is not None:
                center = {"lat": lat, "lng": lng}
                break

        tips = data.get("tips")
        locations = data.get("locations")
        return {
            "days": data.get("days") if isinstance(data.get("days"), list) else None,
            "itinerary": data.get("itinerary") if isinstance(data.get("itinerary"), list) else None,
            "locations": locations if isinstance(locations, list) else [],
            "tips": (
                [tip if isinstance(tip, str) else str(tip) for tip in tips if tip is not None]
                if isinstance(tips, list)
                else None
            ),
            "declared_days": declared,
            "center": center,
        }

    def day_containers(self) -> Tuple[List[RawDay], Optional[List[RawDay]]]:
        """Return the primary per-day container and the secondary one to retry with.

        ``days`` is primary when it is non-empty, with ``itinerary`` as the
        secondary; otherwise ``itinerary`` is primary and there is nothing
        else to retry with.
        """

        if self.days:
            return self.days, self.itinerary
        return self.itinerary or [], None


__all__ = [
    "MAX_TRIP_DAYS",
    "UNNAMED_STOP",
    "Coordinates",
    "Day",
    "Itinerary",
    "ItineraryMetadata",
    "RawDay",
    "RawItinerary",
    "RawStop",
    "Stop",
    "default_day_label",
]
