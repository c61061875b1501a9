"""Turn the per-day containers of a model reply into an ordered list of Days.

A reply may describe its days in ``days[]``, ``itinerary[]``, a flat
``locations[]`` list tagged with day numbers, any mix of those, or none at
all. ``DayNormalizer`` reconciles them into one gap-free sequence where index
``i`` always holds trip day ``i + 1``:

1. ``locations`` entries are bucketed by day index.
2. The primary container (``days`` if non-empty, else ``itinerary``) is
   walked in order. A day with no buildable stops takes the location bucket
   at its index instead.
3. If no stop came out of the primary container, the secondary one is tried.
4. Buckets nobody consumed become days at their own index, unless that
   day already holds stops.
5. With still no stop anywhere, day 1 gets the city itself.
6. Indices between 0 and the highest one seen are filled with empty days.

Stops are resolved one at a time, in order, through the ``PlaceResolver``.
Stops that cannot be placed are dropped, and so are entries whose day index
falls at or beyond ``max_days``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from src.core.schemas import (
    MAX_TRIP_DAYS,
    Day,
    RawDay,
    RawItinerary,
    RawStop,
    Stop,
    default_day_label,
)
from src.services.geocoding.resolver import PlaceResolver

logger = logging.getLogger(__name__)


async def build_stop(source: Any, city_hint: Optional[str], resolver: PlaceResolver) -> Optional[Stop]:
    """Build a canonical Stop from any stop-like record, or ``None`` if it cannot be placed."""

    raw = source if isinstance(source, RawStop) else RawStop.model_validate(source)

    lat, lng = raw.lat, raw.lng
    if not raw.has_coordinates and raw.query:
        coordinates = await resolver.resolve(raw.query, city_hint)
        if coordinates is not None:
            lat, lng = coordinates.lat, coordinates.lng

    if lat is None or lng is None:
        logger.debug("Dropping stop %r: no coordinates for query %r", raw.name, raw.query)
        return None

    return Stop(
        name=raw.name,
        description=raw.description,
        address=raw.address,
        lat=lat,
        lng=lng,
        place_type=raw.place_type,
        start_time=raw.start_time,
        end_time=raw.end_time,
    )


@dataclass
class _DayDraft:
    label: str
    stops: List[Stop] = field(default_factory=list)


@dataclass(frozen=True)
class NormalizedDays:
    """Normalizer output: the gap-filled days and the first stop placed, if any."""

    days: List[Day]
    first_stop: Optional[Stop] = None


class DayNormalizer:
    """Reconcile the day containers of one model reply. Use one instance per reply."""

    def __init__(self, resolver: PlaceResolver, city: str, max_days: int = MAX_TRIP_DAYS) -> None:
        self.resolver = resolver
        self.city = city
        self.max_days = max_days
        self._drafts: Dict[int, _DayDraft] = {}
        self._buckets: Dict[int, List[RawStop]] = {}
        self._first_stop: Optional[Stop] = None

    async def normalize(self, raw: RawItinerary) -> NormalizedDays:
        self._drafts = {}
        self._first_stop = None
        self._buckets = {}
        for location in raw.locations:
            if self._out_of_range(location.bucket_index):
                continue
            self._buckets.setdefault(location.bucket_index, []).append(location)

        primary, secondary = raw.day_containers()
        await self._populate(primary)
        if secondary and not self._has_stops():
            logger.info("No stops found in 'days'; retrying with 'itinerary'")
            await self._populate(secondary)

        for index in sorted(self._buckets):
            existing = self._drafts.get(index)
            if existing is not None and existing.stops:
                # The day's own container wins over its bucket.
                continue
            stops = await self._build_stops(self._buckets[index])
            self._set_day(index, None, stops)
        self._buckets = {}

        if not self._has_stops():
            logger.info("Reply yielded no locatable stops; falling back to %r", self.city)
            fallback = await build_stop({"name": self.city, "address": self.city}, self.city, self.resolver)
            self._set_day(0, default_day_label(0), [fallback] if fallback else [])

        last_index = max(self._drafts)
        days = []
        for index in range(last_index + 1):
            draft = self._drafts.get(index)
            if draft is None:
                days.append(Day(label=default_day_label(index)))
            else:
                days.append(Day(label=draft.label, stops=draft.stops))

        logger.info(
            "Normalized %d days with %d stops for %s",
            len(days),
            sum(len(day.stops) for day in days),
            self.city,
        )
        return NormalizedDays(days=days, first_stop=self._first_stop)

    async def _populate(self, entries: Sequence[RawDay]) -> None:
        for position, entry in enumerate(entries):
            index = entry.day_index(position)
            if self._out_of_range(index):
                continue
            stops = await self._build_stops(entry.stops)

            existing = self._drafts.get(index)
            already_filled = existing is not None and bool(existing.stops)
            if not stops and not already_filled and index in self._buckets:
                stops = await self._build_stops(self._buckets.pop(index))

            self._set_day(index, entry.label, stops)

    def _out_of_range(self, index: int) -> bool:
        if index < self.max_days:
            return False
        logger.warning(
            "Ignoring entry for day %d of %s; trips are capped at %d days",
            index + 1,
            self.city,
            self.max_days,
        )
        return True

    async def _build_stops(self, sources: Sequence[RawStop]) -> List[Stop]:
        built: List[Stop] = []
        for source in sources:
            stop = await build_stop(source, self.city, self.resolver)
            if stop is not None:
                built.append(stop)
        return built

    def _set_day(self, index: int, label: Optional[str], stops: List[Stop]) -> None:
        draft = self._drafts.get(index)
        if draft is None:
            draft = self._drafts[index] = _DayDraft(label=label or default_day_label(index))
        elif label and (not draft.label or draft.label.startswith("Day ")):
            # Placeholder labels give way to real ones.
            draft.label = label

        if stops:
            draft.stops = stops
            if self._first_stop is None:
                self._first_stop = stops[0]

    def _has_stops(self) -> bool:
        return any(draft.stops for draft in self._drafts.values())


async def normalize_days(
    raw: Any, city: str, resolver: PlaceResolver, max_days: int = MAX_TRIP_DAYS
) -> NormalizedDays:
    """Decode ``raw`` if needed and normalize its days."""

    decoded = raw if isinstance(raw, RawItinerary) else RawItinerary.model_validate(raw)
    return await DayNormalizer(resolver, city, max_days).normalize(decoded)
