import logging
from typing import Any

from src.core.normalizer import DayNormalizer
from src.core.schemas import (
    MAX_TRIP_DAYS,
    Coordinates,
    Day,
    Itinerary,
    ItineraryMetadata,
    RawItinerary,
    default_day_label,
)
from src.services.geocoding.resolver import PlaceResolver

logger = logging.getLogger(__name__)


async def assemble_itinerary(
    raw: Any,
    city: str,
    requested_days: int,
    resolver: PlaceResolver,
) -> Itinerary:
    """Build a canonical, map-ready itinerary from a model reply.

    The result always holds exactly ``metadata.days`` days: the larger of the
    normalized day count, ``requested_days`` and any numeric day count the
    reply declares, padded with empty days. Day numbers and declared counts
    from the reply are capped at ``MAX_TRIP_DAYS`` (or ``requested_days`` when
    that is larger). The map center is the reply's own
    city coordinates when it gives them, else the first stop placed.

    This never raises on malformed input; every network call happens inside
    place resolution.
    """

    decoded = raw if isinstance(raw, RawItinerary) else RawItinerary.model_validate(raw)
    limit = max(MAX_TRIP_DAYS, requested_days)
    normalized = await DayNormalizer(resolver, city, limit).normalize(decoded)

    declared = decoded.declared_days or 0
    if declared > limit:
        logger.warning(f"Reply declares {declared} days for {city}; capping at {limit}")
        declared = limit

    days = list(normalized.days)
    total = max(len(days), requested_days, declared)
    while len(days) < total:
        days.append(Day(label=default_day_label(len(days))))

    center = decoded.center
    if center is None and normalized.first_stop is not None:
        center = Coordinates(lat=normalized.first_stop.lat, lng=normalized.first_stop.lng)

    logger.info(f"Assembled {total}-day itinerary for {city} (requested {requested_days})")
    return Itinerary(
        days=days,
        metadata=ItineraryMetadata(city=city, days=total, center=center),
        tips=decoded.tips,
    )
