import json
import logging
import re
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_OPENING_PATTERN = re.compile(r"[\[{]")
_DECODER = json.JSONDecoder()

FALLBACK_TIPS = ["Enjoy your trip!"]

JsonContainer = Union[Dict[str, Any], List[Any]]


def _first_container(source: str) -> Optional[JsonContainer]:
    """Return the first JSON object in ``source``, else the first JSON array.

    Decoded values are skipped over whole, so the objects inside a bare list
    of days never shadow the list itself.
    """

    first_list: Optional[List[Any]] = None
    position = 0
    while True:
        match = _OPENING_PATTERN.search(source, position)
        if match is None:
            return first_list
        try:
            value, end = _DECODER.raw_decode(source, match.start())
        except json.JSONDecodeError:
            position = match.start() + 1
            continue
        if isinstance(value, dict):
            return value
        if first_list is None:
            first_list = value
        position = end


def extract_json_payload(raw_output: Optional[str]) -> Optional[JsonContainer]:
    """Pull the itinerary JSON out of a chat reply.

    Fenced code blocks are tried first, then the whole reply, so prose around
    the JSON is ignored. Returns ``None`` when no object or array decodes.
    """
    if not raw_output or not raw_output.strip():
        return None

    sources = [block for block in _FENCE_PATTERN.findall(raw_output) if block.strip()]
    sources.append(raw_output)
    for source in sources:
        payload = _first_container(source)
        if payload is not None:
            return payload

    logger.warning("No JSON object or array found in model reply (%d chars)", len(raw_output))
    return None


def fallback_reply(text: str, city: str, days: int) -> Dict[str, Any]:
    """Wrap a free-text reply as a one-day plan whose single activity sits in the city."""

    return {
        "city": city,
        "days": days,
        "tips": list(FALLBACK_TIPS),
        "itinerary": [
            {
                "day": 1,
                "title": f"Day 1 in {city}",
                "activities": [
                    {
                        "name": "Explore the city",
                        "description": text,
                        "time": "All day",
                        "location": city,
                    }
                ],
            }
        ],
    }


def parse_model_reply(text: str, city: str, days: int) -> Dict[str, Any]:
    """Return the reply's JSON object, or a one-day fallback plan when it has none."""

    payload = extract_json_payload(text)
    if isinstance(payload, dict):
        return payload
    if isinstance(payload, list):
        # A bare list of days is the most common schema slip.
        logger.debug("Model replied with a bare list; treating it as 'days'")
        return {"days": payload}

    logger.warning("Model reply for %s was not JSON; using single-day fallback", city)
    return fallback_reply(text, city, days)
