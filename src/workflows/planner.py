"""Itinerary generation: prompt the chat model, parse its reply, assemble the trip."""
from __future__ import annotations

import logging
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from src.core.assembler import assemble_itinerary
from src.core.post_processing import parse_model_reply
from src.core.prompts import build_itinerary_prompt, system_prompt
from src.core.schemas import Itinerary
from src.services.geocoding.resolver import PlaceResolver

logger = logging.getLogger(__name__)


class EmptyModelReplyError(RuntimeError):
    """The chat model answered with no usable text."""


def message_text(content: Any) -> str:
    """Flatten a chat message's content (string or content blocks) to text."""

    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "".join(parts)
    return ""


class ItineraryPlanner:
    """Generate map-ready itineraries with a chat model and a place resolver."""

    def __init__(self, llm: BaseChatModel, resolver: PlaceResolver) -> None:
        self.llm = llm
        self.resolver = resolver

    async def generate(self, city: str, days: int) -> Itinerary:
        """Plan a ``days``-day trip to ``city``.

        Raises:
            ValueError: If the parameters are invalid
            EmptyModelReplyError: If the model returns no text
        """
        if not city or not isinstance(city, str) or not city.strip():
            raise ValueError("Invalid city parameter")
        if not isinstance(days, int) or days < 1:
            raise ValueError("Days must be a positive integer")
        city = city.strip()

        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=build_itinerary_prompt(city, days)),
        ]
        logger.debug("Calling chat model: city=%s days=%d", city, days)
        response = await self.llm.ainvoke(messages)

        reply = message_text(getattr(response, "content", None))
        if not reply.strip():
            raise EmptyModelReplyError("No response from the language model")

        raw = parse_model_reply(reply, city, days)
        return await assemble_itinerary(raw, city, days, self.resolver)

    async def close(self) -> None:
        """Release the resolver's HTTP resources."""

        await self.resolver.aclose()
