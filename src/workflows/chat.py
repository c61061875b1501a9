"""Free-text travel assistant replies."""
from __future__ import annotations

import logging

import sentry_sdk
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from src.core.prompts import chat_system_prompt
from src.workflows.planner import message_text

logger = logging.getLogger(__name__)

CHAT_MAX_TOKENS = 500
EMPTY_REPLY = "I apologize, but I couldn't process your request."
UNAVAILABLE_REPLY = (
    "I apologize, but I'm having trouble processing your request right now. Please try again later."
)


class TravelAssistant:
    """Answer short travel questions with the shared chat model.

    Model failures never reach the caller; they become a polite apology so the
    chat panel always has something to show.
    """

    def __init__(self, llm: BaseChatModel, max_tokens: int = CHAT_MAX_TOKENS) -> None:
        self.llm = llm
        self.max_tokens = max_tokens

    async def reply(self, text: str) -> str:
        if not text or not text.strip():
            raise ValueError("Missing text field")

        messages = [SystemMessage(content=chat_system_prompt), HumanMessage(content=text)]
        try:
            response = await self.llm.ainvoke(messages, max_tokens=self.max_tokens)
        except Exception as exc:
            logger.error(f"Chat model call failed: {exc}", exc_info=True)
            sentry_sdk.capture_exception(exc)
            return UNAVAILABLE_REPLY

        answer = message_text(getattr(response, "content", None)).strip()
        return answer or EMPTY_REPLY
