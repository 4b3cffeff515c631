# helphood_chat/chat/service.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from helphood_chat.chat.schemas import ChatResponse
from helphood_chat.infra.llm_client import LLMClient
from helphood_chat.metrics import record_chat_reply
from helphood_chat.providers.fallback_llm import fallback_response

log = logging.getLogger("helphood_chat.chat")


@dataclass
class ChatReply:
    response: str
    source: str  # "ai" | "fallback"
    reason: str = "ok"

    def to_dict(self) -> dict[str, str]:
        return ChatResponse(response=self.response, source=self.source).model_dump()


class ChatService:
    """
    Answers a validated message.
      1) No LLM configured => fallback (reason=not_configured), no network call.
      2) LLM call fails (timeout, status, malformed, network) => fallback with its reason.
      3) Otherwise => the model's text with source=ai.
    """

    def __init__(self, llm: LLMClient | None, rng: random.Random | None = None):
        self._llm = llm
        self._rng = rng

    @property
    def ai_configured(self) -> bool:
        return self._llm is not None

    def fallback(self, message: str, reason: str) -> ChatReply:
        reply = ChatReply(
            response=fallback_response(message, rng=self._rng),
            source="fallback",
            reason=reason,
        )
        record_chat_reply(reply.source, reason)
        return reply

    async def answer(self, message: str) -> ChatReply:
        if self._llm is None:
            log.warning("chat_fallback reason=\"not_configured\" hint=\"set GEMINI_API_KEY\"")
            return self.fallback(message, "not_configured")

        outcome = await self._llm.call({"message": message})
        meta = outcome["meta"]
        if not outcome["ok"]:
            reason = meta.get("reason", "provider_error")
            log.warning(
                f'chat_fallback reason="{reason}" error="{outcome.get("error")}" '
                f'elapsed_ms={meta.get("elapsed_ms")}'
            )
            return self.fallback(message, reason)

        log.info(f'chat_ai_reply elapsed_ms={meta.get("elapsed_ms")}')
        record_chat_reply("ai", "ok")
        return ChatReply(response=outcome["result"]["text"], source="ai")
