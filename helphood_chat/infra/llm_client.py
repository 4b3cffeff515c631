from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

from helphood_chat.providers.gemini_llm import ProviderError, ProviderTimeout

DEFAULT_TIMEOUT_SECS = 10.0


class LLMClient:
    """
    Single-attempt wrapper around an async model call.

    The call runs under a hard deadline; at the deadline the in-flight task is
    cancelled. Every outcome comes back as an envelope:
      {"ok": True, "result": {...}, "meta": {...}}
      {"ok": False, "error": "...", "meta": {"reason": ..., ...}}
    """

    def __init__(
        self,
        fn_call_model: Callable[[dict[str, Any], float], Awaitable[dict[str, Any]]],
        timeout_secs: float = DEFAULT_TIMEOUT_SECS,
    ):
        self._call = fn_call_model
        self.timeout_secs = timeout_secs

    async def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        start = time.monotonic()
        try:
            result = await asyncio.wait_for(
                self._call(payload, self.timeout_secs), timeout=self.timeout_secs
            )
        except (asyncio.TimeoutError, ProviderTimeout):
            return self._failure("timeout", f"timed out after {self.timeout_secs}s", start)
        except ProviderError as e:
            return self._failure(e.reason, str(e), start)

        return {
            "ok": True,
            "result": result,
            "meta": {"elapsed_ms": self._elapsed_ms(start)},
        }

    def _failure(self, reason: str, error: str, start: float) -> dict[str, Any]:
        return {
            "ok": False,
            "error": error,
            "meta": {"reason": reason, "elapsed_ms": self._elapsed_ms(start)},
        }

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.monotonic() - start) * 1000)
