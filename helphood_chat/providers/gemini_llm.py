from __future__ import annotations

import json
import logging
from typing import Any

import httpx

log = logging.getLogger("helphood_chat.gemini")

SYSTEM_PROMPT = """You are a helpful assistant for HelpHood, a community platform that helps neighbors connect and collaborate.

HelpHood features include:
- Community Events: Plan local events like cleanups, festivals, and meetups
- Help Exchange: Offer or request help for tasks like tutoring, repairs, or childcare
- Safety Alerts: Get verified alerts about neighborhood safety issues
- Local Marketplace: Buy, sell, or trade items with verified neighbors
- Civic Feedback: Report issues to local authorities and track progress
- Interactive Map: View and report local incidents using emojis

Keep responses helpful, concise (under 150 words), and focused on community building. Always maintain a friendly, supportive tone that encourages neighborhood collaboration."""

GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 200,
    "topP": 0.8,
    "topK": 40,
}

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class ProviderError(Exception):
    reason = "provider_error"


class ProviderTimeout(ProviderError, TimeoutError):
    reason = "timeout"


class ProviderUnavailable(ProviderError):
    reason = "network_error"


class ProviderHTTPError(ProviderError):
    reason = "http_error"

    def __init__(self, status_code: int, body: str):
        super().__init__(f"upstream status {status_code}")
        self.status_code = status_code
        self.body = body


class MalformedResponse(ProviderError):
    reason = "malformed_response"


class InvalidRequest(ProviderError):
    reason = "invalid_request"


def build_prompt(message: str) -> str:
    return f"{SYSTEM_PROMPT}\n\nUser question: {message}"


def build_request_body(message: str) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": build_prompt(message)}]}],
        "generationConfig": dict(GENERATION_CONFIG),
        "safetySettings": [dict(s) for s in SAFETY_SETTINGS],
    }


def encode_request_body(message: str) -> bytes:
    """JSON bytes for the request; messages that are not valid UTF-8 text raise InvalidRequest."""
    try:
        return json.dumps(build_request_body(message), ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidRequest("message cannot be encoded as UTF-8") from e


def extract_text(data: Any) -> str:
    """Pull candidates[0].content.parts[0].text out of a generateContent reply."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponse("invalid response format") from e
    if not isinstance(text, str) or not text.strip():
        raise MalformedResponse("empty completion text")
    return text


class GeminiProvider:
    """
    One-shot client for the Generative Language `generateContent` endpoint.

    Called as `await provider(payload, timeout_secs)` with payload {"message": ...};
    returns {"text": ...} or raises a ProviderError.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-pro",
        base_url: str = "https://generativelanguage.googleapis.com",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._base_url}/v1beta/models/{self._model}:generateContent"

    async def __call__(self, payload: dict[str, Any], timeout_secs: float) -> dict[str, Any]:
        content = encode_request_body(payload.get("message", ""))
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout_secs) as client:
                resp = await client.post(
                    self.url,
                    headers={"Content-Type": "application/json", "x-goog-api-key": self._api_key},
                    content=content,
                )
        except httpx.TimeoutException as e:
            raise ProviderTimeout("upstream timeout") from e
        except httpx.HTTPError as e:
            raise ProviderUnavailable(f"transport error: {e}") from e

        if not resp.is_success:
            log.error(f'gemini_http_error status={resp.status_code} body="{resp.text[:500]}"')
            raise ProviderHTTPError(resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse("response is not JSON") from e

        try:
            return {"text": extract_text(data)}
        except MalformedResponse:
            log.error(f'gemini_malformed_response body="{str(data)[:500]}"')
            raise
