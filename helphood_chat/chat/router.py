# helphood_chat/chat/router.py
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from helphood_chat.chat.schemas import ChatRequest, ChatResponse, ErrorResponse
from helphood_chat.chat.service import ChatService
from helphood_chat.chat.validation import METHOD_NOT_ALLOWED, ChatGuard

log = logging.getLogger("helphood_chat.chat")
router = APIRouter(tags=["chat"])

CHAT_PATH = "/api/chat"

# Emitted on every chat response, errors included
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _json(body: dict[str, Any], status_code: int = 200, source: str | None = None) -> JSONResponse:
    headers = dict(CORS_HEADERS)
    if source:
        headers["X-Chat-Source"] = source
    return JSONResponse(body, status_code=status_code, headers=headers)


@router.options(CHAT_PATH)
async def chat_preflight():
    return Response(status_code=200, headers=dict(CORS_HEADERS))


async def chat_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Any method other than POST/OPTIONS on the chat path gets the JSON 405 with CORS."""
    if exc.status_code == 405 and request.url.path == CHAT_PATH:
        return _json(METHOD_NOT_ALLOWED.to_dict(), METHOD_NOT_ALLOWED.status_code)
    return await http_exception_handler(request, exc)


def request_body_schema(max_message_chars: int) -> dict[str, Any]:
    """OpenAPI requestBody for the chat route, carrying the configured length limit."""
    schema = ChatRequest.model_json_schema()
    schema["properties"]["message"]["maxLength"] = max_message_chars
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema}},
        }
    }


@router.post(
    CHAT_PATH,
    responses={
        200: {"model": ChatResponse},
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
    },
    openapi_extra=request_body_schema(500),
)
async def chat(request: Request):
    """
    Answer a HelpHood question.

    Body: {"message": "..."} within CHAT_MAX_MESSAGE_CHARS
    Returns {"response": ..., "source": "ai" | "fallback"}; only input errors
    produce a non-200 status.
    """
    service: ChatService = request.app.state.chat_service
    guard: ChatGuard = request.app.state.chat_guard

    message = ""
    try:
        body = await request.json()
        if body is None:
            raise ValueError("request body is null")

        rejection = guard.preflight(body)
        if rejection:
            log.info(f'chat_rejected reason="{rejection.reason.value}"')
            return _json(rejection.to_dict(), rejection.status_code)

        message = body["message"]
        reply = await service.answer(message)
    except Exception:
        log.exception("chat_unexpected_error")
        reply = service.fallback(message, "unexpected_error")

    return _json(reply.to_dict(), source=reply.source)
