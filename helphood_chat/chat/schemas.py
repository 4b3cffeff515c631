# helphood_chat/chat/schemas.py
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    # maxLength is filled in from CHAT_MAX_MESSAGE_CHARS, see chat.router.request_body_schema
    message: str = Field(..., min_length=1, description="User question")


class ChatResponse(BaseModel):
    response: str = Field(..., min_length=1)
    source: Literal["ai", "fallback"]


class ErrorResponse(BaseModel):
    error: str
