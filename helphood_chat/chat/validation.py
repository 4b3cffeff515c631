# helphood_chat/chat/validation.py
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .schemas import ErrorResponse


class RejectionReason(str, Enum):
    METHOD_NOT_ALLOWED = "method_not_allowed"
    MESSAGE_REQUIRED = "message_required"
    MESSAGE_TOO_LONG = "message_too_long"


@dataclass
class ChatRejection:
    reason: RejectionReason
    status_code: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return ErrorResponse(error=self.message).model_dump()


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, the unit browsers use for string length."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


METHOD_NOT_ALLOWED = ChatRejection(
    reason=RejectionReason.METHOD_NOT_ALLOWED,
    status_code=405,
    message="Method not allowed",
)


class ChatGuard:
    """
    Client-input checks for the chat endpoint:
      - message present, a string, non-empty
      - message length limit
    """

    def __init__(self, max_message_chars: int = 500):
        self.max_message_chars = max_message_chars

    def preflight(self, body: Any) -> ChatRejection | None:
        message = body.get("message") if isinstance(body, dict) else None

        if not message or not isinstance(message, str):
            return ChatRejection(
                reason=RejectionReason.MESSAGE_REQUIRED,
                status_code=400,
                message="Message is required",
            )

        if utf16_length(message) > self.max_message_chars:
            return ChatRejection(
                reason=RejectionReason.MESSAGE_TOO_LONG,
                status_code=400,
                message="Message too long",
            )

        return None
