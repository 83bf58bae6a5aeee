# app/schemas/ask.py
from typing import Any, Literal

from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError

from app.core.errors import ValidationError

MessageRole = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: MessageRole
    content: str


class AskRequest(BaseModel):
    """
    Body of POST /api/ask.

    `messages` is typed loosely on purpose: the route answers 400 with
    "Messages array is required" rather than a generic schema error.
    """

    messages: Any = None
    model: str | None = None


_messages_adapter = TypeAdapter(list[ChatMessage])


def parse_messages(raw: Any) -> list[ChatMessage]:
    """
    Validate the raw `messages` value of an ask request.

    An empty list is accepted; the provider then only sees the system
    message.

    Raises:
        ValidationError: if messages is missing, not a list, or holds
            entries that are not {role, content} objects.
    """
    if raw is None or not isinstance(raw, list):
        raise ValidationError("Messages array is required")
    try:
        return _messages_adapter.validate_python(raw)
    except PydanticValidationError:
        raise ValidationError(
            "Each message must have a role (system, user or assistant) and string content"
        )
