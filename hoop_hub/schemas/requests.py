"""
Caller-facing request model for question planning.

Pydantic does the type checking; ``validate_chat_query_request`` turns its
errors into a single descriptive InvalidRequestError.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..errors import InvalidRequestError


class ChatQueryRequest(BaseModel):
    """A question submitted by a chat session."""

    session_id: str = Field(..., description="Opaque chat session id", examples=["session-1"])
    message: str = Field(
        ...,
        description="Natural-language question",
        examples=["Who averaged the most assists in 2023-24?"],
    )
    client_ts: Optional[str] = Field(None, description="Client timestamp, passed through")

    @field_validator("session_id", "message")
    @classmethod
    def _required_text(cls, value: str, info) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"{info.field_name} is required.")
        return value


def validate_chat_query_request(payload: Any) -> ChatQueryRequest:
    """
    Validate an untrusted request body.

    Raises:
        InvalidRequestError: naming the first offending field
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object.")

    try:
        return ChatQueryRequest.model_validate(payload, strict=True)
    except ValidationError as e:
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        if first["type"] == "missing":
            message = f"{field} is required."
        elif first["type"] == "value_error":
            message = str(first["ctx"]["error"])
        elif field == "client_ts":
            message = "client_ts must be a string when provided."
        else:
            message = f"{field} must be a string."
        raise InvalidRequestError(message, field=field) from e
