"""
Define Message structure and the API payloads built around it.
"""

from datetime import datetime
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

MAX_USERNAME_LENGTH = 50
MAX_CONTENT_LENGTH = 500

T = TypeVar("T")


def _require_text(value: str, field: str, max_length: int) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{field} is required")
    if len(value) > max_length:
        raise ValueError(f"{field} must be at most {max_length} characters")
    return value


class Message(BaseModel):
    """
    Message structure in the app.
    Instances are frozen: the storage swaps in a new copy on update.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    content: str
    created_at: datetime
    updated_at: datetime


class CreateMessageRequest(BaseModel):
    """Payload for creating a message."""

    username: str
    content: str

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _require_text(v, "username", MAX_USERNAME_LENGTH)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _require_text(v, "content", MAX_CONTENT_LENGTH)


class UpdateMessageRequest(BaseModel):
    """Payload for replacing the content of a message."""

    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _require_text(v, "content", MAX_CONTENT_LENGTH)


class HTTPStatusResponse(BaseModel):
    """Metadata about an HTTP status code and where to fetch its cat."""

    status_code: int
    image_url: str
    description: str


class APIResponse(BaseModel, Generic[T]):
    """Standard envelope wrapping every JSON response except /health."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
