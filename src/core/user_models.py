"""Models exchanged with the user repository."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.user import normalize_email, validate_email, validate_name


class UserRecord(BaseModel):
    """A stored, non-deleted user row."""

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class CreateUserRequest(BaseModel):
    """Defines a user creation schema."""

    name: str
    email: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        validate_name(v)
        return v.strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        validate_email(v)
        return normalize_email(v)


class UpdateUserRequest(BaseModel):
    """Partial update: only the fields that are set get written."""

    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        validate_name(v)
        return v.strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        validate_email(v)
        return normalize_email(v)
