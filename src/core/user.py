"""
User entity of the domain and the validators guarding its fields.
"""

import re
from datetime import datetime, timezone

from pydantic import BaseModel, Field

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 50
MIN_PASSWORD_LENGTH = 8


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_email(email: str) -> None:
    """Raises ValueError unless `email` looks like an address."""
    email = email.strip()
    if not email:
        raise ValueError("email cannot be empty")
    if not EMAIL_PATTERN.match(email):
        raise ValueError("invalid email format")


def validate_name(name: str) -> None:
    name = name.strip()
    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters")


def validate_password(password: str) -> None:
    """
    Domain password policy: at least 8 characters with an upper case
    letter, a lower case letter and a digit (ASCII only).
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    has_upper = any("A" <= ch <= "Z" for ch in password)
    has_lower = any("a" <= ch <= "z" for ch in password)
    has_number = any("0" <= ch <= "9" for ch in password)

    if not (has_upper and has_lower and has_number):
        raise ValueError("password must contain upper, lower, and number")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class User(BaseModel):
    """Represents a user of the domain."""

    id: int = 0
    email: str
    name: str
    # Never serialized
    password: str = Field(default="", exclude=True, repr=False)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def new(cls, email: str, name: str, password: str) -> "User":
        """
        Validates the inputs and builds a fresh user.
        The password is kept as given; hashing happens in the password service.
        """
        validate_email(email)
        validate_name(name)
        validate_password(password)

        now = _utcnow()
        return cls(
            email=normalize_email(email),
            name=name.strip(),
            password=password,
            created_at=now,
            updated_at=now,
        )

    def validate_fields(self) -> None:
        validate_email(self.email)
        validate_name(self.name)
        validate_password(self.password)

    def update_name(self, name: str) -> None:
        validate_name(name)
        self.name = name.strip()
        self.updated_at = _utcnow()

    def update_email(self, email: str) -> None:
        validate_email(email)
        self.email = normalize_email(email)
        self.updated_at = _utcnow()
