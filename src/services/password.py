"""Password hashing and the basic password policy, backed by bcrypt."""

import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_COST = 10
MIN_PASSWORD_LENGTH = 6


class PasswordService:
    """Hashes and verifies passwords."""

    def hash_password(self, password: str) -> str:
        """Returns the bcrypt hash (cost 10) of a non-empty password."""
        if not password:
            raise ValueError("password cannot be empty")

        hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_COST))
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """True only if both inputs are set and `password` matches `hashed`."""
        if not password or not hashed:
            return False

        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # malformed hash, or password over bcrypt's 72 byte limit
            logger.warning("Password verification rejected its input")
            return False


def validate_password(password: str) -> None:
    """
    Raises ValueError unless the password has at least 6 characters,
    one ASCII letter and one digit.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    has_letter = any(ch.isascii() and ch.isalpha() for ch in password)
    has_number = any("0" <= ch <= "9" for ch in password)

    if not (has_letter and has_number):
        raise ValueError("password must contain at least one letter and one number")
