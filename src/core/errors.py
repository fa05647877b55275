"""
Errors surfaced by the HTTP layer.
Each one carries the status code and the user-facing message of the envelope.
"""

from typing import Any, Dict

from fastapi import status

from src.core.message import APIResponse


class APIError(Exception):
    """Base error rendered as `{"success": false, "error": message}`."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str) -> Dict[str, Any]:
    """Serialized failure envelope."""
    return APIResponse(success=False, error=message).model_dump(exclude_none=True)
