"""
FastAPI dependencies handing the shared services and parsed request
parts to the routes.
Tests swap the services through `app.dependency_overrides`.
"""

from typing import Awaitable, Callable, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from src.api.exception_handlers import describe_validation_errors
from src.core.errors import BadRequestError
from src.core.http_status import parse_int
from src.services.image_proxy import StatusImageService, image_service
from src.services.storage import MessageStorage, message_storage

M = TypeVar("M", bound=BaseModel)


def get_storage() -> MessageStorage:
    """Returns the process-wide message storage."""
    return message_storage


def get_image_service() -> StatusImageService:
    """Returns the upstream image service."""
    return image_service


def get_message_id(message_id: str) -> int:
    """
    Parses the `{message_id}` path variable.
    Only plain integers are accepted, so "1.0" or "1e2" are rejected.
    """
    parsed = parse_int(message_id)
    if parsed is None:
        raise BadRequestError("Invalid ID")
    return parsed


def json_body(model: Type[M]) -> Callable[[Request], Awaitable[M]]:
    """
    Dependency factory decoding the raw request body as JSON into `model`,
    whatever Content-Type the client declared.
    """

    async def _parse(request: Request) -> M:
        raw = await request.body()
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            raise BadRequestError(describe_validation_errors(e.errors())) from e

    return _parse
