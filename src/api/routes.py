"""
API Routes definition.
Handles message CRUD, status code lookups, the cat image proxy and health.
"""

import logging
import time
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.background import BackgroundTask

from src.api.dependencies import get_image_service, get_message_id, get_storage, json_body
from src.config.settings import settings
from src.core.errors import BadRequestError, InternalError, NotFoundError
from src.core.http_status import describe_status, parse_status_code
from src.core.message import (
    APIResponse,
    CreateMessageRequest,
    HTTPStatusResponse,
    Message,
    UpdateMessageRequest,
)
from src.services.image_proxy import StatusImageService, UpstreamUnavailableError
from src.services.storage import MessageNotFoundError, MessageStorage

logger = logging.getLogger(__name__)

router = APIRouter()


# === MESSAGES ===


@router.get("/messages", response_model=APIResponse[List[Message]], response_model_exclude_none=True)
async def get_messages(storage: MessageStorage = Depends(get_storage)) -> APIResponse:
    """Returns every live message, oldest first."""
    return APIResponse(success=True, data=storage.get_all())


@router.post(
    "/messages",
    response_model=APIResponse[Message],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_message(
    payload: CreateMessageRequest = Depends(json_body(CreateMessageRequest)),
    storage: MessageStorage = Depends(get_storage),
) -> APIResponse:
    try:
        message = storage.create(payload.username, payload.content)
    # pylint: disable=broad-exception-caught
    except Exception as e:
        logger.error("Failed to create message: %s", e)
        raise InternalError("Failed to create message") from e

    return APIResponse(success=True, data=message)


@router.put("/messages/{message_id}", response_model=APIResponse[Message], response_model_exclude_none=True)
async def update_message(
    message_id: int = Depends(get_message_id),
    payload: UpdateMessageRequest = Depends(json_body(UpdateMessageRequest)),
    storage: MessageStorage = Depends(get_storage),
) -> APIResponse:
    """Replaces the content of a message."""
    try:
        message = storage.update(message_id, payload.content)
    except MessageNotFoundError as e:
        logger.warning("Update requested for unknown message %d", message_id)
        raise NotFoundError(str(e)) from e

    return APIResponse(success=True, data=message)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: int = Depends(get_message_id), storage: MessageStorage = Depends(get_storage)
) -> Response:
    try:
        storage.delete(message_id)
    except MessageNotFoundError as e:
        logger.warning("Delete requested for unknown message %d", message_id)
        raise NotFoundError(str(e)) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# === STATUS CODES ===


@router.get(
    "/status/{code}",
    response_model=APIResponse[HTTPStatusResponse],
    response_model_exclude_none=True,
)
async def get_http_status(code: str) -> APIResponse:
    """
    Describes an HTTP status code and points at the image proxy for it.
    """
    status_code = parse_status_code(code)
    if status_code is None:
        raise BadRequestError("Invalid status code")

    return APIResponse(
        success=True,
        data=HTTPStatusResponse(
            status_code=status_code,
            image_url=f"{settings.public_base_url}/api/cat/{status_code}",
            description=describe_status(status_code),
        ),
    )


@router.get("/cat/{code}")
async def get_status_image(
    code: str, images: StatusImageService = Depends(get_image_service)
) -> Response:
    """
    Streams the upstream cat picture for a status code.
    Errors are plain text, not envelopes.
    """
    status_code = parse_status_code(code)
    if status_code is None:
        return PlainTextResponse("Invalid status code", status_code=status.HTTP_400_BAD_REQUEST)

    try:
        image = await images.open(status_code)
    except UpstreamUnavailableError:
        return PlainTextResponse("Failed to fetch image", status_code=status.HTTP_404_NOT_FOUND)

    # iter_bytes releases the upstream once drained; the background task
    # covers responses that never start streaming.
    return StreamingResponse(
        image.iter_bytes(),
        media_type=image.content_type,
        background=BackgroundTask(image.aclose),
    )


# === HEALTH ===


@router.get("/health")
async def health_check(storage: MessageStorage = Depends(get_storage)) -> Dict[str, Any]:
    """Returns the service status. Deliberately not wrapped in the envelope."""
    return {
        "status": "healthy",
        "message": "API is running",
        "timestamp": int(time.time()),
        "total_messages": storage.count(),
    }
