"""
Maps errors raised while serving a request to the failure envelope.
"""

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.errors import APIError, error_body

logger = logging.getLogger(__name__)

INVALID_JSON = "Invalid JSON"


def describe_validation_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """
    Condenses pydantic errors on a request body into the single message
    the client sees.

    Undecodable or mistyped bodies become "Invalid JSON"; otherwise the
    first field error is reported, using the validator's own text where
    there is one.
    """
    for err in errors:
        if err["type"] == "json_invalid":
            return INVALID_JSON

    err = errors[0]
    loc = tuple(err.get("loc", ()))
    if loc and loc[0] == "body":
        loc = loc[1:]
    if not loc:
        # the body itself is missing or not an object
        return INVALID_JSON

    field = loc[-1]
    if err["type"] == "missing":
        return f"{field} is required"
    if err["type"].endswith("_type"):
        return INVALID_JSON
    return err["msg"].removeprefix("Value error, ")


# pylint: disable=unused-argument
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = describe_validation_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
