"""
HTTP middleware: CORS headers on every response, preflight short-circuit,
and the last-resort 500 for exceptions no handler dealt with.
"""

import logging
from typing import Awaitable, Callable, Dict

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from src.config.settings import settings
from src.core.errors import error_body

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.allowed_origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


async def cors_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    Answers OPTIONS with 204 before routing, and stamps the CORS
    headers on whatever else goes out.
    """
    if request.method == "OPTIONS":
        response = Response(status_code=status.HTTP_204_NO_CONTENT)
    else:
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_body("Internal server error"),
            )

    response.headers.update(cors_headers())
    return response
