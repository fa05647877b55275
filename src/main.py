"""
Main entry point for the FastAPI application.
Configures logging, lifespan events, middleware and mounts routers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from src.api.exception_handlers import register_exception_handlers
from src.api.middleware import cors_middleware
from src.api.routes import router as api_router
from src.config.settings import settings

# Setup Logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Disable these warnings as they are false positives caused by fasapi syntax
# pylint: disable=redefined-outer-name
# pylint: disable=unused-argument
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application Lifecycle Manager.
    Messages live in memory only, so there is nothing to restore or flush.
    """
    logger.info("Starting %s on %s:%d", settings.app_name, settings.server_host, settings.server_port)

    yield

    logger.info("Shutting down %s...", settings.app_name)


def create_app() -> FastAPI:
    """Factory to create the app."""
    application = FastAPI(
        title=settings.app_name,
        description="Message board and HTTP status cat API",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware
    application.middleware("http")(cors_middleware)

    register_exception_handlers(application)

    # Routers
    application.include_router(api_router, prefix="/api")

    return application


app = create_app()


def run() -> None:
    """Serves the app with uvicorn on the configured bind."""
    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        timeout_keep_alive=settings.idle_timeout,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
