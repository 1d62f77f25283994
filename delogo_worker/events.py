"""Application lifecycle hooks and error rendering."""

import logging
import shutil

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from delogo_worker.core.config import settings
from delogo_worker.core.errors import DelogoError

logger = logging.getLogger(__name__)


def register_startup_event(app: FastAPI) -> None:
    """Register startup handlers."""

    @app.on_event("startup")
    async def on_startup() -> None:
        logger.info("Starting delogo worker service.")
        for binary in (settings.FFMPEG_BINARY, settings.FFPROBE_BINARY):
            if shutil.which(binary) is None:
                logger.warning("%s not found on PATH; video requests will fail.", binary)


def register_shutdown_event(app: FastAPI) -> None:
    """Register shutdown handlers."""

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        logger.info("Shutting down delogo worker service.")


def register_exception_handlers(app: FastAPI) -> None:
    """Render pipeline and validation failures as plain-text responses."""

    @app.exception_handler(DelogoError)
    async def on_delogo_error(request: Request, exc: DelogoError) -> PlainTextResponse:
        if exc.status_code >= 500:
            logger.error("%s failed: %s", request.url.path, exc)
        else:
            logger.info("%s rejected: %s", request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        return PlainTextResponse(f"Invalid input: {exc.errors()}", status_code=status.HTTP_400_BAD_REQUEST)
