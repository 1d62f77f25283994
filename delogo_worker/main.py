"""FastAPI application entrypoint."""

from fastapi import FastAPI

from delogo_worker.api.router import api_router
from delogo_worker.core.config import settings
from delogo_worker.core.logging import configure_logging
from delogo_worker.events import (
    register_exception_handlers,
    register_shutdown_event,
    register_startup_event,
)


def create_application() -> FastAPI:
    """Instantiate and configure the FastAPI application."""

    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=settings.DESCRIPTION,
        docs_url=f"{settings.API_PREFIX}{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_PREFIX}{settings.API_V1_PREFIX}/openapi.json",
    )

    app.include_router(api_router, prefix=f"{settings.API_PREFIX}{settings.API_V1_PREFIX}")

    register_startup_event(app)
    register_shutdown_event(app)
    register_exception_handlers(app)

    return app


app = create_application()
