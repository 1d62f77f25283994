"""Central FastAPI router wiring all API endpoints."""

from fastapi import APIRouter

from delogo_worker.api.routes import delogo, health


api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(delogo.router)
