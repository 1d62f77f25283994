"""Shared dependency injections for FastAPI routes."""

from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends

from delogo_worker.core.config import Settings, get_settings
from delogo_worker.engines.base import BaseVideoEngine
from delogo_worker.engines.ffmpeg_engine import FFmpegEngine
from delogo_worker.schemas.delogo import DetectionConfig
from delogo_worker.services.removal_orchestrator import RemovalOrchestrator


def get_app_settings() -> Settings:
    """Provide application settings."""

    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_video_engine(settings: SettingsDep) -> BaseVideoEngine:
    """Provide the video engine used for probing, sampling and filtering."""

    return FFmpegEngine(settings)


VideoEngineDep = Annotated[BaseVideoEngine, Depends(get_video_engine)]


def get_removal_orchestrator(settings: SettingsDep, engine: VideoEngineDep) -> Iterator[RemovalOrchestrator]:
    """Provide a fresh orchestrator per request."""

    orchestrator = RemovalOrchestrator(engine=engine, config=DetectionConfig.from_settings(settings))
    yield orchestrator


RemovalOrchestratorDep = Annotated[RemovalOrchestrator, Depends(get_removal_orchestrator)]
