"""Health and readiness routes."""

import shutil

from fastapi import APIRouter

from delogo_worker.dependencies import SettingsDep

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health probe")
async def health_check(settings: SettingsDep) -> dict[str, str]:
    """Return a basic heartbeat payload."""

    return {"status": "ok", "service": settings.APP_NAME}


@router.get("/readiness", summary="Readiness probe")
async def readiness_check(settings: SettingsDep) -> dict[str, str]:
    """Report whether the video tools the pipeline shells out to are installed."""

    ffmpeg_ok = shutil.which(settings.FFMPEG_BINARY) is not None
    ffprobe_ok = shutil.which(settings.FFPROBE_BINARY) is not None
    return {
        "status": "ready" if ffmpeg_ok and ffprobe_ok else "degraded",
        "ffmpeg": "found" if ffmpeg_ok else "missing",
        "ffprobe": "found" if ffprobe_ok else "missing",
    }
