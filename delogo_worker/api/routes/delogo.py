"""Routes for manual and automatic watermark removal."""

import logging
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import APIRouter, Query, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from delogo_worker.core.config import Settings
from delogo_worker.core.errors import InputError
from delogo_worker.dependencies import RemovalOrchestratorDep, SettingsDep
from delogo_worker.schemas.delogo import ManualRegionRequest
from delogo_worker.utils.workspace import request_workspace

logger = logging.getLogger(__name__)

router = APIRouter(tags=["delogo"])

OCTET_STREAM = "application/octet-stream"


def _require_octet_stream(request: Request) -> None:
    content_type = request.headers.get("content-type") or ""
    if OCTET_STREAM not in content_type:
        raise InputError(f"Expected {OCTET_STREAM}")


async def _open_body(request: Request) -> tuple[bytes, AsyncIterator[bytes]]:
    """Pull the first non-empty chunk so an empty upload is rejected before any disk work."""

    chunks = request.stream()
    async for chunk in chunks:
        if chunk:
            return chunk, chunks
    raise InputError("Missing body")


async def _store_body(first: bytes, rest: AsyncIterator[bytes], target: Path) -> Path:
    """Stream the request body to disk so large uploads never sit in memory."""

    size = len(first)
    with target.open("wb") as buffer:
        buffer.write(first)
        async for chunk in rest:
            buffer.write(chunk)
            size += len(chunk)

    logger.info("Stored %d byte upload at %s", size, target)
    return target


def _video_response(payload: bytes, filename: str, settings: Settings) -> Response:
    return Response(
        content=payload,
        media_type=settings.OUTPUT_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/delogo",
    response_class=Response,
    summary="Erase a user-selected rectangle",
    response_description="The processed video.",
)
async def delogo(
    request: Request,
    orchestrator: RemovalOrchestratorDep,
    settings: SettingsDep,
    x: int = Query(default=0, description="Left edge of the rectangle."),
    y: int = Query(default=0, description="Top edge of the rectangle."),
    w: int = Query(default=0, description="Rectangle width, must be positive."),
    h: int = Query(default=0, description="Rectangle height, must be positive."),
    vw: int = Query(default=0, description="Source video width (0 to probe)."),
    vh: int = Query(default=0, description="Source video height (0 to probe)."),
    dw: int = Query(default=0, description="Display width the rectangle was drawn on (0 for source pixels)."),
    dh: int = Query(default=0, description="Display height the rectangle was drawn on."),
) -> Response:
    """Remove a watermark from the rectangle the caller selected."""

    _require_octet_stream(request)
    try:
        region = ManualRegionRequest(
            x=x,
            y=y,
            w=w,
            h=h,
            video_width=vw or None,
            video_height=vh or None,
            display_width=dw or None,
            display_height=dh or None,
        )
    except ValidationError as exc:
        raise InputError("Invalid rectangle") from exc

    first, rest = await _open_body(request)
    with request_workspace("delogo-") as workdir:
        input_path = await _store_body(first, rest, workdir / "input.mp4")
        output = await run_in_threadpool(orchestrator.remove_manual, input_path, workdir, region)
        payload = output.read_bytes()

    logger.info("Manual delogo finished with %d byte result", len(payload))
    return _video_response(payload, "delogo.mp4", settings)


@router.post(
    "/auto-delogo",
    response_class=Response,
    summary="Detect and erase persistent overlays",
    response_description="The processed video.",
)
async def auto_delogo(
    request: Request,
    orchestrator: RemovalOrchestratorDep,
    settings: SettingsDep,
) -> Response:
    """Detect static logos and watermarks and remove each of them."""

    _require_octet_stream(request)
    first, rest = await _open_body(request)

    with request_workspace("auto-delogo-") as workdir:
        input_path = await _store_body(first, rest, workdir / "input.mp4")
        output = await run_in_threadpool(orchestrator.remove_automatic, input_path, workdir)
        payload = output.read_bytes()

    logger.info(
        "Automatic delogo finished with %d pass(es) and %d byte result", orchestrator.applied, len(payload)
    )
    return _video_response(payload, "auto-delogo.mp4", settings)
