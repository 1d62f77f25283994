"""FFmpeg helper utilities."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from delogo_worker.core.config import Settings
from delogo_worker.engines.base import EraseRegion, Normalize, Rotate, RotationDirection, VideoFilter

logger = logging.getLogger(__name__)

TRANSPOSE_BY_DIRECTION = {
    RotationDirection.clockwise: "transpose=1",
    RotationDirection.counterclockwise: "transpose=2",
}
EVEN_DIMENSIONS_FILTER = "scale=trunc(iw/2)*2:trunc(ih/2)*2"


def resolve_binary(binary: str) -> str:
    resolved = shutil.which(binary)
    return resolved or binary


def render_filter(video_filter: VideoFilter, pixel_format: str = "yuv420p") -> str:
    """Translate a pipeline filter into FFmpeg filtergraph syntax."""

    if isinstance(video_filter, EraseRegion):
        box = video_filter.box
        return f"delogo=x={box.x}:y={box.y}:w={box.w}:h={box.h}:show=0"
    if isinstance(video_filter, Rotate):
        return TRANSPOSE_BY_DIRECTION[video_filter.direction]
    if isinstance(video_filter, Normalize):
        return f"{EVEN_DIMENSIONS_FILTER},format={pixel_format}"
    raise TypeError(f"Unsupported video filter: {video_filter!r}")


def build_filter_command(
    settings: Settings, source: Path, target: Path, filters: Sequence[VideoFilter]
) -> list[str]:
    """Construct a single re-encoding FFmpeg invocation applying ``filters`` in order."""

    filtergraph = ",".join(render_filter(item, settings.OUTPUT_PIXEL_FORMAT) for item in filters)
    command = [
        resolve_binary(settings.FFMPEG_BINARY),
        "-y",  # overwrite outputs
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(source),
        "-vf",
        filtergraph,
        "-c:v",
        settings.VIDEO_CODEC,
        "-preset",
        settings.ENCODE_PRESET,
        "-crf",
        str(settings.ENCODE_CRF),
        "-c:a",
        settings.AUDIO_CODEC,
        "-movflags",
        "+faststart",
        str(target),
    ]
    logger.debug("Built FFmpeg command %s", command)
    return command


def build_frame_extraction_command(settings: Settings, source: Path, fps: float, out_dir: Path) -> list[str]:
    return [
        resolve_binary(settings.FFMPEG_BINARY),
        "-y",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(source),
        "-vf",
        f"fps={fps:.6f}",
        str(out_dir / "frame-%03d.png"),
    ]


def build_probe_command(settings: Settings, source: Path) -> list[str]:
    return [
        resolve_binary(settings.FFPROBE_BINARY),
        "-v",
        "error",
        "-select_streams",
        "v:0",
        "-show_entries",
        "stream=width,height:stream_tags=rotate:stream_side_data=rotation:format=duration",
        "-of",
        "json",
        str(source),
    ]


def run_ffmpeg_command(command: Sequence[str]) -> subprocess.CompletedProcess[bytes]:
    """Execute FFmpeg (or ffprobe) and block until it exits.

    Raises ``RuntimeError`` carrying stderr when the tool fails or is missing.
    """

    logger.info("Running FFmpeg command: %s", " ".join(command))
    try:
        return subprocess.run(command, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as exc:
        stderr = exc.stderr.decode("utf-8", errors="ignore").strip() if exc.stderr else ""
        logger.error("FFmpeg failed with exit code %s", exc.returncode)
        raise RuntimeError(f"{Path(command[0]).name} exited with code {exc.returncode}: {stderr}") from exc
    except OSError as exc:
        raise RuntimeError(f"Unable to launch {command[0]}: {exc}") from exc


def parse_probe_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Pull width, height, duration and rotation out of ffprobe JSON output."""

    streams = payload.get("streams") or []
    if not streams:
        raise ValueError("No video stream found in source file.")

    stream = streams[0]
    width = int(stream.get("width") or 0)
    height = int(stream.get("height") or 0)
    if not width or not height:
        raise ValueError("Unable to determine video resolution.")

    rotation = 0
    rotate_tag = (stream.get("tags") or {}).get("rotate")
    if rotate_tag is not None:
        try:
            rotation = int(float(rotate_tag))
        except (TypeError, ValueError):
            rotation = 0
    for side_data in stream.get("side_data_list") or []:
        if "rotation" in side_data:
            try:
                rotation = int(float(side_data["rotation"]))
            except (TypeError, ValueError):
                continue

    duration = None
    duration_value = (payload.get("format") or {}).get("duration")
    try:
        duration = float(duration_value) if duration_value is not None else None
    except (TypeError, ValueError):
        duration = None

    return {
        "width": width,
        "height": height,
        "duration": duration,
        "rotation": rotation % 360,
    }


def decode_json(raw: bytes) -> dict[str, Any]:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Unable to parse ffprobe output") from exc
