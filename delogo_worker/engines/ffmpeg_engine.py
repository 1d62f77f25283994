"""Video engine backed by the ffmpeg and ffprobe command-line tools."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from delogo_worker.core.config import Settings
from delogo_worker.core.errors import EngineError, ExtractionError
from delogo_worker.engines.base import BaseVideoEngine, PassResult, VideoFilter, VideoProbe
from delogo_worker.utils.ffmpeg import (
    build_filter_command,
    build_frame_extraction_command,
    build_probe_command,
    decode_json,
    parse_probe_payload,
    run_ffmpeg_command,
)

logger = logging.getLogger(__name__)


class FFmpegEngine(BaseVideoEngine):
    """Blocking subprocess-based implementation of the video engine."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def probe_video(self, video_path: Path) -> VideoProbe:
        try:
            result = run_ffmpeg_command(build_probe_command(self._settings, video_path))
            info = parse_probe_payload(decode_json(result.stdout))
        except (RuntimeError, ValueError) as exc:
            raise EngineError(f"Failed to probe video metadata: {exc}") from exc
        return VideoProbe(**info)

    def probe_duration(self, video_path: Path) -> Optional[float]:
        try:
            return self.probe_video(video_path).duration
        except EngineError as exc:
            logger.warning("Duration probe failed for %s: %s", video_path.name, exc)
            return None

    def extract_frames(self, video_path: Path, fps: float, out_dir: Path) -> list[Path]:
        out_dir.mkdir(parents=True, exist_ok=True)
        try:
            run_ffmpeg_command(build_frame_extraction_command(self._settings, video_path, fps, out_dir))
        except RuntimeError as exc:
            frames = self._written_frames(out_dir)
            if not frames:
                raise ExtractionError(f"Frame extraction failed: {exc}") from exc
            # a damaged tail still leaves usable samples
            logger.warning("Frame extraction stopped early after %d frame(s): %s", len(frames), exc)
            return frames
        return self._written_frames(out_dir)

    @staticmethod
    def _written_frames(out_dir: Path) -> list[Path]:
        return sorted(out_dir.glob("frame-*.png"), key=lambda p: p.name)

    def apply_filters(self, source: Path, target: Path, filters: Sequence[VideoFilter]) -> PassResult:
        try:
            run_ffmpeg_command(build_filter_command(self._settings, source, target, filters))
        except RuntimeError as exc:
            return PassResult.failure(str(exc))
        if not target.exists() or target.stat().st_size == 0:
            return PassResult.failure(f"FFmpeg produced no output at {target.name}")
        return PassResult.success(target)
