"""Adaptive sampling of still frames from the source video."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from delogo_worker.core.errors import NoFramesExtractedError
from delogo_worker.engines.base import BaseVideoEngine
from delogo_worker.schemas.delogo import DetectionConfig


class FrameSampler:
    """Spreads up to ``target_samples`` frames evenly over the video duration."""

    def __init__(self, engine: BaseVideoEngine, config: DetectionConfig) -> None:
        self._engine = engine
        self._config = config

    def sampling_interval(self, duration: float | None) -> float:
        if not duration or duration <= 0:
            duration = self._config.default_duration_seconds
        return max(self._config.min_interval_seconds, duration / self._config.target_samples)

    def sample(self, video_path: Path, frames_dir: Path) -> list[Path]:
        duration = self._engine.probe_duration(video_path)
        if duration is None:
            logger.warning(
                f"Duration unknown for {video_path.name}; assuming {self._config.default_duration_seconds}s"
            )
        interval = self.sampling_interval(duration)

        frames = self._engine.extract_frames(video_path, 1.0 / interval, frames_dir)
        frames = sorted(frames, key=lambda p: p.name)[: self._config.target_samples]
        if not frames:
            raise NoFramesExtractedError()

        logger.info(f"Sampled {len(frames)} frames every {interval:.2f}s from {video_path.name}")
        return frames
