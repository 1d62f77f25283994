"""Request-scoped orchestration of watermark detection and iterative removal."""

from __future__ import annotations

from enum import Enum
from functools import reduce
from pathlib import Path
from typing import NamedTuple, Optional

from loguru import logger

from delogo_worker.core.errors import (
    AllPassesFailedError,
    EngineError,
    NoWatermarkDetectedError,
    UnsupportedRotationError,
)
from delogo_worker.engines.base import (
    BaseVideoEngine,
    EraseRegion,
    Normalize,
    Rotate,
    RotationDirection,
    VideoFilter,
)
from delogo_worker.schemas.delogo import DetectionConfig, ManualRegionRequest
from delogo_worker.services.coordinate_remapper import manual_to_engine_space
from delogo_worker.services.frame_sampler import FrameSampler
from delogo_worker.services.geometry import Box
from delogo_worker.services.watermark_detection_service import WatermarkDetectionService


class RemovalStage(str, Enum):
    """Lifecycle state of one removal request."""

    idle = "idle"
    sampling = "sampling"
    detecting = "detecting"
    removing = "removing"
    finalizing = "finalizing"
    done = "done"
    failed = "failed"


class ChainState(NamedTuple):
    current: Path
    applied: int


class RemovalOrchestrator:
    """Drives the video engine through sampling, detection, erase passes and normalization.

    One instance serves one request; the caller owns the workspace directory
    and removes it afterwards.
    """

    def __init__(
        self,
        engine: BaseVideoEngine,
        config: DetectionConfig,
        sampler: FrameSampler | None = None,
        detector: WatermarkDetectionService | None = None,
    ) -> None:
        self._engine = engine
        self._config = config
        self._sampler = sampler or FrameSampler(engine, config)
        self._detector = detector or WatermarkDetectionService(config)
        self.stage = RemovalStage.idle
        self.current_pass: Optional[int] = None
        self.applied = 0

    def _transition(self, stage: RemovalStage) -> None:
        logger.debug(f"Removal stage {self.stage.value} -> {stage.value}")
        self.stage = stage

    def remove_automatic(self, source: Path, workdir: Path) -> Path:
        """Detect overlays in ``source`` and erase them one pass per box."""

        try:
            self._transition(RemovalStage.sampling)
            frames = self._sampler.sample(source, workdir / "frames")

            self._transition(RemovalStage.detecting)
            plan = self._detector.detect(frames).plan
            if not plan:
                raise NoWatermarkDetectedError()

            self._transition(RemovalStage.removing)
            state = reduce(
                lambda acc, item: self._apply_pass(acc, item[0], item[1], source, workdir),
                enumerate(plan),
                ChainState(current=source, applied=0),
            )
            self.applied = state.applied
            if state.applied == 0:
                raise AllPassesFailedError()
            logger.info(f"Applied {state.applied}/{len(plan)} erase passes to {source.name}")

            output = self._finalize(state.current, source, workdir / "output.mp4")
        except Exception:
            self._transition(RemovalStage.failed)
            raise

        self._transition(RemovalStage.done)
        return output

    def remove_manual(self, source: Path, workdir: Path, region: ManualRegionRequest) -> Path:
        """Erase a single user-drawn rectangle, rotating portrait sources around the erase."""

        try:
            source_size = self._resolve_source_size(source, region)
            box, rotate = manual_to_engine_space(region, source_size)
            logger.info(f"Manual erase of {box} on {source.name} (rotated: {rotate})")

            filters: list[VideoFilter] = [EraseRegion(box), Normalize()]
            if rotate:
                filters = [
                    Rotate(RotationDirection.clockwise),
                    EraseRegion(box),
                    Rotate(RotationDirection.counterclockwise),
                    Normalize(),
                ]

            self._transition(RemovalStage.removing)
            result = self._engine.apply_filters(source, workdir / "output.mp4", filters)
            if not result.ok:
                raise EngineError(f"Delogo pass failed: {result.error}")
            self.applied = 1
        except Exception:
            self._transition(RemovalStage.failed)
            raise

        self._transition(RemovalStage.done)
        return result.output

    def _apply_pass(self, state: ChainState, index: int, box: Box, source: Path, workdir: Path) -> ChainState:
        self.current_pass = index
        target = workdir / f"pass-{index}.mp4"
        result = self._engine.apply_filters(state.current, target, [EraseRegion(box)])
        if not result.ok:
            logger.warning(f"Skipping box {box} after failed erase pass {index}: {result.error}")
            target.unlink(missing_ok=True)
            return state

        self._discard(state.current, source)
        return ChainState(current=result.output, applied=state.applied + 1)

    def _finalize(self, current: Path, source: Path, target: Path) -> Path:
        self._transition(RemovalStage.finalizing)
        result = self._engine.apply_filters(current, target, [Normalize()])
        if not result.ok:
            raise EngineError(f"Final normalization failed: {result.error}")
        self._discard(current, source)
        return result.output

    def _resolve_source_size(self, source: Path, region: ManualRegionRequest) -> tuple[int, int] | None:
        try:
            probe = self._engine.probe_video(source)
        except EngineError as exc:
            if not region.has_video_size:
                raise
            logger.warning(f"Probe failed ({exc}); trusting client-supplied video size")
            return region.video_width, region.video_height

        if probe.rotation:
            raise UnsupportedRotationError(
                f"Video carries a {probe.rotation} degree rotation flag; re-encode it upright first"
            )
        if region.has_video_size:
            return region.video_width, region.video_height
        return probe.size

    @staticmethod
    def _discard(artifact: Path, source: Path) -> None:
        if artifact != source:
            artifact.unlink(missing_ok=True)
