"""Heuristic detection of static logo/watermark overlays from sampled frames."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from delogo_worker.schemas.delogo import DetectionConfig
from delogo_worker.services.coordinate_remapper import analysis_to_source
from delogo_worker.services.geometry import Box, ScoredBox, round_half_up
from delogo_worker.services.pixel_statistics import PixelStatistics
from delogo_worker.services.region_extractor import extract_regions
from delogo_worker.services.region_selection import merge_regions, select_candidates
from delogo_worker.utils.raster import image_size, load_greyscale


@dataclass
class DetectionResult:
    """Everything a detection run produced; ``plan`` is what gets erased."""

    source_size: tuple[int, int]
    analysis_size: tuple[int, int]
    frame_count: int
    masked_pixels: int = 0
    raw_regions: list[Box] = field(default_factory=list)
    merged_regions: list[Box] = field(default_factory=list)
    candidates: list[ScoredBox] = field(default_factory=list)
    plan: tuple[Box, ...] = ()


class WatermarkDetectionService:
    """Finds pixels that stay put and stay extreme across samples, then boxes them."""

    def __init__(self, config: DetectionConfig) -> None:
        self._config = config

    def analysis_size(self, source_size: tuple[int, int]) -> tuple[int, int]:
        source_w, source_h = source_size
        target_w = min(self._config.analysis_max_width, source_w)
        target_h = max(1, round_half_up(target_w * source_h / source_w))
        return target_w, target_h

    def accumulate(self, frames: Sequence[Path], analysis_size: tuple[int, int]) -> PixelStatistics:
        target_w, target_h = analysis_size
        stats = PixelStatistics(target_w, target_h)
        for frame_path in frames:
            stats.fold(load_greyscale(frame_path, target_w, target_h))
        return stats

    def detect(self, frames: Sequence[Path]) -> DetectionResult:
        if not frames:
            raise ValueError("At least one sampled frame is required")

        config = self._config
        source_size = image_size(frames[0])
        analysis = self.analysis_size(source_size)
        target_w, target_h = analysis

        stats = self.accumulate(frames, analysis)
        mask = stats.build_mask(config)
        result = DetectionResult(
            source_size=source_size,
            analysis_size=analysis,
            frame_count=stats.count,
            masked_pixels=int(mask.sum()),
        )

        result.raw_regions = extract_regions(mask, target_w, target_h, config.min_component_area)
        result.merged_regions = merge_regions(result.raw_regions, config.merge_iou)
        mean_luma = stats.mean().reshape(target_h, target_w)
        result.candidates = select_candidates(result.merged_regions, mean_luma, config)
        result.plan = tuple(
            analysis_to_source(
                (item.box for item in result.candidates),
                analysis,
                source_size,
                padding=config.box_padding,
                min_size=config.min_box_size,
            )
        )

        logger.info(
            f"Detection over {stats.count} frames at {target_w}x{target_h}: "
            f"{result.masked_pixels} masked px, {len(result.raw_regions)} regions, "
            f"{len(result.merged_regions)} merged, {len(result.plan)} planned"
        )
        for rank, box in enumerate(result.plan):
            logger.debug(f"Plan #{rank}: {box}")
        return result
