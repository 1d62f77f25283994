"""Merging of fragmented boxes and ranking of overlay candidates."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from delogo_worker.schemas.delogo import DetectionConfig
from delogo_worker.services.geometry import Box, ScoredBox, round_half_up

MID_GREY = 128.0


def merge_regions(boxes: Iterable[Box], iou_threshold: float = 0.3) -> list[Box]:
    """Greedy single-pass merge, largest boxes first.

    Small fragments are absorbed into the dominant box of an overlay instead
    of competing with it as separate candidates.
    """

    merged: list[Box] = []
    for box in sorted(boxes, key=lambda b: b.area, reverse=True):
        for i, existing in enumerate(merged):
            if existing.iou(box) > iou_threshold:
                merged[i] = existing.union(box)
                break
        else:
            merged.append(box)
    return merged


def is_near_edge(box: Box, width: int, height: int, margin: int) -> bool:
    return box.x < margin or box.y < margin or box.right > width - margin or box.bottom > height - margin


def contrast_score(box: Box, mean_luma: np.ndarray) -> float:
    """Average distance from mid-grey over the box; ``mean_luma`` is ``(height, width)``."""

    patch = mean_luma[box.y:box.bottom, box.x:box.right]
    if patch.size == 0:
        return 0.0
    return float(np.abs(patch - MID_GREY).sum() / max(1, box.area))


def select_candidates(
    boxes: Iterable[Box],
    mean_luma: np.ndarray,
    config: DetectionConfig,
) -> list[ScoredBox]:
    """Filter merged boxes by area and edge proximity and keep the best scoring ones."""

    height, width = mean_luma.shape
    frame_area = width * height
    min_area = frame_area * config.min_area_ratio
    max_area = frame_area * config.max_area_ratio
    margin = round_half_up(config.edge_margin_ratio * width)

    within_area = [box for box in boxes if min_area <= box.area <= max_area]
    near_edge = [box for box in within_area if is_near_edge(box, width, height, margin)]
    candidates = near_edge or within_area

    scored = [ScoredBox(box, contrast_score(box, mean_luma)) for box in candidates]
    scored.sort(key=lambda item: item.score, reverse=True)
    return scored[: config.max_regions]
