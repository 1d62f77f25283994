"""Mapping of boxes between analysis, display, source and rotated pixel spaces."""

from __future__ import annotations

import math
from collections.abc import Iterable

from delogo_worker.schemas.delogo import ManualRegionRequest
from delogo_worker.services.geometry import Box, round_half_up


def analysis_to_source(
    boxes: Iterable[Box],
    analysis_size: tuple[int, int],
    source_size: tuple[int, int],
    padding: int = 4,
    min_size: int = 2,
) -> list[Box]:
    """Scale analysis boxes to source pixels, pad them and clamp them into the frame.

    Boxes that end up smaller than ``min_size`` in either dimension are dropped.
    """

    target_w, target_h = analysis_size
    source_w, source_h = source_size
    scale_x = source_w / target_w
    scale_y = source_h / target_h

    remapped: list[Box] = []
    for box in boxes:
        x = max(0, math.floor(box.x * scale_x) - padding)
        y = max(0, math.floor(box.y * scale_y) - padding)
        w = min(math.floor(box.w * scale_x) + 2 * padding, source_w - x)
        h = min(math.floor(box.h * scale_y) + 2 * padding, source_h - y)
        if w < min_size or h < min_size:
            continue
        remapped.append(Box(x, y, w, h))
    return remapped


def display_to_source(box: Box, display_size: tuple[int, int], video_size: tuple[int, int]) -> Box:
    """Undo contain-scaling of a player: remove letterbox offsets, then divide by the scale."""

    display_w, display_h = display_size
    video_w, video_h = video_size
    scale = min(display_w / video_w, display_h / video_h)
    offset_x = (display_w - video_w * scale) / 2
    offset_y = (display_h - video_h * scale) / 2
    return Box(
        max(0, round_half_up((box.x - offset_x) / scale)),
        max(0, round_half_up((box.y - offset_y) / scale)),
        max(0, round_half_up(box.w / scale)),
        max(0, round_half_up(box.h / scale)),
    )


def clamp_to_frame(box: Box, frame_size: tuple[int, int] | None) -> Box:
    """Force a non-negative origin and a 1px minimum extent that stays inside the frame."""

    x = max(0, box.x)
    y = max(0, box.y)
    w = max(1, box.w)
    h = max(1, box.h)
    if frame_size is not None:
        frame_w, frame_h = frame_size
        x = min(x, frame_w - 1)
        y = min(y, frame_h - 1)
        w = min(w, frame_w - x)
        h = min(h, frame_h - y)
    return Box(x, y, w, h)


def rotate_clockwise(box: Box, source_size: tuple[int, int]) -> Box:
    """Express a source box in the frame produced by a 90 degree clockwise rotation."""

    source_w, source_h = source_size
    rotated_w, rotated_h = source_h, source_w

    rx = box.y
    ry = max(0, source_w - (box.x + box.w))
    x = max(0, min(rx, rotated_w - 1))
    y = max(0, min(ry, rotated_h - 1))
    w = max(1, min(box.h, rotated_w - x))
    h = max(1, min(box.w, rotated_h - y))
    return Box(x, y, w, h)


def is_portrait(source_size: tuple[int, int]) -> bool:
    width, height = source_size
    return height > width


def manual_to_engine_space(
    region: ManualRegionRequest, source_size: tuple[int, int] | None
) -> tuple[Box, bool]:
    """Turn a user rectangle into the box the erase filter sees.

    Returns the box and whether the source has to be rotated clockwise first.
    """

    box = Box(region.x, region.y, region.w, region.h)
    if source_size is not None and region.has_display_size:
        box = display_to_source(box, (region.display_width, region.display_height), source_size)

    box = clamp_to_frame(box, source_size)
    if source_size is not None and is_portrait(source_size):
        return rotate_clockwise(box, source_size), True
    return box, False
