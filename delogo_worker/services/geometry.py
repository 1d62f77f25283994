"""Axis-aligned boxes shared by detection, remapping and removal."""

from __future__ import annotations

import math
from typing import NamedTuple

IOU_EPSILON = 1e-6


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, unlike the builtin banker's rounding."""

    return math.floor(value + 0.5)


class Box(NamedTuple):
    """Pixel rectangle ``(x, y, w, h)``; the coordinate space is tracked by the caller."""

    x: int
    y: int
    w: int
    h: int

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def iou(self, other: "Box") -> float:
        """Intersection over union, with a small epsilon to keep empty boxes finite."""

        inter_w = max(0, min(self.right, other.right) - max(self.x, other.x))
        inter_h = max(0, min(self.bottom, other.bottom) - max(self.y, other.y))
        inter = inter_w * inter_h
        return inter / (self.area + other.area - inter + IOU_EPSILON)

    def union(self, other: "Box") -> "Box":
        """Smallest box covering both boxes."""

        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Box(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)


class ScoredBox(NamedTuple):
    box: Box
    score: float
