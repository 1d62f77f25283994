"""Temporal per-pixel statistics over sampled greyscale frames."""

from __future__ import annotations

import numpy as np

from delogo_worker.schemas.delogo import DetectionConfig


class PixelStatistics:
    """Running sum, sum of squares, min and max for every analysis pixel.

    Buffers are flat and indexed by ``y * width + x``. Folding is associative
    and commutative per pixel, so the order of frames does not matter.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid analysis size {width}x{height}")
        self.width = width
        self.height = height
        size = width * height
        self._sum = np.zeros(size, dtype=np.float64)
        self._sum_sq = np.zeros(size, dtype=np.float64)
        self._min = np.full(size, 255, dtype=np.uint8)
        self._max = np.zeros(size, dtype=np.uint8)
        self.count = 0

    @property
    def size(self) -> int:
        return self.width * self.height

    def fold(self, frame: np.ndarray) -> None:
        """Accumulate one greyscale frame of shape ``(height, width)``."""

        if frame.shape != (self.height, self.width):
            raise ValueError(
                f"Frame shape {frame.shape} does not match analysis size {(self.height, self.width)}"
            )
        values = np.asarray(frame, dtype=np.uint8).reshape(-1)
        as_float = values.astype(np.float64)
        self._sum += as_float
        self._sum_sq += as_float * as_float
        np.minimum(self._min, values, out=self._min)
        np.maximum(self._max, values, out=self._max)
        self.count += 1

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height}")
        return y * self.width + x

    def at(self, x: int, y: int) -> tuple[float, float, int, int]:
        """Return ``(mean, variance, min, max)`` for one pixel."""

        i = self.index(x, y)
        n = max(1, self.count)
        mean = float(self._sum[i]) / n
        variance = max(0.0, float(self._sum_sq[i]) / n - mean * mean)
        return mean, variance, int(self._min[i]), int(self._max[i])

    def mean(self) -> np.ndarray:
        return self._sum / max(1, self.count)

    def variance(self) -> np.ndarray:
        n = max(1, self.count)
        mean = self._sum / n
        return np.maximum(0.0, self._sum_sq / n - mean * mean)

    def value_range(self) -> np.ndarray:
        return self._max.astype(np.int16) - self._min.astype(np.int16)

    def build_mask(self, config: DetectionConfig) -> np.ndarray:
        """Flag pixels that are both temporally stable and extreme in luminance."""

        mean = self.mean()
        stable = (np.sqrt(self.variance()) <= config.stddev_threshold) | (
            self.value_range() <= config.range_threshold
        )
        extreme = (mean >= config.bright_threshold) | (mean <= config.dark_threshold)
        return (stable & extreme).astype(np.uint8)
