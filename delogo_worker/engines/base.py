"""Interfaces and value types for video engine implementations."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from delogo_worker.services.geometry import Box


@dataclass(frozen=True)
class VideoProbe:
    """Stream properties reported by the engine."""

    width: int
    height: int
    duration: Optional[float] = None
    rotation: int = 0

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class PassResult:
    """Outcome of one filter pass: an output artifact or a failure reason."""

    output: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.output is not None and self.error is None

    @classmethod
    def success(cls, output: Path) -> "PassResult":
        return cls(output=output)

    @classmethod
    def failure(cls, reason: str) -> "PassResult":
        return cls(error=reason)


class RotationDirection(str, Enum):
    clockwise = "clockwise"
    counterclockwise = "counterclockwise"


@dataclass(frozen=True)
class EraseRegion:
    box: Box


@dataclass(frozen=True)
class Rotate:
    direction: RotationDirection


@dataclass(frozen=True)
class Normalize:
    """Even frame dimensions and the configured output pixel format."""


VideoFilter = Union[EraseRegion, Rotate, Normalize]


class BaseVideoEngine(abc.ABC):
    """Template for the decode/filter/encode backend used by the pipeline.

    Calls block until the underlying tool finishes.
    """

    @abc.abstractmethod
    def probe_duration(self, video_path: Path) -> Optional[float]:
        """Return the duration in seconds, or ``None`` when it cannot be determined."""

    @abc.abstractmethod
    def probe_video(self, video_path: Path) -> VideoProbe:
        """Return stream properties or raise ``EngineError``."""

    @abc.abstractmethod
    def extract_frames(self, video_path: Path, fps: float, out_dir: Path) -> list[Path]:
        """Write still frames sampled at ``fps`` into ``out_dir``; raise ``ExtractionError`` on failure."""

    @abc.abstractmethod
    def apply_filters(self, source: Path, target: Path, filters: Sequence[VideoFilter]) -> PassResult:
        """Run one re-encoding pass of ``filters`` from ``source`` to ``target``."""
