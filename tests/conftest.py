"""Shared fixtures: a fake video engine and synthetic frame writers."""
from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from delogo_worker.core.config import settings
from delogo_worker.core.errors import EngineError, ExtractionError
from delogo_worker.dependencies import get_video_engine
from delogo_worker.engines.base import (
    BaseVideoEngine,
    EraseRegion,
    Normalize,
    PassResult,
    VideoFilter,
    VideoProbe,
)
from delogo_worker.main import create_application
from delogo_worker.schemas.delogo import DetectionConfig
from delogo_worker.services.geometry import Box

FrameWriter = Callable[[Path, int], None]


# ---------------------------------------------------------------------------
# Frame writers
# ---------------------------------------------------------------------------

def corner_logo_writer(
    size: tuple[int, int] = (320, 240), logo: Box = Box(0, 0, 40, 20), background: int = 128
) -> FrameWriter:
    """Flat mid-grey frames with a white block that never moves."""

    def write(path: Path, index: int) -> None:
        image = Image.new("L", size, background)
        image.paste(255, (logo.x, logo.y, logo.right, logo.bottom))
        image.save(path)

    return write


def flat_writer(size: tuple[int, int] = (320, 240), value: int = 128) -> FrameWriter:
    def write(path: Path, index: int) -> None:
        Image.new("L", size, value).save(path)

    return write


# ---------------------------------------------------------------------------
# Fake engine
# ---------------------------------------------------------------------------

class FakeVideoEngine(BaseVideoEngine):
    """In-process engine that records passes and appends a marker per filter to the artifact."""

    def __init__(
        self,
        *,
        duration: Optional[float] = 12.0,
        probe: Optional[VideoProbe] = VideoProbe(320, 240, 12.0),
        frame_writer: Optional[FrameWriter] = None,
        frame_count: int = 24,
        fail_boxes: Sequence[Box] = (),
        fail_all_erases: bool = False,
        fail_normalize: bool = False,
        fail_extraction: bool = False,
    ) -> None:
        self.duration = duration
        self.probe = probe
        self.frame_writer = frame_writer or corner_logo_writer()
        self.frame_count = frame_count
        self.fail_boxes = set(fail_boxes)
        self.fail_all_erases = fail_all_erases
        self.fail_normalize = fail_normalize
        self.fail_extraction = fail_extraction
        self.extract_fps: Optional[float] = None
        self.passes: list[tuple[Path, Path, tuple[VideoFilter, ...]]] = []

    def probe_duration(self, video_path: Path) -> Optional[float]:
        return self.duration

    def probe_video(self, video_path: Path) -> VideoProbe:
        if self.probe is None:
            raise EngineError("probe failed")
        return self.probe

    def extract_frames(self, video_path: Path, fps: float, out_dir: Path) -> list[Path]:
        if self.fail_extraction:
            raise ExtractionError("decoder exploded")
        self.extract_fps = fps
        out_dir.mkdir(parents=True, exist_ok=True)
        for index in range(self.frame_count):
            self.frame_writer(out_dir / f"frame-{index + 1:03d}.png", index)
        return sorted(out_dir.glob("frame-*.png"))

    def apply_filters(self, source: Path, target: Path, filters: Sequence[VideoFilter]) -> PassResult:
        self.passes.append((source, target, tuple(filters)))
        for item in filters:
            if isinstance(item, EraseRegion) and (self.fail_all_erases or item.box in self.fail_boxes):
                target.write_bytes(b"partial")
                return PassResult.failure(f"delogo rejected {item.box}")
            if isinstance(item, Normalize) and self.fail_normalize:
                return PassResult.failure("normalize rejected")

        markers = "".join(f"|{type(item).__name__}:{getattr(item, 'box', '')}" for item in filters)
        target.write_bytes(source.read_bytes() + markers.encode())
        return PassResult.success(target)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def detection_config() -> DetectionConfig:
    return DetectionConfig()


@pytest.fixture
def fake_engine() -> FakeVideoEngine:
    return FakeVideoEngine()


@pytest.fixture
def temp_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route request workspaces into a per-test directory."""

    root = tmp_path / "workspaces"
    root.mkdir()
    monkeypatch.setattr(settings, "TEMP_DIR", root)
    return root


@pytest.fixture
def make_client(temp_root: Path) -> Callable[[FakeVideoEngine], TestClient]:
    def factory(engine: FakeVideoEngine) -> TestClient:
        app = create_application()
        app.dependency_overrides[get_video_engine] = lambda: engine
        return TestClient(app)

    return factory
