from pathlib import Path

import pytest

from conftest import FakeVideoEngine
from delogo_worker.core.errors import ExtractionError, NoFramesExtractedError
from delogo_worker.schemas.delogo import DetectionConfig
from delogo_worker.services.frame_sampler import FrameSampler


class TestSamplingInterval:
    @pytest.mark.parametrize(
        "duration,expected",
        [
            (120.0, 5.0),
            (12.0, 0.5),
            (3.0, 0.5),
            (None, 0.5),
            (0.0, 0.5),
        ],
    )
    def test_interval(self, duration, expected):
        sampler = FrameSampler(FakeVideoEngine(), DetectionConfig())
        assert sampler.sampling_interval(duration) == pytest.approx(expected)

    def test_unknown_duration_uses_configured_default(self):
        sampler = FrameSampler(FakeVideoEngine(), DetectionConfig(default_duration_seconds=48.0))
        assert sampler.sampling_interval(None) == pytest.approx(2.0)


class TestSample:
    def test_requests_fps_from_interval(self, tmp_path: Path):
        engine = FakeVideoEngine(duration=240.0, frame_count=5)
        frames = FrameSampler(engine, DetectionConfig()).sample(tmp_path / "in.mp4", tmp_path / "frames")

        assert engine.extract_fps == pytest.approx(0.1)
        assert [p.name for p in frames] == [f"frame-{i:03d}.png" for i in range(1, 6)]

    def test_truncates_to_target_samples(self, tmp_path: Path):
        engine = FakeVideoEngine(frame_count=30)
        frames = FrameSampler(engine, DetectionConfig()).sample(tmp_path / "in.mp4", tmp_path / "frames")

        assert len(frames) == 24
        assert frames[-1].name == "frame-024.png"

    def test_zero_frames_is_fatal(self, tmp_path: Path):
        engine = FakeVideoEngine(frame_count=0)
        with pytest.raises(NoFramesExtractedError):
            FrameSampler(engine, DetectionConfig()).sample(tmp_path / "in.mp4", tmp_path / "frames")

    def test_extraction_errors_propagate(self, tmp_path: Path):
        engine = FakeVideoEngine(fail_extraction=True)
        with pytest.raises(ExtractionError):
            FrameSampler(engine, DetectionConfig()).sample(tmp_path / "in.mp4", tmp_path / "frames")
