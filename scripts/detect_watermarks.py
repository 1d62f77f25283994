"""Run overlay detection on a local video and print the removal plan."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on the import path when executed as a script.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from delogo_worker.core.config import get_settings  # noqa: E402
from delogo_worker.core.errors import DelogoError  # noqa: E402
from delogo_worker.core.logging import configure_logging  # noqa: E402
from delogo_worker.engines.ffmpeg_engine import FFmpegEngine  # noqa: E402
from delogo_worker.schemas.delogo import DetectionConfig  # noqa: E402
from delogo_worker.services.frame_sampler import FrameSampler  # noqa: E402
from delogo_worker.services.watermark_detection_service import WatermarkDetectionService  # noqa: E402
from delogo_worker.utils.workspace import request_workspace  # noqa: E402

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("video", type=Path, help="Video file to analyse.")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)
    settings = get_settings()
    config = DetectionConfig.from_settings(settings)
    sampler = FrameSampler(FFmpegEngine(settings), config)
    detector = WatermarkDetectionService(config)

    try:
        with request_workspace("detect-") as workdir:
            frames = sampler.sample(args.video, workdir / "frames")
            result = detector.detect(frames)
    except DelogoError as exc:
        logger.error("Detection failed: %s", exc)
        return 1

    print(f"source {result.source_size[0]}x{result.source_size[1]}, "
          f"analysis {result.analysis_size[0]}x{result.analysis_size[1]}, {result.frame_count} frames")
    if not result.plan:
        print("no watermark detected")
        return 2
    for rank, box in enumerate(result.plan):
        print(f"{rank}: x={box.x} y={box.y} w={box.w} h={box.h}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
