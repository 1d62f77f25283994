"""Application configuration and settings management."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Delogo Worker"
    APP_VERSION: str = "0.1.0"
    DESCRIPTION: str = (
        "Detects persistent logo and watermark overlays in uploaded videos "
        "and erases them with FFmpeg delogo passes."
    )
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    API_PREFIX: str = "/api"
    API_V1_PREFIX: str = "/v1"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    TEMP_DIR: Path | None = None
    FFMPEG_BINARY: str = "ffmpeg"
    FFPROBE_BINARY: str = "ffprobe"

    # Encoding applied by every filter pass
    VIDEO_CODEC: str = "libx264"
    ENCODE_PRESET: str = "veryfast"
    ENCODE_CRF: int = 23
    AUDIO_CODEC: str = "copy"
    OUTPUT_PIXEL_FORMAT: str = "yuv420p"
    OUTPUT_CONTENT_TYPE: str = "video/mp4"

    # Detector calibration
    DETECT_TARGET_SAMPLES: int = 24
    DETECT_MIN_INTERVAL_SECONDS: float = 0.5
    DETECT_DEFAULT_DURATION_SECONDS: float = 12.0
    DETECT_ANALYSIS_MAX_WIDTH: int = 320
    DETECT_STDDEV_THRESHOLD: float = 8.0
    DETECT_RANGE_THRESHOLD: int = 15
    DETECT_BRIGHT_THRESHOLD: float = 200.0
    DETECT_DARK_THRESHOLD: float = 40.0
    DETECT_MIN_COMPONENT_AREA: int = 100
    DETECT_MERGE_IOU: float = 0.3
    DETECT_MIN_AREA_RATIO: float = 0.002
    DETECT_MAX_AREA_RATIO: float = 0.12
    DETECT_EDGE_MARGIN_RATIO: float = 0.25
    DETECT_MAX_REGIONS: int = 6
    DETECT_BOX_PADDING: int = 4
    DETECT_MIN_BOX_SIZE: int = 2


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


settings = get_settings()
