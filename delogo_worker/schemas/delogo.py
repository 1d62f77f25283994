"""Pydantic models for delogo requests and detector calibration."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from delogo_worker.core.config import Settings


class DetectionConfig(BaseModel):
    """Calibration of the automatic overlay detector."""

    model_config = ConfigDict(frozen=True)

    target_samples: int = Field(default=24, ge=1, description="Maximum number of sampled frames.")
    min_interval_seconds: float = Field(default=0.5, gt=0.0, description="Shortest gap between two samples.")
    default_duration_seconds: float = Field(default=12.0, gt=0.0, description="Duration assumed when probing fails.")
    analysis_max_width: int = Field(default=320, ge=1, description="Width cap of the analysis resolution.")
    stddev_threshold: float = Field(default=8.0, ge=0.0, description="Temporal stddev at or below which a pixel is stable.")
    range_threshold: int = Field(default=15, ge=0, description="Max-min spread at or below which a pixel is stable.")
    bright_threshold: float = Field(default=200.0, description="Mean luminance at or above which a pixel is bright.")
    dark_threshold: float = Field(default=40.0, description="Mean luminance at or below which a pixel is dark.")
    min_component_area: int = Field(default=100, ge=0, description="Bounding-box area a component must exceed.")
    merge_iou: float = Field(default=0.3, ge=0.0, le=1.0, description="IOU above which two boxes are merged.")
    min_area_ratio: float = Field(default=0.002, ge=0.0, le=1.0)
    max_area_ratio: float = Field(default=0.12, ge=0.0, le=1.0)
    edge_margin_ratio: float = Field(default=0.25, ge=0.0, le=1.0, description="Edge band as a share of analysis width.")
    max_regions: int = Field(default=6, ge=1, description="Maximum boxes in a removal plan.")
    box_padding: int = Field(default=4, ge=0, description="Source-space margin added on each side of a box.")
    min_box_size: int = Field(default=2, ge=1, description="Smallest width/height an erase box may have.")

    @classmethod
    def from_settings(cls, settings: Settings) -> "DetectionConfig":
        return cls(
            target_samples=settings.DETECT_TARGET_SAMPLES,
            min_interval_seconds=settings.DETECT_MIN_INTERVAL_SECONDS,
            default_duration_seconds=settings.DETECT_DEFAULT_DURATION_SECONDS,
            analysis_max_width=settings.DETECT_ANALYSIS_MAX_WIDTH,
            stddev_threshold=settings.DETECT_STDDEV_THRESHOLD,
            range_threshold=settings.DETECT_RANGE_THRESHOLD,
            bright_threshold=settings.DETECT_BRIGHT_THRESHOLD,
            dark_threshold=settings.DETECT_DARK_THRESHOLD,
            min_component_area=settings.DETECT_MIN_COMPONENT_AREA,
            merge_iou=settings.DETECT_MERGE_IOU,
            min_area_ratio=settings.DETECT_MIN_AREA_RATIO,
            max_area_ratio=settings.DETECT_MAX_AREA_RATIO,
            edge_margin_ratio=settings.DETECT_EDGE_MARGIN_RATIO,
            max_regions=settings.DETECT_MAX_REGIONS,
            box_padding=settings.DETECT_BOX_PADDING,
            min_box_size=settings.DETECT_MIN_BOX_SIZE,
        )


class ManualRegionRequest(BaseModel):
    """User-drawn rectangle for the manual delogo endpoint."""

    x: int = Field(default=0, description="Left edge of the rectangle.")
    y: int = Field(default=0, description="Top edge of the rectangle.")
    w: int = Field(default=0, description="Rectangle width.")
    h: int = Field(default=0, description="Rectangle height.")
    video_width: Optional[int] = Field(default=None, description="Source video width in pixels.")
    video_height: Optional[int] = Field(default=None, description="Source video height in pixels.")
    display_width: Optional[int] = Field(
        default=None, description="Width of the player the rectangle was drawn on, if not source pixels."
    )
    display_height: Optional[int] = Field(default=None, description="Height of that player.")

    @model_validator(mode="after")
    def validate_rectangle(self) -> "ManualRegionRequest":
        if self.w <= 0 or self.h <= 0:
            raise ValueError("Invalid rectangle")
        return self

    @property
    def has_video_size(self) -> bool:
        return bool(self.video_width and self.video_height and self.video_width > 0 and self.video_height > 0)

    @property
    def has_display_size(self) -> bool:
        return bool(
            self.display_width and self.display_height and self.display_width > 0 and self.display_height > 0
        )
