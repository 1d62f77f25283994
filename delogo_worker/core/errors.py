"""Error taxonomy shared by the detection and removal pipeline."""

from fastapi import status


class DelogoError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Processing failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InputError(DelogoError):
    """The request was rejected before any engine call."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnsupportedRotationError(InputError):
    """The source carries a rotation flag instead of portrait pixel dimensions."""

    default_message = "Videos with rotation metadata are not supported"


class ExtractionError(DelogoError):
    """Sample frames could not be extracted from the source."""

    default_message = "Frame extraction failed"


class NoFramesExtractedError(ExtractionError):
    default_message = "No frames extracted"


class NoWatermarkDetectedError(DelogoError):
    """Detection produced an empty removal plan."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No watermark detected"


class AllPassesFailedError(DelogoError):
    """Every planned erase pass failed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No valid watermark region detected"


class EngineError(DelogoError):
    """Any other video engine failure (probe, rotate, normalize)."""

    default_message = "Video engine invocation failed"
