"""Raster decode and resize helpers for analysis frames."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def image_size(path: Path) -> tuple[int, int]:
    """Return ``(width, height)`` of an image without decoding its pixels."""

    with Image.open(path) as image:
        return image.size


def load_greyscale(path: Path, width: int, height: int) -> np.ndarray:
    """Decode ``path``, resize it to ``(width, height)`` and return 8-bit luminance rows."""

    with Image.open(path) as image:
        resized = image.convert("RGB").resize((width, height), Image.Resampling.LANCZOS)
    return np.asarray(resized.convert("L"), dtype=np.uint8)
