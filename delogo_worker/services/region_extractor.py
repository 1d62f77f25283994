"""Connected-component labeling of the overlay mask."""

from __future__ import annotations

import numpy as np

from delogo_worker.services.geometry import Box


def extract_regions(mask: np.ndarray, width: int, height: int, min_area: int = 100) -> list[Box]:
    """Return bounding boxes of 4-connected components whose box area exceeds ``min_area``.

    The fill walks an explicit stack of flat pixel indices, so large masked
    areas such as letterbox bars never hit the recursion limit.
    """

    flat = np.asarray(mask, dtype=np.uint8).reshape(-1)
    if flat.size != width * height:
        raise ValueError(f"Mask of {flat.size} pixels does not match {width}x{height}")

    cells = flat.tobytes()
    visited = bytearray(flat.size)
    boxes: list[Box] = []

    for start in np.flatnonzero(flat).tolist():
        if visited[start]:
            continue
        visited[start] = 1
        stack = [start]
        min_x, min_y = width, height
        max_x = max_y = 0

        while stack:
            idx = stack.pop()
            y, x = divmod(idx, width)
            if x < min_x:
                min_x = x
            if x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            if y > max_y:
                max_y = y

            neighbours = []
            if x > 0:
                neighbours.append(idx - 1)
            if x < width - 1:
                neighbours.append(idx + 1)
            if y > 0:
                neighbours.append(idx - width)
            if y < height - 1:
                neighbours.append(idx + width)

            for j in neighbours:
                if cells[j] and not visited[j]:
                    visited[j] = 1
                    stack.append(j)

        w = max_x - min_x + 1
        h = max_y - min_y + 1
        if w * h > min_area:
            boxes.append(Box(min_x, min_y, w, h))

    return boxes
