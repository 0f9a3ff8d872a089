"""
Connected-component extraction of marker blobs from a binary image.
"""

from dataclasses import dataclass

import cv2
import numpy as np


@dataclass(frozen=True)
class Blob:
    """A connected foreground region."""
    label: int
    area: int
    centroid: tuple[float, float]  # (x, y), mean pixel coordinate
    bbox: tuple[int, int, int, int]  # (x, y, w, h)


def extract_blobs(binary: np.ndarray, connectivity: int = 8) -> list[Blob]:
    """
    Label connected foreground regions and measure each one.

    Blobs come back in label-scan (row-major) order. That order has no
    meaning for marker identity.

    Args:
        binary: Boolean foreground mask
        connectivity: 8 (default) or 4

    Returns:
        List of Blob, empty if there is no foreground
    """
    if connectivity not in (4, 8):
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity}")

    image = np.asarray(binary).astype(np.uint8)
    num_labels, _, stats, centroids = cv2.connectedComponentsWithStats(
        image, connectivity=connectivity
    )

    blobs = []
    # Label 0 is background
    for label in range(1, num_labels):
        x, y, w, h, area = (int(v) for v in stats[label])
        cx, cy = centroids[label]
        blobs.append(Blob(
            label=label,
            area=area,
            centroid=(float(cx), float(cy)),
            bbox=(x, y, w, h),
        ))
    return blobs


def blob_centroids(blobs: list[Blob]) -> np.ndarray:
    """Stack blob centroids into an (N, 2) array of (x, y)."""
    if not blobs:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([b.centroid for b in blobs], dtype=np.float64)
