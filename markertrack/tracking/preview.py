"""
Threshold preview for tuning a threshold before tracking.
"""

from dataclasses import dataclass, replace

import numpy as np

from markertrack.core.config import PREVIEW_STEPS, SegmentationSteps
from markertrack.tracking.blobs import Blob, blob_centroids, extract_blobs
from markertrack.tracking.segment import Segmenter, binarize


@dataclass
class ThresholdPreview:
    """Intermediate images and blobs for one frame at one threshold."""
    frame: np.ndarray
    threshold: float
    raw: np.ndarray
    cleaned: np.ndarray
    blobs: list[Blob]

    @property
    def centroids(self) -> np.ndarray:
        return blob_centroids(self.blobs)

    @property
    def num_blobs(self) -> int:
        return len(self.blobs)


def preview_threshold(
    frame: np.ndarray,
    threshold: float,
    steps: SegmentationSteps = PREVIEW_STEPS,
    mask: np.ndarray | None = None,
    connectivity: int = 8,
) -> ThresholdPreview:
    """
    Segment a frame and report what a tracker would see at this threshold.

    A region mask, when given, is always applied. Does not touch any
    tracking session.
    """
    frame = np.asarray(frame)
    if mask is not None and not steps.apply_mask:
        steps = replace(steps, apply_mask=True)
    cleaned = Segmenter(steps)(frame, threshold, mask)
    return ThresholdPreview(
        frame=frame,
        threshold=threshold,
        raw=binarize(frame, threshold),
        cleaned=cleaned,
        blobs=extract_blobs(cleaned, connectivity),
    )
