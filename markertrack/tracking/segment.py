"""
Frame segmentation: grayscale frame + threshold -> cleaned binary mask.

Markers are dark on a bright background, so foreground is every pixel
strictly darker than the threshold. The binary image is then cleaned
up in a fixed order:

1. clean      - drop foreground pixels with no foreground neighbour
2. fill       - set background pixels whose 8 neighbours are all foreground
3. close      - morphological closing with a disk structuring element
4. mask       - drop foreground outside the region mask

Which of these run is an explicit ``SegmentationSteps`` value rather than
something that depends on where segmentation is called from.
"""

import cv2
import numpy as np

from markertrack.core.config import SegmentationSteps
from markertrack.core.mask import validate_mask


# 8-neighbourhood, centre excluded
_NEIGHBOUR_KERNEL = np.array(
    [[1, 1, 1],
     [1, 0, 1],
     [1, 1, 1]],
    dtype=np.float32,
)


def disk(radius: int) -> np.ndarray:
    """Disk-shaped structuring element; radius 1 gives a 3x3 cross."""
    yy, xx = np.ogrid[-radius:radius + 1, -radius:radius + 1]
    return (xx * xx + yy * yy <= radius * radius).astype(np.uint8)


def binarize(frame: np.ndarray, threshold: float) -> np.ndarray:
    """Foreground is every pixel with intensity strictly below the threshold."""
    return np.asarray(frame) < threshold


def _neighbour_count(binary: np.ndarray) -> np.ndarray:
    # Out-of-image pixels count as background
    return cv2.filter2D(
        binary.astype(np.float32), -1, _NEIGHBOUR_KERNEL,
        borderType=cv2.BORDER_CONSTANT,
    )


def remove_isolated(binary: np.ndarray) -> np.ndarray:
    """Remove foreground pixels that have no foreground neighbour."""
    return binary & (_neighbour_count(binary) > 0)


def fill_isolated(binary: np.ndarray) -> np.ndarray:
    """Fill background pixels whose eight neighbours are all foreground."""
    return binary | (_neighbour_count(binary) >= 8)


def close(binary: np.ndarray, radius: int = 1) -> np.ndarray:
    """Morphological closing with a disk of the given radius."""
    if radius <= 0:
        return binary
    closed = cv2.morphologyEx(
        binary.astype(np.uint8), cv2.MORPH_CLOSE, disk(radius)
    )
    return closed.astype(bool)


def segment(
    frame: np.ndarray,
    threshold: float,
    fill_holes: bool = False,
    mask: np.ndarray | None = None,
    clean: bool = True,
    closing_radius: int = 1,
) -> np.ndarray:
    """
    Segment a grayscale frame into a cleaned binary foreground mask.

    Args:
        frame: 2D grayscale intensity array
        threshold: Intensity cutoff; foreground is intensity < threshold
        fill_holes: Fill isolated background pixels after cleaning
        mask: Optional region mask; foreground outside it is dropped
        clean: Remove isolated foreground pixels
        closing_radius: Disk radius for closing (0 disables)

    Returns:
        Boolean array with the frame's shape
    """
    frame = np.asarray(frame)
    if frame.ndim != 2:
        raise ValueError(f"Expected a 2D grayscale frame, got shape {frame.shape}")

    binary = binarize(frame, threshold)
    if clean:
        binary = remove_isolated(binary)
    if fill_holes:
        binary = fill_isolated(binary)
    binary = close(binary, closing_radius)
    if mask is not None:
        binary = binary & validate_mask(mask, frame.shape)
    return binary


class Segmenter:
    """
    Runs a fixed set of segmentation steps.

    Example:
        >>> segmenter = Segmenter(SegmentationSteps(fill_holes=True))
        >>> binary = segmenter(frame, threshold=135)
    """

    def __init__(self, steps: SegmentationSteps | None = None):
        self.steps = steps or SegmentationSteps()

    def __call__(
        self,
        frame: np.ndarray,
        threshold: float,
        mask: np.ndarray | None = None,
    ) -> np.ndarray:
        steps = self.steps
        return segment(
            frame,
            threshold,
            fill_holes=steps.fill_holes,
            mask=mask if steps.apply_mask else None,
            clean=steps.clean,
            closing_radius=steps.closing_radius,
        )

    def __repr__(self) -> str:
        return f"Segmenter({self.steps})"
