"""
Drawing helpers for annotated frames and threshold previews.
"""

import cv2
import numpy as np

from markertrack.core.frames import to_gray
from markertrack.tracking.preview import ThresholdPreview


MARKER_COLORS = [(0, 0, 255), (0, 255, 0), (255, 0, 255), (255, 255, 0), (0, 255, 255)]


def to_bgr(image: np.ndarray) -> np.ndarray:
    """Convert a grayscale or boolean image to 8-bit BGR for drawing."""
    image = np.asarray(image)
    if image.dtype == bool:
        image = image.astype(np.uint8) * 255
    elif image.dtype != np.uint8:
        image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image.copy()


def draw_markers(
    frame: np.ndarray,
    positions: np.ndarray,
    size: int = 10,
    show_ids: bool = False,
) -> np.ndarray:
    """
    Draw a '+' at each marker position.

    Args:
        frame: Grayscale or BGR frame
        positions: (K, 2) array of (x, y)
        size: Marker size in pixels
        show_ids: Label each marker with its id

    Returns:
        Annotated BGR copy of the frame
    """
    vis = to_bgr(frame)
    for marker_id, (x, y) in enumerate(np.asarray(positions).reshape(-1, 2)):
        color = MARKER_COLORS[marker_id % len(MARKER_COLORS)]
        center = (int(round(x)), int(round(y)))
        cv2.drawMarker(vis, center, color, cv2.MARKER_CROSS, size, 1)
        if show_ids:
            cv2.putText(
                vis, str(marker_id), (center[0] + 6, center[1] - 6),
                cv2.FONT_HERSHEY_SIMPLEX, 0.35, color, 1,
            )
    return vis


def _titled(image: np.ndarray, title: str) -> np.ndarray:
    cv2.putText(
        image, title, (5, 15), cv2.FONT_HERSHEY_SIMPLEX, 0.45, (0, 200, 255), 1
    )
    return image


def render_preview(preview: ThresholdPreview) -> np.ndarray:
    """
    Render a threshold preview as a 2x2 montage.

    Panels: original grayscale, raw threshold mask, after cleanup,
    and the cleaned image with blob centroids.
    """
    gray = to_gray(preview.frame)
    panels = [
        _titled(to_bgr(gray), "Original grayscale"),
        _titled(to_bgr(preview.raw), "Threshold mask"),
        _titled(to_bgr(preview.cleaned), "After cleanup"),
        _titled(
            draw_markers(preview.cleaned, preview.centroids),
            f"Centroids ({preview.num_blobs})",
        ),
    ]
    top = np.hstack(panels[:2])
    bottom = np.hstack(panels[2:])
    return np.vstack([top, bottom])
