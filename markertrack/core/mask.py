"""
Region masks restricting where markers are detected at initialization.

A region mask is a plain boolean array with the frame's shape. How the
sub-regions were chosen (drawn interactively, typed on the command line,
loaded from disk) does not matter here; these helpers just union them.
"""

from typing import Iterable, Sequence

import cv2
import numpy as np


def rect_mask(
    shape: tuple[int, int],
    roi: tuple[float, float, float, float],
) -> np.ndarray:
    """Create a boolean mask for an (x, y, w, h) rectangle, clamped to the image."""
    mask = np.zeros(shape, dtype=bool)
    x, y, w, h = [int(round(v)) for v in roi]
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(shape[1], x + w), min(shape[0], y + h)
    if x1 > x0 and y1 > y0:
        mask[y0:y1, x0:x1] = True
    return mask


def polygon_mask(
    shape: tuple[int, int],
    vertices: Sequence[tuple[float, float]],
) -> np.ndarray:
    """Create a boolean mask for a filled polygon given as (x, y) vertices."""
    canvas = np.zeros(shape, dtype=np.uint8)
    pts = np.round(np.asarray(vertices, dtype=np.float64)).astype(np.int32)
    if len(pts) >= 3:
        cv2.fillPoly(canvas, [pts.reshape(-1, 1, 2)], 1)
    return canvas.astype(bool)


def union_masks(shape: tuple[int, int], masks: Iterable[np.ndarray]) -> np.ndarray:
    """
    Union zero or more sub-region masks into one region mask.

    An empty iterable yields an all-False mask.
    """
    result = np.zeros(shape, dtype=bool)
    for mask in masks:
        result |= validate_mask(mask, shape)
    return result


def mask_from_rois(
    shape: tuple[int, int],
    rois: Iterable[tuple[float, float, float, float]],
) -> np.ndarray:
    """Build a region mask from (x, y, w, h) rectangles."""
    return union_masks(shape, (rect_mask(shape, roi) for roi in rois))


def validate_mask(mask: np.ndarray, shape: tuple[int, int]) -> np.ndarray:
    """
    Check a mask against a frame shape and return it as a boolean array.

    Raises:
        ValueError: If the mask shape does not match the frame shape
    """
    mask = np.asarray(mask)
    if mask.shape != tuple(shape):
        raise ValueError(
            f"Region mask shape {mask.shape} does not match frame shape {tuple(shape)}"
        )
    return mask.astype(bool, copy=False)


def parse_roi(text: str) -> tuple[int, int, int, int]:
    """
    Parse an 'x,y,w,h' string into a rectangle.

    Raises:
        ValueError: If the string does not hold four integers or the size is not positive
    """
    parts = [p.strip() for p in text.split(',')]
    if len(parts) != 4:
        raise ValueError(f"ROI must be 'x,y,w,h', got: {text!r}")
    x, y, w, h = (int(p) for p in parts)
    if w <= 0 or h <= 0:
        raise ValueError(f"ROI width and height must be positive, got: {text!r}")
    return (x, y, w, h)
