"""
Frame value type and in-memory frame sources.

Frames are grayscale intensity arrays tagged with their index in the
source. Sources are lazy iterators so a run never has to hold the whole
video in memory.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator

import cv2
import numpy as np


@dataclass(frozen=True)
class Frame:
    """A single grayscale frame and its index in the source."""
    index: int
    data: np.ndarray

    def __post_init__(self):
        data = np.asarray(self.data)
        if data.ndim != 2:
            raise ValueError(
                f"Frame data must be 2D grayscale, got shape {data.shape}"
            )
        data = data.view()
        data.flags.writeable = False
        object.__setattr__(self, "data", data)

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape


def to_gray(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to a single-channel grayscale array.

    2D arrays are returned unchanged. 3-channel images are assumed to be
    BGR (OpenCV order) and 4-channel images BGRA.
    """
    image = np.asarray(image)
    if image.ndim == 2:
        return image
    if image.ndim == 3 and image.shape[2] == 1:
        return image[:, :, 0]
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if image.ndim == 3 and image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    raise ValueError(f"Unsupported image shape for grayscale: {image.shape}")


def as_frame(frame: Frame | np.ndarray, index: int = 0) -> Frame:
    """Wrap a raw array as a Frame, passing Frames through unchanged."""
    if isinstance(frame, Frame):
        return frame
    return Frame(index=index, data=to_gray(frame))


def iter_frames(
    stack: np.ndarray | Iterable[np.ndarray],
    start_index: int = 0,
    frame_axis: int = 0,
) -> Iterator[Frame]:
    """
    Lazily yield grayscale Frames from a stack of images.

    Args:
        stack: Array of frames, or any iterable of images
        start_index: Index assigned to the first frame
        frame_axis: Axis of the array that indexes frames (ignored for
            non-array iterables). Use -1 for (height, width, frames) stacks.

    Example:
        >>> for frame in iter_frames(np.zeros((10, 100, 100), np.uint8)):
        ...     session.advance(frame)
    """
    if isinstance(stack, np.ndarray):
        stack = np.moveaxis(stack, frame_axis, 0)
    for offset, image in enumerate(stack):
        yield Frame(index=start_index + offset, data=to_gray(image))
