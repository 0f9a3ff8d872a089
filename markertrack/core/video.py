"""
Video input for marker tracking.

Wraps OpenCV decoding as a lazy, finite source of grayscale Frames, so
only one decoded frame is held at a time.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import cv2
import numpy as np

from markertrack.core.frames import Frame, to_gray


@dataclass
class VideoProperties:
    """Properties of a video file."""
    width: int
    height: int
    fps: float
    frame_count: int

    @classmethod
    def from_capture(cls, cap: cv2.VideoCapture) -> "VideoProperties":
        """Create VideoProperties from an OpenCV VideoCapture."""
        return cls(
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
            fps=cap.get(cv2.CAP_PROP_FPS),
            frame_count=int(cap.get(cv2.CAP_PROP_FRAME_COUNT)),
        )

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "fps": self.fps,
            "frame_count": self.frame_count,
        }

    def frame_range_for(self, start_time: float, end_time: float) -> tuple[int, int]:
        """
        Convert a time range in seconds to a 1-indexed, inclusive frame range.

        Example:
            At 30 fps, (1.0, 2.0) covers frames 31 to 60.
        """
        if end_time <= start_time:
            raise ValueError(
                f"end_time ({end_time}) must be after start_time ({start_time})"
            )
        first = int(round(start_time * self.fps)) + 1
        last = int(round(end_time * self.fps))
        return (first, max(first, last))


class VideoReader:
    """
    Video reader yielding grayscale Frames over a frame range.

    Frame indices are 1-indexed, matching the reader's frame range.

    Example:
        with VideoReader("input.mp4", first_frame=100, last_frame=500) as reader:
            for frame in reader:
                session.advance(frame)
    """

    def __init__(
        self,
        path: str | Path,
        first_frame: int = 1,
        last_frame: int | None = None,
    ):
        """
        Initialize the video reader.

        Args:
            path: Path to video file
            first_frame: First frame to read (1-indexed)
            last_frame: Last frame to read (None = end of video)
        """
        if first_frame < 1:
            raise ValueError(f"first_frame must be >= 1, got {first_frame}")
        self.path = Path(path)
        self.first_frame = first_frame
        self.last_frame = last_frame

        self._cap: cv2.VideoCapture | None = None
        self._props: VideoProperties | None = None

    @classmethod
    def from_time_range(
        cls,
        path: str | Path,
        start_time: float,
        end_time: float,
    ) -> "VideoReader":
        """Create a reader covering start_time to end_time, in seconds."""
        props = get_video_properties(path)
        first, last = props.frame_range_for(start_time, end_time)
        return cls(path, first_frame=first, last_frame=last)

    def open(self) -> "VideoReader":
        """Open the video file."""
        if not self.path.exists():
            raise FileNotFoundError(f"Video file not found: {self.path}")

        self._cap = cv2.VideoCapture(str(self.path))
        if not self._cap.isOpened():
            raise RuntimeError(f"Failed to open video: {self.path}")

        self._props = VideoProperties.from_capture(self._cap)

        if self.last_frame is None or self.last_frame > self._props.frame_count:
            self.last_frame = self._props.frame_count

        # Seek to first frame (convert to 0-indexed)
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, self.first_frame - 1)
        return self

    def close(self) -> None:
        """Close the video file."""
        if self._cap:
            self._cap.release()
            self._cap = None

    @property
    def properties(self) -> VideoProperties:
        """Get video properties."""
        if self._props is None:
            raise RuntimeError("Video not opened. Call open() first.")
        return self._props

    @property
    def frame_range(self) -> tuple[int, int]:
        """Get the frame range being processed."""
        return (self.first_frame, self.last_frame or self.properties.frame_count)

    @property
    def frame_count(self) -> int:
        """Get number of frames in the processing range."""
        start, end = self.frame_range
        return max(0, end - start + 1)

    def read_frame(self) -> tuple[bool, np.ndarray | None]:
        """Read the next raw (BGR) frame."""
        if self._cap is None:
            raise RuntimeError("Video not opened. Call open() first.")
        ret, frame = self._cap.read()
        return ret, frame if ret else None

    def __iter__(self) -> Iterator[Frame]:
        """Iterate over grayscale frames in the range."""
        if self._cap is None:
            self.open()

        current_frame = self.first_frame
        while current_frame <= (self.last_frame or self.properties.frame_count):
            ret, image = self.read_frame()
            if not ret:
                break
            yield Frame(index=current_frame, data=to_gray(image))
            current_frame += 1

    def __enter__(self) -> "VideoReader":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


def get_video_properties(path: str | Path) -> VideoProperties:
    """Get properties of a video file without opening a reader."""
    cap = cv2.VideoCapture(str(path))
    if not cap.isOpened():
        raise RuntimeError(f"Failed to open video: {path}")
    try:
        return VideoProperties.from_capture(cap)
    finally:
        cap.release()
