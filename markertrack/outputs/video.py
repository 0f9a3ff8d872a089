"""
Annotated video output.
"""

import cv2
import numpy as np

from markertrack.outputs.base import BaseOutput, OutputSpec
from markertrack.outputs.overlay import draw_markers
from markertrack.tracking.errors import OutputError


class MarkerVideoOutput(BaseOutput):
    """
    Writes an MP4 of the frames with a '+' at every marker.

    Options:
        filename: Output filename (default: input_tracked.mp4)
        size: Marker size in pixels (default: 10)
        showids: 'true' or 'false' (default: false)
    """

    def __init__(self, spec: OutputSpec, input_path: str):
        super().__init__(spec, input_path)
        self.writer: cv2.VideoWriter | None = None
        self.marker_size = spec.get_int('size', 10)
        self.show_ids = spec.get_bool('showids', False)
        self.frames_written = 0

    def _get_default_suffix(self) -> str:
        return "_tracked"

    def _get_default_extension(self) -> str:
        return "mp4"

    def initialize(self, video_props: dict) -> None:
        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
        self.writer = cv2.VideoWriter(
            str(self.output_path),
            fourcc,
            video_props['fps'],
            (video_props['width'], video_props['height']),
        )
        if not self.writer.isOpened():
            self.writer = None
            raise OutputError(f"Failed to open video writer: {self.output_path}")

    def process_frame(
        self,
        frame_index: int,
        frame: np.ndarray,
        positions: np.ndarray,
    ) -> None:
        if self.writer is None:
            raise OutputError("Video output not initialized")
        self.writer.write(
            draw_markers(frame, positions, self.marker_size, self.show_ids)
        )
        self.frames_written += 1

    def finalize(self) -> None:
        if self.writer:
            self.writer.release()
            self.writer = None
