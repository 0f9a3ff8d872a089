"""
Animated GIF output.
"""

import cv2
import numpy as np
from PIL import Image

from markertrack.outputs.base import BaseOutput, OutputSpec
from markertrack.outputs.overlay import draw_markers
from markertrack.tracking.errors import OutputError


class GifOutput(BaseOutput):
    """
    Writes a looping animated GIF of the annotated frames.

    GIF frames must all be known before the file is written, so the
    palettized frames are kept until finalize().

    Options:
        filename: Output filename (default: input_tracked.gif)
        size: Marker size in pixels (default: 10)
    """

    def __init__(self, spec: OutputSpec, input_path: str):
        super().__init__(spec, input_path)
        self.marker_size = spec.get_int('size', 10)
        self.duration_ms = 100
        self.frames: list[Image.Image] = []
        self._initialized = False

    def _get_default_suffix(self) -> str:
        return "_tracked"

    def _get_default_extension(self) -> str:
        return "gif"

    def initialize(self, video_props: dict) -> None:
        fps = video_props.get('fps') or 0
        if fps > 0:
            self.duration_ms = int(round(1000.0 / fps))
        self.frames = []
        self._initialized = True

    def process_frame(
        self,
        frame_index: int,
        frame: np.ndarray,
        positions: np.ndarray,
    ) -> None:
        if not self._initialized:
            raise OutputError("GIF output not initialized")
        vis = draw_markers(frame, positions, self.marker_size)
        rgb = cv2.cvtColor(vis, cv2.COLOR_BGR2RGB)
        self.frames.append(Image.fromarray(rgb).quantize(colors=256))

    def finalize(self) -> None:
        if not self.frames:
            self._initialized = False
            return
        first, *rest = self.frames
        try:
            first.save(
                self.output_path,
                save_all=True,
                append_images=rest,
                duration=self.duration_ms,
                loop=0,
            )
        except OSError as e:
            raise OutputError(f"Failed to write GIF {self.output_path}: {e}") from e
        finally:
            self.frames = []
            self._initialized = False
