"""
Data output handlers.
"""

import csv

import numpy as np

from markertrack.outputs.base import BaseOutput, OutputSpec
from markertrack.tracking.errors import OutputError


class CSVOutput(BaseOutput):
    """
    Writes marker positions as CSV while tracking runs.

    Columns: frame, marker, x, y

    Options:
        filename: Output filename (default: input_markers.csv)
    """

    def __init__(self, spec: OutputSpec, input_path: str):
        super().__init__(spec, input_path)
        self.file = None
        self.writer = None

    def _get_default_suffix(self) -> str:
        return "_markers"

    def _get_default_extension(self) -> str:
        return "csv"

    def initialize(self, video_props: dict) -> None:
        try:
            self.file = open(self.output_path, 'w', newline='')
        except OSError as e:
            raise OutputError(f"Failed to open {self.output_path}: {e}") from e
        self.writer = csv.writer(self.file)
        self.writer.writerow(['frame', 'marker', 'x', 'y'])

    def process_frame(
        self,
        frame_index: int,
        frame: np.ndarray,
        positions: np.ndarray,
    ) -> None:
        if self.writer is None:
            raise OutputError("CSV output not initialized")
        for marker_id, (x, y) in enumerate(np.asarray(positions).reshape(-1, 2)):
            self.writer.writerow([frame_index, marker_id, float(x), float(y)])

    def finalize(self) -> None:
        if self.file:
            self.file.close()
            self.file = None
            self.writer = None
