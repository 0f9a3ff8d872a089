"""
Output manager for coordinating multiple output handlers.
"""

from pathlib import Path
from typing import Type

import numpy as np

from markertrack.outputs.base import BaseOutput, OutputSpec
from markertrack.outputs.data import CSVOutput
from markertrack.outputs.gif import GifOutput
from markertrack.outputs.video import MarkerVideoOutput


# Registry of available output types
OUTPUT_TYPES: dict[str, Type[BaseOutput]] = {
    'video': MarkerVideoOutput,
    'mp4': MarkerVideoOutput,
    'gif': GifOutput,
    'csv': CSVOutput,
}


def register_output_type(name: str, output_class: Type[BaseOutput]) -> None:
    """
    Register a new output type.

    Example:
        >>> class MyOutput(BaseOutput):
        ...     ...
        >>> register_output_type('myoutput', MyOutput)
    """
    OUTPUT_TYPES[name.lower()] = output_class


class OutputManager:
    """
    Fans each tracked frame out to several output handlers.

    ``process_frame`` has the same signature as a tracking session's
    ``on_frame_tracked`` callback, so a manager can be plugged in directly.

    Example:
        >>> manager = OutputManager("input.mp4")
        >>> manager.add_output("video")
        >>> manager.add_output("gif")
        >>> manager.initialize_all(props.to_dict())
        >>> session = TrackingSession(on_frame_tracked=manager.process_frame)
        >>> ...
        >>> manager.finalize_all()
    """

    def __init__(self, input_path: str | Path):
        self.input_path = input_path
        self.outputs: list[BaseOutput] = []

    def add_output(self, spec_string: str) -> BaseOutput:
        """
        Add an output from a specification string.

        Raises:
            ValueError: If the output type is unknown
        """
        spec = OutputSpec(spec_string)

        if spec.output_type not in OUTPUT_TYPES:
            available = list(OUTPUT_TYPES.keys())
            raise ValueError(
                f"Unknown output type: {spec.output_type}. "
                f"Available: {available}"
            )

        output = OUTPUT_TYPES[spec.output_type](spec, self.input_path)
        self.outputs.append(output)
        return output

    def initialize_all(self, video_props: dict) -> None:
        for output in self.outputs:
            output.initialize(video_props)

    def process_frame(
        self,
        frame_index: int,
        frame: np.ndarray,
        positions: np.ndarray,
    ) -> None:
        for output in self.outputs:
            output.process_frame(frame_index, frame, positions)

    def finalize_all(self) -> None:
        for output in self.outputs:
            output.finalize()

    def get_output_paths(self) -> list[Path]:
        return [output.get_output_path() for output in self.outputs]

    def __len__(self) -> int:
        return len(self.outputs)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize_all()
        return False


def parse_output_specs(specs: list[str], input_path: str | Path) -> OutputManager:
    """Create an OutputManager from a list of specification strings."""
    manager = OutputManager(input_path)
    for spec in specs:
        manager.add_output(spec)
    return manager
