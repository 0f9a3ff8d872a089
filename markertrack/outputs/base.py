"""
Base classes for output handlers.

Output handlers receive each tracked frame with its marker positions and
write it somewhere: an annotated video, an animated GIF, a CSV file.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import numpy as np


class OutputSpec:
    """
    Parses output specification strings.

    Format is ``type=key=value:key=value``; values may themselves
    contain ':' (e.g. Windows paths), which are kept with the preceding key.

    Example:
        >>> spec = OutputSpec("video=filename=tracked.mp4:size=12")
        >>> spec.output_type
        'video'
        >>> spec.get_int('size')
        12
    """

    def __init__(self, spec_string: str):
        if not spec_string or not spec_string.strip():
            raise ValueError("Empty output specification")

        output_type, _, rest = spec_string.partition('=')
        self.output_type: str = output_type.strip().lower()
        self.options: dict[str, str] = self._parse_options(rest) if rest else {}

    @staticmethod
    def _parse_options(options_str: str) -> dict[str, str]:
        options: dict[str, str] = {}
        key = None
        for token in options_str.split(':'):
            if '=' in token:
                key, value = token.split('=', 1)
                key = key.strip().lower()
                options[key] = value.strip()
            elif key is not None:
                options[key] += ':' + token
        return options

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key.lower(), default)

    def get_int(self, key: str, default: int = 0) -> int:
        try:
            return int(self.options[key.lower()])
        except (KeyError, ValueError):
            return default

    def get_float(self, key: str, default: float = 0.0) -> float:
        try:
            return float(self.options[key.lower()])
        except (KeyError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        val = self.get(key)
        if val is None:
            return default
        return val.lower() in ('true', 'yes', '1', 'on')

    def __repr__(self) -> str:
        return f"OutputSpec(type={self.output_type}, options={self.options})"


class BaseOutput(ABC):
    """
    Abstract base class for output handlers.

    Subclasses must implement:
        - _get_default_suffix(): Default filename suffix
        - _get_default_extension(): Default file extension
        - initialize(): Open files or writers
        - process_frame(): Handle one tracked frame
        - finalize(): Flush and close
    """

    def __init__(self, spec: OutputSpec, input_path: str | Path):
        self.spec = spec
        self.input_path = Path(input_path)
        self.output_path = self._resolve_output_path()

    @abstractmethod
    def _get_default_suffix(self) -> str:
        pass

    @abstractmethod
    def _get_default_extension(self) -> str:
        pass

    def _resolve_output_path(self) -> Path:
        """Use the spec's filename, or derive one from the input name."""
        filename = self.spec.get('filename')
        if filename:
            return Path(filename)
        stem = self.input_path.stem
        return Path(f"{stem}{self._get_default_suffix()}.{self._get_default_extension()}")

    @abstractmethod
    def initialize(self, video_props: dict) -> None:
        """
        Open the output.

        Args:
            video_props: Dictionary with 'width', 'height', 'fps'
        """

    @abstractmethod
    def process_frame(
        self,
        frame_index: int,
        frame: np.ndarray,
        positions: np.ndarray,
    ) -> None:
        """
        Handle one tracked frame.

        Args:
            frame_index: Index of the frame in its source
            frame: Grayscale frame
            positions: (K, 2) marker positions (x, y)
        """

    @abstractmethod
    def finalize(self) -> None:
        """Flush and close the output."""

    def get_output_path(self) -> Path:
        return self.output_path

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finalize()
        return False
