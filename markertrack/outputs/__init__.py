"""
Output handlers module.

Renderers and encoders for tracked frames:
- MarkerVideoOutput: MP4 with a '+' at each marker
- GifOutput: Looping animated GIF
- CSVOutput: Marker positions as CSV

Example:
    >>> from markertrack.outputs import OutputManager
    >>> manager = OutputManager("input.mp4")
    >>> manager.add_output("video=filename=tracked.mp4")
    >>> manager.add_output("gif")
"""

from markertrack.outputs.base import OutputSpec, BaseOutput
from markertrack.outputs.video import MarkerVideoOutput
from markertrack.outputs.gif import GifOutput
from markertrack.outputs.data import CSVOutput
from markertrack.outputs.overlay import draw_markers, render_preview
from markertrack.outputs.manager import OutputManager, parse_output_specs, register_output_type

__all__ = [
    "OutputSpec",
    "BaseOutput",
    "MarkerVideoOutput",
    "GifOutput",
    "CSVOutput",
    "draw_markers",
    "render_preview",
    "OutputManager",
    "parse_output_specs",
    "register_output_type",
]
