"""
markertrack - Punctate marker tracking in video
===============================================

Tracks a fixed number of dark markers through a sequence of grayscale
frames and produces one (x, y) trajectory per marker.

Main modules:
- markertrack.tracking: Segmentation, blob extraction and the tracking session
- markertrack.core: Frames, region masks, configuration and video input
- markertrack.outputs: Annotated video, GIF and CSV writers

Quick start:
    >>> from markertrack import TrackingSession
    >>> session = TrackingSession()
    >>> k = session.initialize(first_frame, threshold=135, mask=mask)
    >>> for frame in frames:
    ...     x, y = session.advance(frame)
    >>> x_log, y_log = session.export()
"""

__version__ = "0.1.0"

# Convenience imports
from markertrack.tracking import (
    TrackingSession,
    TrajectoryLog,
    InitializationError,
    MissedDetectionWarning,
)
from markertrack.core.config import TrackingConfig
from markertrack.outputs import OutputManager, OutputSpec

__all__ = [
    "__version__",
    "TrackingSession",
    "TrajectoryLog",
    "InitializationError",
    "MissedDetectionWarning",
    "TrackingConfig",
    "OutputManager",
    "OutputSpec",
]
