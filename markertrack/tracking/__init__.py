"""
Tracking module - Marker segmentation, blob extraction and tracking.

This module provides:
- segment / Segmenter: Threshold a frame into a cleaned binary mask
- extract_blobs: Connected components with area and centroid
- TrackingSession: Stable marker identities across frames
- TrajectoryLog: Per-marker (x, y) time series

Example:
    >>> from markertrack.tracking import TrackingSession
    >>> session = TrackingSession()
    >>> k = session.initialize(first_frame, threshold=135)
    >>> for frame in frames:
    ...     x, y = session.advance(frame)
"""

from markertrack.tracking.segment import (
    SegmentationSteps,
    Segmenter,
    segment,
    binarize,
)
from markertrack.tracking.blobs import Blob, extract_blobs, blob_centroids
from markertrack.tracking.session import (
    AssignmentMethod,
    FrameResult,
    TrackingSession,
    TrackingState,
    advance_state,
    initial_state,
)
from markertrack.tracking.trajectory import TrajectoryLog
from markertrack.tracking.preview import ThresholdPreview, preview_threshold
from markertrack.tracking.errors import (
    MarkerTrackingError,
    InitializationError,
    SessionStateError,
    OutputError,
    MissedDetectionWarning,
    AmbiguousAssignmentWarning,
)

__all__ = [
    "SegmentationSteps",
    "Segmenter",
    "segment",
    "binarize",
    "Blob",
    "extract_blobs",
    "blob_centroids",
    "AssignmentMethod",
    "FrameResult",
    "TrackingSession",
    "TrackingState",
    "advance_state",
    "initial_state",
    "TrajectoryLog",
    "ThresholdPreview",
    "preview_threshold",
    "MarkerTrackingError",
    "InitializationError",
    "SessionStateError",
    "OutputError",
    "MissedDetectionWarning",
    "AmbiguousAssignmentWarning",
]
