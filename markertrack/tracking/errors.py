"""
Exceptions and warnings raised by the marker tracker.
"""


class MarkerTrackingError(Exception):
    """Base class for marker tracking errors."""


class InitializationError(MarkerTrackingError):
    """No markers were found in the first frame, so there is nothing to track."""


class SessionStateError(MarkerTrackingError, RuntimeError):
    """A session operation was called in the wrong state."""


class OutputError(MarkerTrackingError, RuntimeError):
    """An output writer failed to open or write."""


class MissedDetectionWarning(UserWarning):
    """Fewer blobs than markers were found; previous positions were carried forward."""


class AmbiguousAssignmentWarning(UserWarning):
    """Two or more markers were assigned to the same candidate blob."""
