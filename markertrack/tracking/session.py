"""
Marker tracking across frames with stable marker identities.

The number of markers K is fixed by the blobs found in the first frame.
Every later frame reports exactly K positions:

- If at least K blobs are found, each marker takes the position of a
  candidate blob chosen by the assignment policy.
- If fewer than K blobs are found, every marker keeps its previous
  position and a MissedDetectionWarning is emitted.

The per-frame update is a pure function of (state, frame) so runs can be
replayed or rolled back; TrackingSession threads that state through a
run and records the trajectories.
"""

import logging
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator

import numpy as np
from scipy.optimize import linear_sum_assignment

from markertrack.core.config import (
    INIT_STEPS,
    TRACK_STEPS,
    SegmentationSteps,
    TrackingConfig,
)
from markertrack.core.frames import Frame, as_frame
from markertrack.core.mask import validate_mask
from markertrack.tracking.blobs import blob_centroids, extract_blobs
from markertrack.tracking.errors import (
    AmbiguousAssignmentWarning,
    InitializationError,
    MissedDetectionWarning,
    SessionStateError,
)
from markertrack.tracking.segment import Segmenter
from markertrack.tracking.trajectory import TrajectoryLog


logger = logging.getLogger(__name__)

FrameCallback = Callable[[int, np.ndarray, np.ndarray], None]


class AssignmentMethod(Enum):
    """How previous marker positions are matched to new candidates."""
    HUNGARIAN = "hungarian"  # one-to-one minimum total squared distance
    NEAREST = "nearest"      # each marker independently takes its nearest candidate


def squared_distances(previous: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """(K, M) matrix of squared Euclidean distances."""
    diff = previous[:, None, :] - candidates[None, :, :]
    return np.sum(diff * diff, axis=2)


def assign_nearest(previous: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """
    Pick the nearest candidate for each marker independently.

    Candidates are not removed once claimed, so two markers may end up
    on the same candidate.
    """
    return np.argmin(squared_distances(previous, candidates), axis=1)


def assign_hungarian(previous: np.ndarray, candidates: np.ndarray) -> np.ndarray:
    """Match markers to distinct candidates minimising total squared distance."""
    rows, cols = linear_sum_assignment(squared_distances(previous, candidates))
    indices = np.empty(len(previous), dtype=np.intp)
    indices[rows] = cols
    return indices


ASSIGNERS: dict[AssignmentMethod, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    AssignmentMethod.HUNGARIAN: assign_hungarian,
    AssignmentMethod.NEAREST: assign_nearest,
}


def shared_claims(indices: np.ndarray) -> tuple[int, ...]:
    """Marker ids whose chosen candidate is also chosen by another marker."""
    _, inverse, counts = np.unique(indices, return_inverse=True, return_counts=True)
    return tuple(int(i) for i in np.flatnonzero(counts[inverse] > 1))


def _readonly(array: np.ndarray) -> np.ndarray:
    array = np.array(array, dtype=np.float64)
    array.flags.writeable = False
    return array


@dataclass(frozen=True)
class TrackingState:
    """
    Everything needed to process the next frame.

    Attributes:
        threshold: Intensity cutoff used for every frame
        positions: (K, 2) marker positions after the last processed frame
        frames_advanced: Number of frames processed since initialization
    """
    threshold: float
    positions: np.ndarray
    frames_advanced: int = 0

    def __post_init__(self):
        object.__setattr__(self, "positions", _readonly(self.positions).reshape(-1, 2))

    @property
    def num_markers(self) -> int:
        return len(self.positions)


@dataclass(frozen=True)
class FrameResult:
    """Outcome of processing one frame."""
    frame_index: int
    positions: np.ndarray
    candidates: np.ndarray
    missed: bool
    ambiguous: tuple[int, ...] = ()

    @property
    def x(self) -> np.ndarray:
        return self.positions[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self.positions[:, 1]


def initial_state(
    frame: Frame | np.ndarray,
    threshold: float,
    mask: np.ndarray | None = None,
    steps: SegmentationSteps = INIT_STEPS,
    connectivity: int = 8,
) -> TrackingState:
    """
    Find the markers in the first frame.

    Marker i is the i-th blob in extraction order.

    Raises:
        InitializationError: If no blobs are found
        ValueError: If the mask shape does not match the frame
    """
    frame = as_frame(frame)
    if mask is not None:
        mask = validate_mask(mask, frame.shape)

    binary = Segmenter(steps)(frame.data, threshold, mask)
    centroids = blob_centroids(extract_blobs(binary, connectivity))
    if len(centroids) == 0:
        raise InitializationError(
            f"No markers found in frame {frame.index} at threshold {threshold}"
        )

    logger.info(
        "Initialized %d marker(s) on frame %d at threshold %s",
        len(centroids), frame.index, threshold,
    )
    return TrackingState(threshold=threshold, positions=centroids)


def advance_state(
    state: TrackingState,
    frame: Frame | np.ndarray,
    steps: SegmentationSteps = TRACK_STEPS,
    assignment: AssignmentMethod = AssignmentMethod.HUNGARIAN,
    connectivity: int = 8,
) -> tuple[TrackingState, FrameResult]:
    """
    Process one frame without side effects.

    Raw arrays are given the index ``state.frames_advanced``.

    Returns:
        Tuple of (next_state, frame_result)
    """
    frame = as_frame(frame, index=state.frames_advanced)
    binary = Segmenter(steps)(frame.data, state.threshold)
    candidates = blob_centroids(extract_blobs(binary, connectivity))
    previous = state.positions

    logger.debug(
        "Frame %d: %d candidate(s) for %d marker(s)",
        frame.index, len(candidates), len(previous),
    )

    if len(candidates) < len(previous):
        positions = previous
        missed = True
        ambiguous = ()
    else:
        indices = ASSIGNERS[assignment](previous, candidates)
        positions = _readonly(candidates[indices])
        missed = False
        ambiguous = shared_claims(indices)

    next_state = TrackingState(
        threshold=state.threshold,
        positions=positions,
        frames_advanced=state.frames_advanced + 1,
    )
    result = FrameResult(
        frame_index=frame.index,
        positions=next_state.positions,
        candidates=_readonly(candidates),
        missed=missed,
        ambiguous=ambiguous,
    )
    return next_state, result


class TrackingSession:
    """
    Tracks a fixed set of markers through a sequence of frames.

    Attributes:
        config: Tracking settings
        on_frame_tracked: Optional callback(frame_index, frame, positions)
            invoked once per processed frame
        log: Trajectories recorded since the last initialize()

    Example:
        >>> session = TrackingSession()
        >>> k = session.initialize(first_frame, threshold=135, mask=mask)
        >>> for frame in frames:
        ...     x, y = session.advance(frame)
        >>> x_log, y_log = session.export()
    """

    def __init__(
        self,
        config: TrackingConfig | None = None,
        on_frame_tracked: FrameCallback | None = None,
    ):
        self.config = config or TrackingConfig()
        self.on_frame_tracked = on_frame_tracked
        self.assignment = AssignmentMethod(self.config.assignment)
        self._state: TrackingState | None = None
        self._log: TrajectoryLog | None = None

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> TrackingState:
        """Current tracking state."""
        return self._require_state()

    @property
    def num_markers(self) -> int:
        return self._require_state().num_markers

    @property
    def log(self) -> TrajectoryLog:
        self._require_state()
        return self._log

    def _require_state(self) -> TrackingState:
        if self._state is None:
            raise SessionStateError("Session not initialized. Call initialize() first.")
        return self._state

    def initialize(
        self,
        first_frame: Frame | np.ndarray,
        threshold: float | None = None,
        mask: np.ndarray | None = None,
    ) -> int:
        """
        Detect the markers to track and reset any previous run.

        Args:
            first_frame: Frame to detect markers in
            threshold: Intensity cutoff (defaults to config.threshold)
            mask: Optional region mask restricting detection

        Returns:
            Number of markers K

        Raises:
            InitializationError: If no markers are found
            ValueError: If no threshold is available or the mask shape is wrong
        """
        if threshold is None:
            threshold = self.config.threshold
        if threshold is None:
            raise ValueError("A threshold is required to initialize tracking")

        state = initial_state(
            first_frame,
            threshold,
            mask=mask,
            steps=self.config.init_steps,
            connectivity=self.config.connectivity,
        )
        self._state = state
        self._log = TrajectoryLog(state.num_markers)
        return state.num_markers

    def step(self, frame: Frame | np.ndarray) -> FrameResult:
        """Process one frame and return the full result."""
        state = self._require_state()
        frame = as_frame(frame, index=state.frames_advanced)

        self._state, result = advance_state(
            state,
            frame,
            steps=self.config.track_steps,
            assignment=self.assignment,
            connectivity=self.config.connectivity,
        )
        self._log.append(result.positions, frame_index=result.frame_index)

        if result.missed:
            warnings.warn(
                f"Missed blob at frame {result.frame_index}: found "
                f"{len(result.candidates)} of {state.num_markers}, "
                "keeping previous positions",
                MissedDetectionWarning,
                stacklevel=2,
            )
        if result.ambiguous:
            warnings.warn(
                f"Markers {list(result.ambiguous)} share a candidate at frame "
                f"{result.frame_index}",
                AmbiguousAssignmentWarning,
                stacklevel=2,
            )

        if self.on_frame_tracked is not None:
            self.on_frame_tracked(result.frame_index, frame.data, result.positions)
        return result

    def advance(self, frame: Frame | np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """
        Process one frame.

        Returns:
            Tuple of (x, y), each of length K
        """
        result = self.step(frame)
        return result.x.copy(), result.y.copy()

    def track(self, frames: Iterable[Frame | np.ndarray]) -> Iterator[FrameResult]:
        """
        Process frames lazily, yielding one result per frame.

        Frames are pulled from the iterable only as results are consumed.
        """
        for frame in frames:
            yield self.step(frame)

    def export(self) -> tuple[np.ndarray, np.ndarray]:
        """Return the (x, y) trajectory arrays, each (num_frames, K)."""
        return self.log.export()

    def reset(self) -> None:
        """Discard markers and trajectories."""
        self._state = None
        self._log = None
