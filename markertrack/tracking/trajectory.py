"""
Append-only per-marker trajectory storage.

One row is recorded per processed frame, holding the (x, y) position of
every marker. Rows are never modified once appended.
"""

import csv
from pathlib import Path

import numpy as np


class TrajectoryLog:
    """
    Per-marker (x, y) time series.

    Attributes:
        num_markers: Number of markers (columns) per row

    Example:
        >>> log = TrajectoryLog(num_markers=3)
        >>> log.append(positions, frame_index=1)
        >>> x, y = log.export()   # each (num_frames, 3)
    """

    def __init__(self, num_markers: int):
        if num_markers <= 0:
            raise ValueError(f"num_markers must be positive, got {num_markers}")
        self.num_markers = num_markers
        self._rows: list[np.ndarray] = []
        self._frame_indices: list[int] = []

    def append(self, positions: np.ndarray, frame_index: int | None = None) -> None:
        """
        Append one frame's marker positions.

        Args:
            positions: (num_markers, 2) array of (x, y)
            frame_index: Source frame index (defaults to the row number)
        """
        row = np.array(positions, dtype=np.float64).reshape(-1, 2)
        if row.shape[0] != self.num_markers:
            raise ValueError(
                f"Expected {self.num_markers} positions, got {row.shape[0]}"
            )
        row.flags.writeable = False
        self._rows.append(row)
        self._frame_indices.append(
            len(self._frame_indices) if frame_index is None else int(frame_index)
        )

    def export(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Return (x, y) arrays, each of shape (num_frames, num_markers).

        The arrays are fresh copies, so callers may modify them freely.
        """
        if not self._rows:
            empty = np.empty((0, self.num_markers), dtype=np.float64)
            return empty, empty.copy()
        stacked = np.stack(self._rows)
        return stacked[:, :, 0].copy(), stacked[:, :, 1].copy()

    @property
    def frame_indices(self) -> list[int]:
        return list(self._frame_indices)

    def row(self, i: int) -> np.ndarray:
        """Positions recorded in row i, as a read-only (num_markers, 2) array."""
        return self._rows[i]

    def to_csv(self, path: str | Path) -> Path:
        """
        Write the log as CSV, one row per frame.

        Columns: frame, x0, y0, x1, y1, ...
        """
        path = Path(path)
        header = ['frame']
        for m in range(self.num_markers):
            header.extend([f'x{m}', f'y{m}'])

        with open(path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(header)
            for frame_index, row in zip(self._frame_indices, self._rows):
                writer.writerow([frame_index, *row.ravel().tolist()])
        return path

    def save_npz(self, path: str | Path) -> Path:
        """Write x, y and frame indices to a compressed .npz file."""
        path = Path(path)
        x, y = self.export()
        np.savez_compressed(
            path, x=x, y=y, frame=np.asarray(self._frame_indices, dtype=np.int64)
        )
        return path

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"TrajectoryLog(frames={len(self)}, markers={self.num_markers})"
