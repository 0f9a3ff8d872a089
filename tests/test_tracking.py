"""
Tests for segmentation, blob extraction and marker tracking.
"""

import warnings

import cv2
import pytest
import numpy as np


BACKGROUND = 220
MARKER = 30
THRESHOLD = 128
CENTERS = [(10, 10), (50, 50), (90, 90)]


def make_frame(centers=CENTERS, shape=(100, 100), radius=3):
    """Bright frame with a dark filled disk at each (x, y) center."""
    frame = np.full(shape, BACKGROUND, dtype=np.uint8)
    for x, y in centers:
        cv2.circle(frame, (int(x), int(y)), radius, MARKER, -1)
    return frame


def initialized_session(centers=CENTERS, **config_kwargs):
    from markertrack.core.config import TrackingConfig
    from markertrack.tracking import TrackingSession

    session = TrackingSession(TrackingConfig(**config_kwargs))
    session.initialize(make_frame(centers), threshold=THRESHOLD)
    return session


class TestSegmenter:
    """Tests for frame segmentation."""

    def test_foreground_is_strictly_below_threshold(self):
        """Test binarization uses intensity < threshold."""
        from markertrack.tracking.segment import binarize

        frame = np.array([[99, 100, 101]], dtype=np.uint8)
        assert binarize(frame, 100).tolist() == [[True, False, False]]

    def test_isolated_pixel_removed(self):
        """Test cleaning drops single foreground pixels."""
        from markertrack.tracking.segment import segment

        frame = np.full((20, 20), BACKGROUND, dtype=np.uint8)
        frame[5, 5] = MARKER
        frame[10:13, 10:13] = MARKER

        binary = segment(frame, THRESHOLD)
        assert not binary[5, 5]
        assert binary[11, 11]

    def test_isolated_pixel_kept_without_clean(self):
        """Test cleaning can be switched off."""
        from markertrack.tracking.segment import segment

        frame = np.full((20, 20), BACKGROUND, dtype=np.uint8)
        frame[5, 5] = MARKER
        binary = segment(frame, THRESHOLD, clean=False, closing_radius=0)
        assert binary[5, 5]

    def test_hole_filled_only_when_requested(self):
        """Test hole filling is controlled by fill_holes."""
        from markertrack.tracking.segment import segment

        frame = np.full((20, 20), BACKGROUND, dtype=np.uint8)
        frame[5:8, 5:8] = MARKER
        frame[6, 6] = BACKGROUND

        unfilled = segment(frame, THRESHOLD, fill_holes=False, closing_radius=0)
        filled = segment(frame, THRESHOLD, fill_holes=True, closing_radius=0)
        assert not unfilled[6, 6]
        assert filled[6, 6]

    def test_closing_bridges_one_pixel_gap(self):
        """Test closing merges blobs separated by a 1-pixel gap."""
        from markertrack.tracking.blobs import extract_blobs
        from markertrack.tracking.segment import segment

        frame = np.full((30, 30), BACKGROUND, dtype=np.uint8)
        frame[10:13, 10:13] = MARKER
        frame[10:13, 14:17] = MARKER

        assert len(extract_blobs(segment(frame, THRESHOLD, closing_radius=0))) == 2
        assert len(extract_blobs(segment(frame, THRESHOLD))) == 1

    def test_mask_removes_outside_foreground(self):
        """Test foreground outside the region mask is dropped."""
        from markertrack.core.mask import rect_mask
        from markertrack.tracking.segment import segment

        frame = make_frame()
        mask = rect_mask(frame.shape, (0, 0, 30, 30))
        binary = segment(frame, THRESHOLD, mask=mask)
        assert binary[10, 10]
        assert not binary[50, 50]
        assert not binary[~mask].any()

    def test_segmenter_ignores_mask_unless_enabled(self):
        """Test Segmenter applies the mask only when its steps say so."""
        from markertrack.core.config import SegmentationSteps
        from markertrack.tracking.segment import Segmenter

        frame = make_frame()
        mask = np.zeros(frame.shape, dtype=bool)

        assert Segmenter(SegmentationSteps(apply_mask=False))(frame, THRESHOLD, mask).any()
        assert not Segmenter(SegmentationSteps(apply_mask=True))(frame, THRESHOLD, mask).any()

    def test_all_false_mask_gives_empty_image(self):
        """Test an all-false mask yields all background, not an error."""
        from markertrack.tracking.segment import segment

        frame = make_frame()
        binary = segment(frame, THRESHOLD, mask=np.zeros(frame.shape, dtype=bool))
        assert binary.shape == frame.shape
        assert not binary.any()

    def test_flat_frame_gives_empty_image(self):
        """Test a zero-variance frame above threshold has no foreground."""
        from markertrack.tracking.segment import segment

        frame = np.full((10, 10), BACKGROUND, dtype=np.uint8)
        assert not segment(frame, THRESHOLD).any()

    def test_higher_threshold_never_shrinks_foreground(self):
        """Test foreground grows monotonically with a more permissive threshold."""
        from markertrack.tracking.segment import segment

        rng = np.random.default_rng(0)
        frame = rng.integers(0, 256, size=(60, 60)).astype(np.uint8)

        for fill_holes in (False, True):
            previous = segment(frame, 0, fill_holes=fill_holes)
            for threshold in range(16, 256, 16):
                current = segment(frame, threshold, fill_holes=fill_holes)
                assert not (previous & ~current).any()
                assert current.sum() >= previous.sum()
                previous = current

    def test_shape_preserved(self):
        """Test the output has the frame's shape."""
        from markertrack.tracking.segment import segment

        frame = make_frame(shape=(40, 70), centers=[(20, 20)])
        assert segment(frame, THRESHOLD).shape == (40, 70)

    def test_rejects_color_frame(self):
        """Test color frames must be converted first."""
        from markertrack.tracking.segment import segment

        with pytest.raises(ValueError):
            segment(np.zeros((5, 5, 3), dtype=np.uint8), THRESHOLD)

    def test_disk_radius_one_is_cross(self):
        """Test the radius-1 structuring element."""
        from markertrack.tracking.segment import disk

        assert disk(1).tolist() == [[0, 1, 0], [1, 1, 1], [0, 1, 0]]


class TestBlobExtractor:
    """Tests for connected-component blob extraction."""

    def test_area_and_centroid(self):
        """Test blob area and centroid are pixel count and mean coordinate."""
        from markertrack.tracking.blobs import extract_blobs

        binary = np.zeros((20, 20), dtype=bool)
        binary[2:5, 3:6] = True
        binary[10:12, 10:14] = True

        blobs = extract_blobs(binary)
        assert len(blobs) == 2
        by_area = sorted(blobs, key=lambda b: b.area)
        assert by_area[0].area == 8
        assert by_area[0].centroid == pytest.approx((11.5, 10.5))
        assert by_area[1].area == 9
        assert by_area[1].centroid == pytest.approx((4.0, 3.0))
        assert by_area[1].bbox == (3, 2, 3, 3)

    def test_empty_image(self):
        """Test an empty image yields no blobs."""
        from markertrack.tracking.blobs import blob_centroids, extract_blobs

        blobs = extract_blobs(np.zeros((10, 10), dtype=bool))
        assert blobs == []
        assert blob_centroids(blobs).shape == (0, 2)

    def test_connectivity(self):
        """Test diagonal neighbours join under 8- but not 4-connectivity."""
        from markertrack.tracking.blobs import extract_blobs

        binary = np.zeros((5, 5), dtype=bool)
        binary[1, 1] = True
        binary[2, 2] = True

        assert len(extract_blobs(binary, connectivity=8)) == 1
        assert len(extract_blobs(binary, connectivity=4)) == 2

    def test_invalid_connectivity(self):
        """Test unsupported connectivity raises."""
        from markertrack.tracking.blobs import extract_blobs

        with pytest.raises(ValueError):
            extract_blobs(np.zeros((5, 5), dtype=bool), connectivity=6)

    def test_disk_centroids(self):
        """Test synthetic disks are found at their centers."""
        from markertrack.tracking.blobs import blob_centroids, extract_blobs
        from markertrack.tracking.segment import segment

        centroids = blob_centroids(extract_blobs(segment(make_frame(), THRESHOLD)))
        assert centroids.shape == (3, 2)
        for expected in CENTERS:
            assert np.min(np.linalg.norm(centroids - expected, axis=1)) < 0.5


class TestAssignment:
    """Tests for marker-to-candidate assignment policies."""

    def test_nearest_can_double_assign(self):
        """Test independent nearest neighbour lets markers share a candidate."""
        from markertrack.tracking.session import assign_nearest, shared_claims

        previous = np.array([[0.0, 0.0], [1.0, 0.0]])
        candidates = np.array([[0.4, 0.0], [10.0, 0.0]])

        indices = assign_nearest(previous, candidates)
        assert indices.tolist() == [0, 0]
        assert shared_claims(indices) == (0, 1)

    def test_hungarian_is_one_to_one(self):
        """Test minimum-cost matching gives distinct candidates."""
        from markertrack.tracking.session import assign_hungarian, shared_claims

        previous = np.array([[0.0, 0.0], [1.0, 0.0]])
        candidates = np.array([[0.4, 0.0], [10.0, 0.0], [-3.0, 0.0]])

        indices = assign_hungarian(previous, candidates)
        assert len(set(indices.tolist())) == 2
        assert shared_claims(indices) == ()

    def test_policies_agree_when_unambiguous(self):
        """Test both policies pick the same candidates for well separated markers."""
        from markertrack.tracking.session import assign_hungarian, assign_nearest

        previous = np.array([[10.0, 10.0], [50.0, 50.0], [90.0, 90.0]])
        candidates = np.array([[91.0, 89.0], [11.0, 10.0], [50.0, 52.0], [0.0, 99.0]])

        assert assign_nearest(previous, candidates).tolist() == [1, 2, 0]
        assert assign_hungarian(previous, candidates).tolist() == [1, 2, 0]


class TestTrackingSession:
    """Tests for TrackingSession."""

    def test_initialize_counts_markers(self):
        """Test K is the number of blobs in the first frame."""
        from markertrack.tracking import TrackingSession

        session = TrackingSession()
        assert session.initialize(make_frame(), threshold=THRESHOLD) == 3
        assert session.num_markers == 3
        assert len(session.log) == 0

    def test_initialize_uses_config_threshold(self):
        """Test the configured threshold is used when none is passed."""
        from markertrack.core.config import TrackingConfig
        from markertrack.tracking import TrackingSession

        session = TrackingSession(TrackingConfig(threshold=THRESHOLD))
        assert session.initialize(make_frame()) == 3

    def test_initialize_requires_threshold(self):
        """Test initialization fails without any threshold."""
        from markertrack.tracking import TrackingSession

        with pytest.raises(ValueError):
            TrackingSession().initialize(make_frame())

    def test_initialize_with_mask(self):
        """Test the region mask restricts which markers are tracked."""
        from markertrack.core.mask import mask_from_rois
        from markertrack.tracking import TrackingSession

        frame = make_frame()
        mask = mask_from_rois(frame.shape, [(0, 0, 30, 30), (80, 80, 20, 20)])

        session = TrackingSession()
        assert session.initialize(frame, threshold=THRESHOLD, mask=mask) == 2
        np.testing.assert_allclose(session.state.positions, [[10, 10], [90, 90]], atol=0.5)

        # The mask is not applied while tracking; the extra blob is just another candidate
        x, y = session.advance(frame)
        np.testing.assert_allclose(x, [10, 90], atol=0.5)
        np.testing.assert_allclose(y, [10, 90], atol=0.5)

    def test_initialize_mask_shape_mismatch(self):
        """Test a mask of the wrong shape is rejected."""
        from markertrack.tracking import TrackingSession

        with pytest.raises(ValueError):
            TrackingSession().initialize(
                make_frame(), threshold=THRESHOLD, mask=np.ones((10, 10), dtype=bool)
            )

    def test_initialize_without_blobs(self):
        """Test zero blobs at initialization is an error."""
        from markertrack.tracking import InitializationError, TrackingSession

        blank = np.full((50, 50), BACKGROUND, dtype=np.uint8)
        with pytest.raises(InitializationError):
            TrackingSession().initialize(blank, threshold=THRESHOLD)

    def test_initialize_with_empty_mask(self):
        """Test an all-false mask leaves nothing to track."""
        from markertrack.tracking import InitializationError, TrackingSession

        frame = make_frame()
        with pytest.raises(InitializationError):
            TrackingSession().initialize(
                frame, threshold=THRESHOLD, mask=np.zeros(frame.shape, dtype=bool)
            )

    def test_advance_before_initialize(self):
        """Test advancing an uninitialized session raises."""
        from markertrack.tracking import SessionStateError, TrackingSession

        session = TrackingSession()
        with pytest.raises(SessionStateError):
            session.advance(make_frame())
        with pytest.raises(SessionStateError):
            session.export()

    def test_static_sequence(self):
        """Test three static disks over ten frames."""
        from markertrack.core.frames import iter_frames
        from markertrack.tracking import TrackingSession

        stack = np.stack([make_frame() for _ in range(10)])
        session = TrackingSession()
        assert session.initialize(stack[0], threshold=THRESHOLD) == 3

        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            for frame in iter_frames(stack):
                session.advance(frame)

        x, y = session.export()
        assert x.shape == (10, 3)
        assert y.shape == (10, 3)
        assert (x == x[0]).all() and (y == y[0]).all()
        np.testing.assert_allclose(x[0], [10, 50, 90], atol=0.5)
        np.testing.assert_allclose(y[0], [10, 50, 90], atol=0.5)

    def test_occluded_marker_carries_forward(self):
        """Test a frame with a missing disk reuses the previous positions."""
        from markertrack.core.frames import iter_frames
        from markertrack.tracking import MissedDetectionWarning, TrackingSession

        frames = [make_frame() for _ in range(10)]
        frames[5] = make_frame([CENTERS[0], CENTERS[2]])

        session = TrackingSession()
        session.initialize(frames[0], threshold=THRESHOLD)

        for frame in iter_frames(frames):
            if frame.index == 5:
                with pytest.warns(MissedDetectionWarning, match="frame 5"):
                    session.advance(frame)
            else:
                session.advance(frame)

        x, y = session.export()
        assert x.shape == (10, 3)
        assert x[5, 1] == x[4, 1]
        assert y[5, 1] == y[4, 1]
        np.testing.assert_array_equal(x[5], x[4])
        np.testing.assert_array_equal(y[5], y[4])

    def test_carry_forward_keeps_last_tracked_position(self):
        """Test carried positions are the last assigned ones, not the initial ones."""
        from markertrack.tracking import MissedDetectionWarning

        session = initialized_session()
        moved = [(12, 11), (53, 50), (88, 92)]
        session.advance(make_frame(moved))
        with pytest.warns(MissedDetectionWarning):
            x, y = session.advance(make_frame(moved[:1]))

        np.testing.assert_allclose(x, [12, 53, 88], atol=0.5)
        np.testing.assert_allclose(y, [11, 50, 92], atol=0.5)

    def test_moving_markers_keep_identity(self):
        """Test identities follow markers as they move."""
        from markertrack.tracking import TrackingSession

        session = TrackingSession()
        session.initialize(make_frame(), threshold=THRESHOLD)

        for step in range(1, 6):
            session.advance(make_frame([
                (10 + 2 * step, 10),
                (50, 50 + 2 * step),
                (90 - 2 * step, 90 - 2 * step),
            ]))

        x, y = session.export()
        np.testing.assert_allclose(x[-1], [20, 50, 80], atol=0.5)
        np.testing.assert_allclose(y[-1], [10, 60, 80], atol=0.5)

    def test_positions_are_candidate_centroids(self):
        """Test every reported position is a centroid from that frame when enough blobs exist."""
        session = initialized_session()

        frame = make_frame([(11, 12), (49, 51), (90, 88), (30, 70)])
        result = session.step(frame)

        assert not result.missed
        assert len(result.candidates) == 4
        for position in result.positions:
            assert any((position == c).all() for c in result.candidates)

    def test_extra_blobs_do_not_change_marker_count(self):
        """Test extra candidates never add markers."""
        session = initialized_session()
        x, y = session.advance(make_frame(CENTERS + [(30, 70), (70, 30)]))
        assert len(x) == 3 and len(y) == 3

    def test_nearest_policy_reports_ambiguity(self):
        """Test shared candidates raise a warning under the nearest policy."""
        from markertrack.tracking import AmbiguousAssignmentWarning

        session = initialized_session([(10, 10), (20, 10)], assignment="nearest")
        with pytest.warns(AmbiguousAssignmentWarning):
            result = session.step(make_frame([(15, 10), (80, 80)]))

        assert result.ambiguous == (0, 1)
        np.testing.assert_array_equal(result.positions[0], result.positions[1])

    def test_hungarian_policy_avoids_shared_candidates(self):
        """Test the default policy assigns distinct candidates."""
        session = initialized_session([(10, 10), (20, 10)])

        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            result = session.step(make_frame([(15, 10), (80, 80)]))

        assert result.ambiguous == ()
        assert not (result.positions[0] == result.positions[1]).all()

    def test_callback_invoked_per_frame(self):
        """Test on_frame_tracked receives every frame."""
        from markertrack.core.frames import iter_frames
        from markertrack.tracking import TrackingSession

        calls = []
        session = TrackingSession(
            on_frame_tracked=lambda i, frame, pos: calls.append((i, frame.shape, pos.shape))
        )
        stack = np.stack([make_frame() for _ in range(4)])
        session.initialize(stack[0], threshold=THRESHOLD)
        list(session.track(iter_frames(stack, start_index=1)))

        assert calls == [(i, (100, 100), (3, 2)) for i in range(1, 5)]

    def test_track_is_lazy(self):
        """Test track() pulls one frame per result."""
        session = initialized_session()
        pulled = []

        def source():
            for i in range(3):
                pulled.append(i)
                yield make_frame()

        results = session.track(source())
        assert pulled == []
        next(results)
        assert pulled == [0]
        assert len(session.log) == 1

    def test_raw_arrays_get_sequential_indices(self):
        """Test plain arrays are indexed by call order."""
        session = initialized_session()
        indices = [session.step(make_frame()).frame_index for _ in range(3)]
        assert indices == [0, 1, 2]
        assert session.log.frame_indices == [0, 1, 2]

    def test_reinitialize_resets(self):
        """Test re-initializing resets K and clears the log."""
        session = initialized_session()
        session.advance(make_frame())
        session.advance(make_frame())
        assert len(session.log) == 2

        assert session.initialize(make_frame(CENTERS[:2]), threshold=THRESHOLD) == 2
        assert len(session.log) == 0
        x, y = session.export()
        assert x.shape == (0, 2)

    def test_row_count_matches_advances(self):
        """Test one row per advance call, K columns, even with misses."""
        session = initialized_session()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            for i in range(7):
                centers = CENTERS if i % 3 else CENTERS[:1]
                session.advance(make_frame(centers))

        x, y = session.export()
        assert x.shape == (7, 3)
        assert y.shape == (7, 3)

    def test_color_frames_accepted(self):
        """Test BGR frames are converted to grayscale."""
        session = initialized_session()
        bgr = cv2.cvtColor(make_frame(), cv2.COLOR_GRAY2BGR)
        x, _ = session.advance(bgr)
        np.testing.assert_allclose(x, [10, 50, 90], atol=0.5)


class TestPureStateUpdate:
    """Tests for the functional state update."""

    def test_advance_state_does_not_mutate(self):
        """Test advance_state returns a new state and leaves the old one alone."""
        from markertrack.tracking import advance_state, initial_state

        state = initial_state(make_frame(), THRESHOLD)
        before = state.positions.copy()

        new_state, result = advance_state(state, make_frame([(12, 10), (50, 52), (90, 90)]))

        np.testing.assert_array_equal(state.positions, before)
        assert state.frames_advanced == 0
        assert new_state.frames_advanced == 1
        np.testing.assert_array_equal(new_state.positions, result.positions)
        np.testing.assert_allclose(result.x, [12, 50, 90], atol=0.5)

    def test_replay_is_deterministic(self):
        """Test replaying from a saved state gives identical results."""
        from markertrack.tracking import advance_state, initial_state

        state = initial_state(make_frame(), THRESHOLD)
        frame = make_frame([(11, 11), (51, 49), (89, 90)])

        _, first = advance_state(state, frame)
        _, second = advance_state(state, frame)
        np.testing.assert_array_equal(first.positions, second.positions)

    def test_state_positions_read_only(self):
        """Test state positions cannot be modified in place."""
        from markertrack.tracking import initial_state

        state = initial_state(make_frame(), THRESHOLD)
        with pytest.raises(ValueError):
            state.positions[0, 0] = 0.0

    def test_missed_frame_flagged(self):
        """Test the result records a missed detection."""
        from markertrack.tracking import advance_state, initial_state

        state = initial_state(make_frame(), THRESHOLD)
        new_state, result = advance_state(state, make_frame(CENTERS[:2]))

        assert result.missed
        np.testing.assert_array_equal(new_state.positions, state.positions)


class TestTrajectoryLog:
    """Tests for TrajectoryLog."""

    def test_export_shapes(self):
        """Test exported arrays are (frames, markers)."""
        from markertrack.tracking import TrajectoryLog

        log = TrajectoryLog(2)
        log.append([[1, 2], [3, 4]])
        log.append(np.array([[5, 6], [7, 8]]))

        x, y = log.export()
        assert x.tolist() == [[1, 3], [5, 7]]
        assert y.tolist() == [[2, 4], [6, 8]]
        assert len(log) == 2

    def test_empty_export(self):
        """Test exporting before any frame."""
        from markertrack.tracking import TrajectoryLog

        x, y = TrajectoryLog(3).export()
        assert x.shape == (0, 3)
        assert y.shape == (0, 3)

    def test_wrong_marker_count(self):
        """Test rows must have exactly K positions."""
        from markertrack.tracking import TrajectoryLog

        log = TrajectoryLog(3)
        with pytest.raises(ValueError):
            log.append([[1, 2], [3, 4]])

    def test_invalid_marker_count(self):
        """Test K must be positive."""
        from markertrack.tracking import TrajectoryLog

        with pytest.raises(ValueError):
            TrajectoryLog(0)

    def test_rows_are_immutable(self):
        """Test past rows cannot be changed through exports or appended arrays."""
        from markertrack.tracking import TrajectoryLog

        log = TrajectoryLog(1)
        positions = np.array([[1.0, 2.0]])
        log.append(positions)
        positions[0, 0] = 99.0

        x, _ = log.export()
        x[0, 0] = -1.0
        assert log.export()[0][0, 0] == 1.0
        with pytest.raises(ValueError):
            log.row(0)[0, 0] = 5.0

    def test_to_csv(self, tmp_path):
        """Test CSV export."""
        from markertrack.tracking import TrajectoryLog

        log = TrajectoryLog(2)
        log.append([[1, 2], [3, 4]], frame_index=10)
        path = log.to_csv(tmp_path / "traj.csv")

        lines = path.read_text().splitlines()
        assert lines[0] == "frame,x0,y0,x1,y1"
        assert lines[1] == "10,1.0,2.0,3.0,4.0"

    def test_save_npz(self, tmp_path):
        """Test NPZ export."""
        from markertrack.tracking import TrajectoryLog

        log = TrajectoryLog(2)
        log.append([[1, 2], [3, 4]], frame_index=7)
        log.append([[5, 6], [7, 8]], frame_index=8)
        path = log.save_npz(tmp_path / "traj.npz")

        data = np.load(path)
        assert data["x"].shape == (2, 2)
        assert data["frame"].tolist() == [7, 8]


class TestThresholdPreview:
    """Tests for threshold preview."""

    def test_preview_reports_blobs(self):
        """Test preview finds the synthetic markers."""
        from markertrack.tracking import preview_threshold

        preview = preview_threshold(make_frame(), THRESHOLD)
        assert preview.num_blobs == 3
        assert preview.raw.shape == (100, 100)
        assert preview.centroids.shape == (3, 2)

    def test_preview_fills_holes(self):
        """Test preview fills isolated holes by default."""
        from markertrack.tracking import preview_threshold

        frame = np.full((20, 20), BACKGROUND, dtype=np.uint8)
        frame[5:8, 5:8] = MARKER
        frame[6, 6] = BACKGROUND

        preview = preview_threshold(frame, THRESHOLD)
        assert not preview.raw[6, 6]
        assert preview.cleaned[6, 6]

    def test_preview_applies_mask(self):
        """Test a region mask limits the preview to the markers inside it."""
        from markertrack.core.mask import rect_mask
        from markertrack.tracking import preview_threshold

        frame = make_frame()
        mask = rect_mask(frame.shape, (40, 40, 20, 20))

        preview = preview_threshold(frame, THRESHOLD, mask=mask)
        assert preview.num_blobs == 1
        np.testing.assert_allclose(preview.centroids[0], [50, 50], atol=0.5)
        # Raw threshold image is unmasked
        assert preview.raw[10, 10]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
