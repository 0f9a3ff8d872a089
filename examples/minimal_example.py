#!/usr/bin/env python3
"""
Minimal Example: markertrack API Usage
======================================

Shows the essential API calls without extra boilerplate.
This is the "quick reference" version.
"""

from markertrack.core.mask import mask_from_rois
from markertrack.core.video import VideoReader
from markertrack.outputs import OutputManager
from markertrack.tracking import TrackingSession, preview_threshold


input_video = "sample_tracking_video_raw.mp4"
threshold = 135


# =============================================================================
# STEP 1: PICK A THRESHOLD
# Equivalent to: markertrack preview sample_tracking_video_raw.mp4 -t 135
# =============================================================================

with VideoReader(input_video, first_frame=1, last_frame=1) as reader:
    first = next(iter(reader))

preview = preview_threshold(first.data, threshold)
print(f"{preview.num_blobs} blob(s) at threshold {threshold}")


# =============================================================================
# STEP 2: TRACK
# Equivalent to: markertrack track sample_tracking_video_raw.mp4 -t 135 \
#                --roi 100,200,40,40 --roi 300,200,40,40 -out video -out gif
# =============================================================================

# Regions around the markers of interest (would normally be drawn interactively)
rois = [(100, 200, 40, 40), (300, 200, 40, 40)]

reader = VideoReader(input_video)
reader.open()

outputs = OutputManager(input_video)
outputs.add_output("video")
outputs.add_output("gif")
outputs.initialize_all(reader.properties.to_dict())

session = TrackingSession(on_frame_tracked=outputs.process_frame)

frames = iter(reader)
first = next(frames)
k = session.initialize(first, threshold=threshold, mask=mask_from_rois(first.shape, rois))
print(f"Tracking {k} marker(s)")

session.step(first)
for result in session.track(frames):
    pass

outputs.finalize_all()
reader.close()

x, y = session.export()
print(f"Trajectories: {x.shape[0]} frames x {x.shape[1]} markers")
session.log.save_npz("tracked.npz")
print("Files written:", outputs.get_output_paths())
