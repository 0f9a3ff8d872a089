"""
Core module - Frames, region masks, configuration and video input.
"""

from markertrack.core.frames import Frame, to_gray, as_frame, iter_frames
from markertrack.core.mask import (
    rect_mask,
    polygon_mask,
    union_masks,
    mask_from_rois,
    parse_roi,
)
from markertrack.core.config import (
    TrackingConfig,
    SegmentationSteps,
    load_config,
    save_config,
)
from markertrack.core.video import VideoReader, VideoProperties

__all__ = [
    "Frame",
    "to_gray",
    "as_frame",
    "iter_frames",
    "rect_mask",
    "polygon_mask",
    "union_masks",
    "mask_from_rois",
    "parse_roi",
    "TrackingConfig",
    "SegmentationSteps",
    "load_config",
    "save_config",
    "VideoReader",
    "VideoProperties",
]
