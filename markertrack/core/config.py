"""
Configuration management for marker tracking.

Provides a JSON-backed configuration with environment variable
overrides, and the per-stage segmentation step presets.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


ASSIGNMENT_METHODS = ("hungarian", "nearest")


@dataclass(frozen=True)
class SegmentationSteps:
    """
    Which cleanup steps a segmentation pass runs.

    Attributes:
        clean: Remove isolated foreground pixels
        fill_holes: Fill isolated background pixels inside foreground
        closing_radius: Disk radius for morphological closing (0 disables)
        apply_mask: Restrict foreground to the region mask, when one is given
    """
    clean: bool = True
    fill_holes: bool = False
    closing_radius: int = 1
    apply_mask: bool = False

    def __post_init__(self):
        if self.closing_radius < 0:
            raise ValueError(
                f"closing_radius must be >= 0, got {self.closing_radius}"
            )

    def to_dict(self) -> dict:
        return {
            "clean": self.clean,
            "fill_holes": self.fill_holes,
            "closing_radius": self.closing_radius,
            "apply_mask": self.apply_mask,
        }

    @classmethod
    def from_dict(cls, data: dict, base: "SegmentationSteps | None" = None) -> "SegmentationSteps":
        base = base or cls()
        return cls(
            clean=data.get("clean", base.clean),
            fill_holes=data.get("fill_holes", base.fill_holes),
            closing_radius=data.get("closing_radius", base.closing_radius),
            apply_mask=data.get("apply_mask", base.apply_mask),
        )


# Threshold preview fills holes; initialization applies the region mask;
# steady-state tracking does neither.
PREVIEW_STEPS = SegmentationSteps(fill_holes=True)
INIT_STEPS = SegmentationSteps(apply_mask=True)
TRACK_STEPS = SegmentationSteps()


@dataclass
class TrackingConfig:
    """
    Settings for a tracking run.

    Example:
        config = TrackingConfig.load("tracking.json")
        session = TrackingSession(config)
    """
    threshold: float | None = None
    assignment: str = "hungarian"
    connectivity: int = 8
    preview_steps: SegmentationSteps = field(default_factory=lambda: PREVIEW_STEPS)
    init_steps: SegmentationSteps = field(default_factory=lambda: INIT_STEPS)
    track_steps: SegmentationSteps = field(default_factory=lambda: TRACK_STEPS)

    def __post_init__(self):
        self.assignment = self.assignment.lower()
        if self.assignment not in ASSIGNMENT_METHODS:
            raise ValueError(
                f"Unknown assignment method: {self.assignment}. "
                f"Available: {list(ASSIGNMENT_METHODS)}"
            )
        if self.connectivity not in (4, 8):
            raise ValueError(f"connectivity must be 4 or 8, got {self.connectivity}")

    @classmethod
    def load(cls, path: str | Path) -> "TrackingConfig":
        """Load configuration from a JSON file."""
        return load_config(path)

    def save(self, path: str | Path) -> None:
        """Save configuration to a JSON file."""
        save_config(self, path)

    def to_dict(self) -> dict:
        return {
            "threshold": self.threshold,
            "assignment": self.assignment,
            "connectivity": self.connectivity,
            "preview_steps": self.preview_steps.to_dict(),
            "init_steps": self.init_steps.to_dict(),
            "track_steps": self.track_steps.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrackingConfig":
        return cls(
            threshold=data.get("threshold"),
            assignment=data.get("assignment", "hungarian"),
            connectivity=data.get("connectivity", 8),
            preview_steps=SegmentationSteps.from_dict(
                data.get("preview_steps", {}), PREVIEW_STEPS
            ),
            init_steps=SegmentationSteps.from_dict(
                data.get("init_steps", {}), INIT_STEPS
            ),
            track_steps=SegmentationSteps.from_dict(
                data.get("track_steps", {}), TRACK_STEPS
            ),
        )


def load_config(path: str | Path) -> TrackingConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Parsed TrackingConfig

    Raises:
        FileNotFoundError: If the config file doesn't exist
        json.JSONDecodeError: If the JSON is invalid
        ValueError: If a setting is out of range
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    return TrackingConfig.from_dict(data)


def save_config(config: TrackingConfig, path: str | Path) -> None:
    """Save configuration to a JSON file."""
    path = Path(path)
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def get_env_config(prefix: str = "MARKERTRACK_") -> dict[str, Any]:
    """
    Get configuration from environment variables.

    All environment variables starting with the prefix will be included.
    Variable names are converted to lowercase with the prefix removed.

    Example:
        MARKERTRACK_THRESHOLD=135 -> {"threshold": "135"}
    """
    config = {}
    for key, value in os.environ.items():
        if key.startswith(prefix):
            config[key[len(prefix):].lower()] = value
    return config


def apply_env_overrides(
    config: TrackingConfig,
    prefix: str = "MARKERTRACK_",
) -> TrackingConfig:
    """Apply threshold and assignment overrides from the environment in place."""
    env = get_env_config(prefix)
    if "threshold" in env:
        config.threshold = float(env["threshold"])
    if "assignment" in env:
        assignment = env["assignment"].lower()
        if assignment not in ASSIGNMENT_METHODS:
            raise ValueError(
                f"Unknown assignment method in environment: {assignment}"
            )
        config.assignment = assignment
    return config
