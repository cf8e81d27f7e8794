"""
Configuration and tolerance settings for Visual Mapper.

The geometry core is tuned against a handful of tolerances. They are
exposed here as named constants so callers can reference them, and as an
EditorSettings dataclass so a host application can persist overrides.
"""

import json
import logging
from pathlib import Path
from dataclasses import dataclass, asdict, field

CONFIG_FILE = Path.home() / ".visualmapper.json"

logger = logging.getLogger("visualmapper.config")


# Two points closer than this on both axes are the same vertex
# (polygon closing and shared-vertex crossing tests).
VERTEX_EPSILON = 0.1

# Polygons are shrunk toward their centroid by this factor before the
# overlap test, so shared edges do not count as overlap.
OVERLAP_SHRINK_FACTOR = 0.999

# After MTV resolution, moving vertices within this distance are pulled
# onto the nearest static vertex or edge.
OVERLAP_SNAP_THRESHOLD = 5.0

# Upper bound on MTV passes in resolve_all_overlaps.
MTV_MAX_ITERATIONS = 10

# Grids whose step is smaller than this (in pixels) do not snap.
GRID_MIN_STEP_PX = 2.0

# Axis generator guards.
AXIS_MAX_LINES = 100
AXIS_MIN_SPACING_PX = 0.1
AXIS_MAX_LENGTH_PX = 50000.0

# Distance kept between a centred label and the nearest polygon edge.
LABEL_PADDING = 6.0

# Default cursor snap radius in pixels.
DEFAULT_SNAP_THRESHOLD = 15.0


@dataclass
class EditorSettings:
    """
    Persistent geometry settings.

    Saved between sessions so interactive tolerances survive a restart.
    """
    # Snapping
    snap_enabled: bool = True
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD
    overlap_snap_threshold: float = OVERLAP_SNAP_THRESHOLD

    # Overlap handling
    prevent_overlap: bool = True
    mtv_max_iterations: int = MTV_MAX_ITERATIONS

    # Grid defaults
    grid_size_mm: float = 1000.0
    grid_color: str = "#94a3b8"
    grid_opacity: float = 0.5

    # Axis defaults
    axis_spacing_mm: float = 6000.0
    axis_count: int = 5
    axis_length_mm: float = 30000.0

    # Export defaults
    use_world_coordinates: bool = True
    include_labels: bool = True
    include_measurements: bool = True
    layer_prefix: str = ""

    recent_exports: list = field(default_factory=list)
    max_recent_exports: int = 10

    def add_recent_export(self, path: str):
        """Add a file to the recent exports list."""
        if path in self.recent_exports:
            self.recent_exports.remove(path)
        self.recent_exports.insert(0, path)
        self.recent_exports = self.recent_exports[:self.max_recent_exports]


def load_settings(path: Path = None) -> EditorSettings:
    """Load settings from config file."""
    path = path or CONFIG_FILE
    try:
        if path.exists():
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
                known_fields = {f.name for f in EditorSettings.__dataclass_fields__.values()}
                filtered = {k: v for k, v in data.items() if k in known_fields}
                return EditorSettings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning(f"Could not load settings: {e}")
    return EditorSettings()


def save_settings(settings: EditorSettings, path: Path = None) -> bool:
    """Save settings to config file."""
    path = path or CONFIG_FILE
    try:
        data = asdict(settings)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        return True
    except OSError as e:
        logger.warning(f"Could not save settings: {e}")
        return False
