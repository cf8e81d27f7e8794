"""Data models for the geometry core."""

from visualmapper.models.shapes import (
    Shape,
    ShapeKind,
    AxisConfig,
    GridConfig,
    AREA_KINDS,
    SNAPPABLE_KINDS,
)
from visualmapper.models.calibration import (
    WorldPoint,
    CoordinateReference,
    CalibrationSample,
)
from visualmapper.models.sheet import Sheet

__all__ = [
    "Shape",
    "ShapeKind",
    "AxisConfig",
    "GridConfig",
    "AREA_KINDS",
    "SNAPPABLE_KINDS",
    "WorldPoint",
    "CoordinateReference",
    "CalibrationSample",
    "Sheet",
]
