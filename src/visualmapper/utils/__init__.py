"""Utility functions for Visual Mapper."""

from visualmapper.utils.geometry import (
    Point,
    Orientation,
    BoundingBox,
    distance,
    midpoint,
    centroid,
    bounding_box,
    closest_point_on_segment,
    point_to_segment_distance,
    point_in_polygon,
    orientation,
    polygon_area,
    polygon_perimeter,
)
from visualmapper.utils.profiling import (
    PerformanceProfiler,
    timed,
    profile_block,
)

__all__ = [
    # Geometry
    "Point",
    "Orientation",
    "BoundingBox",
    "distance",
    "midpoint",
    "centroid",
    "bounding_box",
    "closest_point_on_segment",
    "point_to_segment_distance",
    "point_in_polygon",
    "orientation",
    "polygon_area",
    "polygon_perimeter",
    # Profiling
    "PerformanceProfiler",
    "timed",
    "profile_block",
]
