"""Geometry core: intersection, overlap, snapping, calibration, axes, labels."""

from visualmapper.core.intersection import (
    segments_intersect,
    segments_cross,
    check_polygon_self_intersection,
    polygons_intersect,
)
from visualmapper.core.overlap import (
    calculate_mtv,
    polygons_overlap_sat,
    resolve_all_overlaps,
    snap_vertices_to_edges,
)
from visualmapper.core.axes import (
    AxisLabel,
    AxisSystem,
    generate_axis_system,
    next_label,
    full_extent_length_mm,
)
from visualmapper.core.snapping import (
    SnapCorrection,
    AlignmentGuide,
    AlignmentResult,
    get_closest_grid_point,
    get_closest_snap_point,
    calculate_snap_correction,
    get_snap_candidates,
    get_alignment_guides,
)
from visualmapper.core.calibration import (
    SimilarityTransform,
    active_references,
    scale_from_samples,
    transform_point_to_world,
    resolve_pixels_per_meter,
)
from visualmapper.core.labels import LabelStats, polygon_label_stats, wrap_text
from visualmapper.core.hit_testing import hit_test, find_shape_at

__all__ = [
    "segments_intersect",
    "segments_cross",
    "check_polygon_self_intersection",
    "polygons_intersect",
    "calculate_mtv",
    "polygons_overlap_sat",
    "resolve_all_overlaps",
    "snap_vertices_to_edges",
    "AxisLabel",
    "AxisSystem",
    "generate_axis_system",
    "next_label",
    "full_extent_length_mm",
    "SnapCorrection",
    "AlignmentGuide",
    "AlignmentResult",
    "get_closest_grid_point",
    "get_closest_snap_point",
    "calculate_snap_correction",
    "get_snap_candidates",
    "get_alignment_guides",
    "SimilarityTransform",
    "active_references",
    "scale_from_samples",
    "transform_point_to_world",
    "resolve_pixels_per_meter",
    "LabelStats",
    "polygon_label_stats",
    "wrap_text",
    "hit_test",
    "find_shape_at",
]
