"""Pointer hit testing against shapes."""

from typing import Callable, Dict, Optional, Sequence

from visualmapper.core.axes import generate_axis_system
from visualmapper.models.shapes import Shape, ShapeKind
from visualmapper.utils.geometry import (
    Point,
    distance,
    point_in_polygon,
    point_to_segment_distance,
)

HitTest = Callable[[Shape, Point, float, Optional[float]], bool]


def _hit_marker(shape: Shape, point: Point, view_scale: float,
                pixels_per_meter: Optional[float]) -> bool:
    """Icons and bullets: a square around the anchor sized by font size."""
    if not shape.points:
        return False
    cx, cy = shape.points[0]
    half = (shape.style_value("font_size") or 32) / 1.5
    return abs(point[0] - cx) < half and abs(point[1] - cy) < half


def _hit_text(shape: Shape, point: Point, view_scale: float,
              pixels_per_meter: Optional[float]) -> bool:
    if len(shape.points) == 4:
        return point_in_polygon(point, shape.points)
    if not shape.points:
        return False
    cx, cy = shape.points[0]
    size = shape.style_value("font_size") or 32
    return abs(point[0] - cx) < size * 2 and abs(point[1] - cy) < size


def _hit_area(shape: Shape, point: Point, view_scale: float,
              pixels_per_meter: Optional[float]) -> bool:
    return point_in_polygon(point, shape.points)


def _hit_circle(shape: Shape, point: Point, view_scale: float,
                pixels_per_meter: Optional[float]) -> bool:
    if len(shape.points) < 2:
        return False
    center, edge = shape.points[0], shape.points[1]
    return distance(point, center) <= distance(center, edge)


def _hit_callout(shape: Shape, point: Point, view_scale: float,
                 pixels_per_meter: Optional[float]) -> bool:
    if not shape.points:
        return False
    return distance(point, shape.points[0]) < 20 / view_scale


def _hit_stroke(shape: Shape, point: Point, view_scale: float,
                pixels_per_meter: Optional[float]) -> bool:
    if len(shape.points) < 2:
        return False
    tolerance = (shape.style_value("stroke_width") or 4) + 5
    return point_to_segment_distance(point, shape.points[0], shape.points[1]) < tolerance


def _hit_axis(shape: Shape, point: Point, view_scale: float,
              pixels_per_meter: Optional[float]) -> bool:
    if len(shape.points) < 2:
        return False
    system = generate_axis_system(shape.points[0], shape.points[1],
                                  shape.axis_config, pixels_per_meter)
    tolerance = 10 / view_scale
    return any(point_to_segment_distance(point, p1, p2) < tolerance
               for p1, p2 in system.lines)


_HIT_TESTS: Dict[ShapeKind, HitTest] = {
    ShapeKind.POLYGON: _hit_area,
    ShapeKind.RECTANGLE: _hit_area,
    ShapeKind.SQUARE: _hit_area,
    ShapeKind.TRIANGLE: _hit_area,
    ShapeKind.IMAGE: _hit_area,
    ShapeKind.CIRCLE: _hit_circle,
    ShapeKind.ICON: _hit_marker,
    ShapeKind.BULLET: _hit_marker,
    ShapeKind.TEXT: _hit_text,
    ShapeKind.CALLOUT: _hit_callout,
    ShapeKind.LINE: _hit_stroke,
    ShapeKind.ARROW: _hit_stroke,
    ShapeKind.AXIS: _hit_axis,
}


def hit_test(shape: Shape, point: Point, view_scale: float = 1.0,
             pixels_per_meter: Optional[float] = None) -> bool:
    """
    Check whether a point (in pixel space) picks a shape.

    Args:
        shape: Shape to test
        point: Pointer position
        view_scale: Current zoom; screen-sized tolerances shrink as it grows
        pixels_per_meter: Calibration scale, needed for axis systems

    Returns:
        True if the point hits the shape body
    """
    return _HIT_TESTS[shape.kind](shape, point, view_scale, pixels_per_meter)


def find_shape_at(shapes: Sequence[Shape], point: Point, view_scale: float = 1.0,
                  pixels_per_meter: Optional[float] = None) -> Optional[Shape]:
    """Topmost visible, unlocked shape under the point (later shapes draw on top)."""
    for shape in reversed(shapes):
        if not shape.is_interactive:
            continue
        if hit_test(shape, point, view_scale, pixels_per_meter):
            return shape
    return None
