"""
Snap engine.

Cursor snapping returns the single closest candidate under a threshold,
searching the background grid, area vertices, edge midpoints, edges and
axis-grid lines. Drag snapping computes the correction to add to a
whole-shape move so a moving vertex lands on a neighbour.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from visualmapper.config import GRID_MIN_STEP_PX
from visualmapper.core.axes import generate_axis_system
from visualmapper.models.shapes import Shape, ShapeKind, GridConfig, SNAPPABLE_KINDS
from visualmapper.utils.geometry import (
    Point,
    bounding_box,
    closest_point_on_segment,
    distance,
    midpoint,
)
from visualmapper.utils.profiling import timed

logger = logging.getLogger("visualmapper.snapping")


@dataclass
class SnapCorrection:
    """Offset to add to a raw drag displacement, and the point snapped to."""
    delta: Point = (0.0, 0.0)
    snap_point: Optional[Point] = None

    @property
    def snapped(self) -> bool:
        return self.snap_point is not None


@dataclass
class AlignmentGuide:
    """A horizontal ('y') or vertical ('x') guide line at pos."""
    axis: str
    pos: float


@dataclass
class AlignmentResult:
    delta: Point = (0.0, 0.0)
    guides: List[AlignmentGuide] = field(default_factory=list)


class _Nearest:
    """Running minimum: only candidates closer than the best so far win."""

    def __init__(self, target: Point, threshold: float):
        self.target = target
        self.best_dist = threshold
        self.best: Optional[Point] = None

    def offer(self, candidate: Point):
        d = distance(self.target, candidate)
        if d < self.best_dist:
            self.best_dist = d
            self.best = candidate


def _grid_step_px(grid_config: GridConfig, pixels_per_meter: Optional[float]) -> float:
    # Uncalibrated sheets draw 1 px per mm
    px_per_mm = pixels_per_meter / 1000 if pixels_per_meter else 1.0
    return grid_config.size_mm * px_per_mm


def get_closest_grid_point(point: Point, grid_config: Optional[GridConfig],
                           pixels_per_meter: Optional[float]) -> Optional[Point]:
    """
    Round a point to the nearest grid intersection.

    Returns:
        Grid point, or None if the grid is hidden or its step is too small
        (below GRID_MIN_STEP_PX) to be useful
    """
    if grid_config is None or not grid_config.visible:
        return None

    step_px = _grid_step_px(grid_config, pixels_per_meter)
    if step_px < GRID_MIN_STEP_PX:
        logger.debug(f"Grid step {step_px:.3f}px below snapping floor")
        return None

    rel_x = point[0] - grid_config.offset_x
    rel_y = point[1] - grid_config.offset_y

    # Half-way points round up, not to even
    return (math.floor(rel_x / step_px + 0.5) * step_px + grid_config.offset_x,
            math.floor(rel_y / step_px + 0.5) * step_px + grid_config.offset_y)


def _ring_edges(points: Sequence[Point]):
    n = len(points)
    for i in range(n):
        yield points[i], points[(i + 1) % n]


def _offer_area_targets(nearest: _Nearest, shape: Shape, pixels_per_meter: Optional[float]):
    for p1, p2 in _ring_edges(shape.points):
        nearest.offer(p1)
        nearest.offer(midpoint(p1, p2))
        nearest.offer(closest_point_on_segment(nearest.target, p1, p2))


def _offer_axis_targets(nearest: _Nearest, shape: Shape, pixels_per_meter: Optional[float]):
    if shape.axis_config is None or len(shape.points) < 2:
        return
    system = generate_axis_system(shape.points[0], shape.points[1],
                                  shape.axis_config, pixels_per_meter)
    for p1, p2 in system.lines:
        nearest.offer(closest_point_on_segment(nearest.target, p1, p2))
        nearest.offer(p2)
        nearest.offer(p1)


def _offer_nothing(nearest: _Nearest, shape: Shape, pixels_per_meter: Optional[float]):
    pass


# Which snap targets each kind contributes
_SNAP_TARGETS = {
    ShapeKind.POLYGON: _offer_area_targets,
    ShapeKind.RECTANGLE: _offer_area_targets,
    ShapeKind.SQUARE: _offer_area_targets,
    ShapeKind.AXIS: _offer_axis_targets,
    ShapeKind.TRIANGLE: _offer_nothing,
    ShapeKind.CIRCLE: _offer_nothing,
    ShapeKind.ICON: _offer_nothing,
    ShapeKind.TEXT: _offer_nothing,
    ShapeKind.BULLET: _offer_nothing,
    ShapeKind.IMAGE: _offer_nothing,
    ShapeKind.LINE: _offer_nothing,
    ShapeKind.ARROW: _offer_nothing,
    ShapeKind.CALLOUT: _offer_nothing,
}


@timed("snap_query")
def get_closest_snap_point(target: Point,
                           shapes: Sequence[Shape],
                           threshold: float,
                           grid_config: Optional[GridConfig] = None,
                           pixels_per_meter: Optional[float] = None) -> Optional[Point]:
    """
    Find the closest snap target within threshold.

    Candidates from every category compete on distance; each closer
    candidate tightens the threshold for the rest. Hidden and locked
    shapes are ignored.

    Args:
        target: Cursor position
        shapes: Shapes on the sheet
        threshold: Maximum snap distance
        grid_config: Background grid, if snapping to it
        pixels_per_meter: Calibration scale for grid and axis sizes

    Returns:
        The snap point, or None if nothing is within threshold
    """
    nearest = _Nearest(target, threshold)

    grid_point = get_closest_grid_point(target, grid_config, pixels_per_meter)
    if grid_point is not None:
        nearest.offer(grid_point)

    for shape in shapes:
        if not shape.is_interactive:
            continue
        _SNAP_TARGETS[shape.kind](nearest, shape, pixels_per_meter)

    return nearest.best


@timed("snap_correction")
def calculate_snap_correction(moving_points: Sequence[Point],
                              static_shapes: Sequence[Shape],
                              threshold: float) -> SnapCorrection:
    """
    Compute the snap offset for a whole-shape drag.

    Vertex-to-vertex snapping takes strict priority: if any moving vertex
    is within threshold of a static vertex, the closest such pair decides
    the correction and edges are not examined. Otherwise the closest
    projection of a moving vertex onto a static edge is used.

    Returns:
        SnapCorrection with a zero delta when nothing is in range
    """
    targets = [s for s in static_shapes if s.kind in SNAPPABLE_KINDS]
    min_dist = threshold
    best: Optional[Tuple[Point, Point]] = None

    for mp in moving_points:
        for shape in targets:
            for sp in shape.points:
                d = distance(mp, sp)
                if d < min_dist:
                    min_dist = d
                    best = (mp, sp)

    if best is None:
        for mp in moving_points:
            for shape in targets:
                for p1, p2 in _ring_edges(shape.points):
                    on_edge = closest_point_on_segment(mp, p1, p2)
                    d = distance(mp, on_edge)
                    if d < min_dist:
                        min_dist = d
                        best = (mp, on_edge)

    if best is None:
        return SnapCorrection()

    mp, sp = best
    return SnapCorrection(delta=(sp[0] - mp[0], sp[1] - mp[1]), snap_point=sp)


def get_snap_candidates(shapes: Sequence[Shape]) -> List[Point]:
    """Vertices and edge midpoints of polygon and rectangle shapes."""
    points = []
    for shape in shapes:
        if shape.kind not in (ShapeKind.POLYGON, ShapeKind.RECTANGLE):
            continue
        for p1, p2 in _ring_edges(shape.points):
            points.append(p1)
            points.append(midpoint(p1, p2))
    return points


def get_alignment_guides(active_points: Sequence[Point],
                         other_shapes: Sequence[Shape],
                         threshold: float = 8) -> AlignmentResult:
    """
    Align a dragged shape's bounding box with other shapes' boxes.

    The active box's min edge is tried first, then its max edge, against
    the min, max and centre lines of every snappable shape. The first
    match per axis sets the delta and records a guide.
    """
    active = bounding_box(active_points)
    candidates = [s for s in other_shapes if s.kind in SNAPPABLE_KINDS]
    guides: List[AlignmentGuide] = []

    def check(value: float, axis: str) -> float:
        for shape in candidates:
            box = bounding_box(shape.points)
            if axis == "x":
                lines = [box.min_x, box.max_x, box.min_x + box.width / 2]
            else:
                lines = [box.min_y, box.max_y, box.min_y + box.height / 2]
            for line in lines:
                if abs(value - line) < threshold:
                    guides.append(AlignmentGuide(axis, line))
                    return line - value
        return 0.0

    dx = check(active.min_x, "x") or check(active.max_x, "x")
    dy = check(active.min_y, "y") or check(active.max_y, "y")

    return AlignmentResult(delta=(dx, dy), guides=guides)
