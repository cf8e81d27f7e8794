"""Geometry utility functions.

Pure math over (x, y) tuples. Every function here is space-agnostic: it
works the same on pixel coordinates and on calibrated world coordinates.
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence, Tuple

Point = Tuple[float, float]


class Orientation(IntEnum):
    """Turn direction of an ordered point triple."""
    COLLINEAR = 0
    CLOCKWISE = 1
    COUNTERCLOCKWISE = 2


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounds of a point set."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def contains(self, point: Point) -> bool:
        x, y = point
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


def distance(p1: Point, p2: Point) -> float:
    """Calculate Euclidean distance between two points."""
    return math.sqrt((p2[0] - p1[0])**2 + (p2[1] - p1[1])**2)


def midpoint(p1: Point, p2: Point) -> Point:
    """Point halfway between p1 and p2."""
    return ((p1[0] + p2[0]) / 2, (p1[1] + p2[1]) / 2)


def centroid(points: Sequence[Point]) -> Point:
    """
    Vertex centroid of a point sequence.

    One point is its own centroid and two points give their midpoint.
    Longer sequences use the plain vertex average, which is what label
    placement and polygon scaling expect (not the area centroid).
    """
    n = len(points)
    if n == 0:
        return (0.0, 0.0)
    if n == 1:
        return (float(points[0][0]), float(points[0][1]))
    if n == 2:
        return midpoint(points[0], points[1])

    cx = sum(p[0] for p in points) / n
    cy = sum(p[1] for p in points) / n
    return (cx, cy)


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    """
    Get bounding box of a set of points.

    Returns:
        BoundingBox; all zeros for an empty sequence
    """
    if not points:
        return BoundingBox(0.0, 0.0, 0.0, 0.0)

    xs = [p[0] for p in points]
    ys = [p[1] for p in points]

    return BoundingBox(min(xs), max(xs), min(ys), max(ys))


def closest_point_on_segment(point: Point, start: Point, end: Point) -> Point:
    """
    Project a point onto segment start-end, clamped to the segment.

    A zero-length segment projects everything onto its start point.
    """
    ax, ay = start
    dx = end[0] - ax
    dy = end[1] - ay
    len_sq = dx * dx + dy * dy

    if len_sq == 0:
        t = 0.0
    else:
        t = ((point[0] - ax) * dx + (point[1] - ay) * dy) / len_sq
    t = max(0.0, min(1.0, t))

    return (ax + dx * t, ay + dy * t)


def point_to_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Calculate distance from point to the closest point of a segment."""
    return distance(point, closest_point_on_segment(point, start, end))


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """
    Check if a point is inside a polygon using ray casting.

    Points outside the polygon's bounding box are rejected before the
    even-odd crossing count. Points exactly on the boundary get whatever
    answer the crossing count gives, which is stable for identical input.

    Args:
        point: (x, y) point to test
        polygon: List of (x, y) vertices

    Returns:
        True if point is inside polygon
    """
    n = len(polygon)
    if n < 3:
        return False

    if not bounding_box(polygon).contains(point):
        return False

    x, y = point
    inside = False

    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]

        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i

    return inside


def orientation(p: Point, q: Point, r: Point) -> Orientation:
    """Orientation of the triple (p, q, r) from the sign of its cross product."""
    val = (q[1] - p[1]) * (r[0] - q[0]) - (q[0] - p[0]) * (r[1] - q[1])
    if val == 0:
        return Orientation.COLLINEAR
    return Orientation.CLOCKWISE if val > 0 else Orientation.COUNTERCLOCKWISE


def polygon_area(polygon: Sequence[Point]) -> float:
    """
    Calculate the area of a polygon using the shoelace formula.

    Args:
        polygon: List of (x, y) vertices

    Returns:
        Area (always positive), 0 for fewer than three vertices
    """
    n = len(polygon)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i][0] * polygon[j][1]
        area -= polygon[j][0] * polygon[i][1]

    return abs(area) / 2.0


def polygon_perimeter(polygon: Sequence[Point]) -> float:
    """Length of the closed ring through all vertices."""
    n = len(polygon)
    if n < 2:
        return 0.0
    return sum(distance(polygon[i], polygon[(i + 1) % n]) for i in range(n))


def polyline_length(points: Sequence[Point]) -> float:
    """Calculate total length of an open polyline."""
    if len(points) < 2:
        return 0.0

    total = 0.0
    for i in range(len(points) - 1):
        total += distance(points[i], points[i + 1])

    return total


def rotate_point(point: Point, center: Point, angle_rad: float) -> Point:
    """Rotate a point about center by angle_rad."""
    cos = math.cos(angle_rad)
    sin = math.sin(angle_rad)
    dx = point[0] - center[0]
    dy = point[1] - center[1]

    return (center[0] + (dx * cos - dy * sin),
            center[1] + (dx * sin + dy * cos))


def rotate_polygon(points: Sequence[Point], angle_rad: float) -> List[Point]:
    """Rotate a polygon about its vertex centroid."""
    center = centroid(points)
    return [rotate_point(p, center, angle_rad) for p in points]


def scale_polygon(points: Sequence[Point], factor: float) -> List[Point]:
    """Scale a polygon toward (factor < 1) or away from its vertex centroid."""
    cx, cy = centroid(points)
    return [(cx + (p[0] - cx) * factor, cy + (p[1] - cy) * factor) for p in points]


def translate_points(points: Sequence[Point], dx: float, dy: float) -> List[Point]:
    """Shift every point by (dx, dy)."""
    return [(p[0] + dx, p[1] + dy) for p in points]


def polygon_primary_angle(points: Sequence[Point]) -> float:
    """Angle in radians of the polygon's longest edge."""
    n = len(points)
    max_len = 0.0
    angle = 0.0

    for i in range(n):
        p1 = points[i]
        p2 = points[(i + 1) % n]
        length = distance(p1, p2)
        if length > max_len:
            max_len = length
            angle = math.atan2(p2[1] - p1[1], p2[0] - p1[0])

    return angle


def arrow_head_points(start: Point, end: Point, head_size: float = 20) -> List[Point]:
    """Tip and the two barb points of an arrow head at end."""
    angle = math.atan2(end[1] - start[1], end[0] - start[0])
    left = (end[0] - head_size * math.cos(angle - math.pi / 6),
            end[1] - head_size * math.sin(angle - math.pi / 6))
    right = (end[0] - head_size * math.cos(angle + math.pi / 6),
             end[1] - head_size * math.sin(angle + math.pi / 6))
    return [end, left, right]


def constrain_point(start: Point, current: Point, shift: bool) -> Point:
    """
    Constrain a drag point to horizontal, vertical or 45 degrees.

    Only applies while shift is held. Drags whose dx and dy differ by less
    than 20% of the larger one lock to the diagonal.
    """
    if not shift:
        return current

    dx = abs(current[0] - start[0])
    dy = abs(current[1] - start[1])

    if abs(dx - dy) < max(dx, dy) * 0.2:
        dist = (dx + dy) / 2
        sign_x = 1 if current[0] > start[0] else -1
        sign_y = 1 if current[1] > start[1] else -1
        return (start[0] + dist * sign_x, start[1] + dist * sign_y)

    if dx > dy:
        return (current[0], start[1])
    return (start[0], current[1])


_ROMAN_NUMERALS = [
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
]


def to_roman(num: int) -> str:
    """Roman numeral for bullet numbering; empty for num < 1."""
    result = []
    for value, symbol in _ROMAN_NUMERALS:
        while num >= value:
            result.append(symbol)
            num -= value
    return "".join(result)
