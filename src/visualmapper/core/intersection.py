"""Segment and polygon intersection tests.

All predicates here are advisory: they report crossings and overlaps, and
the caller decides whether to refuse the edit.
"""

from typing import Sequence

from visualmapper.config import VERTEX_EPSILON, OVERLAP_SHRINK_FACTOR
from visualmapper.utils.geometry import (
    Point,
    Orientation,
    orientation,
    point_in_polygon,
    scale_polygon,
)


def _on_segment(p: Point, q: Point, r: Point) -> bool:
    """Whether q lies inside the bounding box of segment p-r."""
    return (min(p[0], r[0]) <= q[0] <= max(p[0], r[0]) and
            min(p[1], r[1]) <= q[1] <= max(p[1], r[1]))


def _same_vertex(a: Point, b: Point, eps: float = VERTEX_EPSILON) -> bool:
    return abs(a[0] - b[0]) < eps and abs(a[1] - b[1]) < eps


def segments_intersect(p1: Point, q1: Point, p2: Point, q2: Point) -> bool:
    """
    Check if segment p1-q1 intersects segment p2-q2.

    Touching endpoints and collinear overlap both count as intersecting.
    """
    o1 = orientation(p1, q1, p2)
    o2 = orientation(p1, q1, q2)
    o3 = orientation(p2, q2, p1)
    o4 = orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear special cases
    if o1 == Orientation.COLLINEAR and _on_segment(p1, p2, q1):
        return True
    if o2 == Orientation.COLLINEAR and _on_segment(p1, q2, q1):
        return True
    if o3 == Orientation.COLLINEAR and _on_segment(p2, p1, q2):
        return True
    if o4 == Orientation.COLLINEAR and _on_segment(p2, q1, q2):
        return True

    return False


def segments_cross(a1: Point, a2: Point, b1: Point, b2: Point,
                   eps: float = VERTEX_EPSILON) -> bool:
    """
    Check if two segments truly cross.

    Unlike segments_intersect, segments that only meet at a shared vertex
    (endpoints within eps) are not reported, and collinear overlap is not
    reported either.
    """
    o1 = orientation(a1, a2, b1)
    o2 = orientation(a1, a2, b2)
    o3 = orientation(b1, b2, a1)
    o4 = orientation(b1, b2, a2)

    if o1 != o2 and o3 != o4:
        for a in (a1, a2):
            for b in (b1, b2):
                if _same_vertex(a, b, eps):
                    return False
        return True

    return False


def check_polygon_self_intersection(points: Sequence[Point], next_point: Point,
                                    eps: float = VERTEX_EPSILON) -> bool:
    """
    Check whether adding next_point would make an open polygon cross itself.

    The candidate edge runs from the last existing point to next_point.
    The edge that ends at the last point is never tested since it shares
    that vertex. When next_point closes the ring (lies within eps of the
    first point) the first edge is skipped as well, because it shares the
    first vertex with the closing edge.

    Args:
        points: Vertices placed so far
        next_point: Candidate vertex
        eps: Closing / shared-vertex tolerance

    Returns:
        True if the new edge crosses an existing edge
    """
    if len(points) < 3:
        return False

    p1 = points[-1]
    q1 = next_point

    is_closing = _same_vertex(next_point, points[0], eps)
    start_idx = 1 if is_closing else 0
    end_idx = len(points) - 2

    for i in range(start_idx, end_idx):
        if segments_cross(p1, q1, points[i], points[i + 1], eps):
            return True

    return False


def polygons_intersect(poly_a: Sequence[Point], poly_b: Sequence[Point],
                       shrink: float = OVERLAP_SHRINK_FACTOR) -> bool:
    """
    Check whether two polygons overlap by a non-zero area.

    Both polygons are first shrunk slightly toward their own centroid so
    that neighbours sharing an edge or vertex are not reported. Any strict
    edge crossing then means overlap; if no edges cross, one polygon may
    still lie wholly inside the other, which the containment test of each
    polygon's first vertex catches.
    """
    if len(poly_a) < 3 or len(poly_b) < 3:
        return False

    a_pts = scale_polygon(poly_a, shrink)
    b_pts = scale_polygon(poly_b, shrink)
    na = len(a_pts)
    nb = len(b_pts)

    for i in range(na):
        a = a_pts[i]
        b = a_pts[(i + 1) % na]
        for j in range(nb):
            c = b_pts[j]
            d = b_pts[(j + 1) % nb]

            o1 = orientation(a, b, c)
            o2 = orientation(a, b, d)
            o3 = orientation(c, d, a)
            o4 = orientation(c, d, b)

            if o1 != o2 and o3 != o4:
                return True

    if point_in_polygon(a_pts[0], b_pts):
        return True
    if point_in_polygon(b_pts[0], a_pts):
        return True

    return False
