"""Tests for primitive geometry helpers."""

import math

import pytest

from visualmapper.utils.geometry import (
    BoundingBox,
    Orientation,
    arrow_head_points,
    bounding_box,
    centroid,
    closest_point_on_segment,
    constrain_point,
    distance,
    midpoint,
    orientation,
    point_in_polygon,
    point_to_segment_distance,
    polygon_area,
    polygon_perimeter,
    polygon_primary_angle,
    polyline_length,
    rotate_polygon,
    scale_polygon,
    to_roman,
    translate_points,
)


class TestBasics:
    """Distance, midpoint, centroid."""

    def test_distance(self):
        assert distance((0, 0), (3, 4)) == 5.0

    def test_midpoint(self):
        assert midpoint((0, 0), (10, 4)) == (5, 2)

    def test_centroid_single_point(self):
        """A single point is its own centroid."""
        assert centroid([(3, 7)]) == (3.0, 7.0)

    def test_centroid_two_points_is_midpoint(self):
        assert centroid([(0, 0), (10, 10)]) == (5, 5)

    def test_centroid_vertex_average(self, unit_square):
        assert centroid(unit_square) == pytest.approx((0.5, 0.5))

    def test_centroid_is_vertex_average_not_area_centroid(self):
        """Extra collinear vertices pull the centroid toward them."""
        pts = [(0, 0), (1, 0), (2, 0), (2, 2), (0, 2)]
        assert centroid(pts) == pytest.approx((1.0, 0.8))

    def test_centroid_empty(self):
        assert centroid([]) == (0.0, 0.0)


class TestBoundingBox:

    def test_bounds(self):
        box = bounding_box([(1, 5), (4, 2), (-1, 3)])
        assert box == BoundingBox(min_x=-1, max_x=4, min_y=2, max_y=5)
        assert box.width == 5
        assert box.height == 3
        assert box.center == (1.5, 3.5)

    def test_empty(self):
        box = bounding_box([])
        assert box.width == 0 and box.height == 0


class TestSegmentDistance:

    def test_projection_inside(self):
        assert point_to_segment_distance((5, 3), (0, 0), (10, 0)) == pytest.approx(3.0)

    def test_projection_clamped_to_endpoint(self):
        assert point_to_segment_distance((13, 4), (0, 0), (10, 0)) == pytest.approx(5.0)

    def test_zero_length_segment(self):
        """Degenerate segment measures to its start point."""
        assert point_to_segment_distance((3, 4), (0, 0), (0, 0)) == pytest.approx(5.0)
        assert closest_point_on_segment((3, 4), (0, 0), (0, 0)) == (0, 0)


class TestPointInPolygon:

    def test_inside(self, unit_square):
        assert point_in_polygon((0.5, 0.5), unit_square)

    def test_outside(self, unit_square):
        assert not point_in_polygon((1.5, 0.5), unit_square)
        assert not point_in_polygon((-0.1, 0.5), unit_square)

    def test_boundary_is_deterministic(self, unit_square):
        """Boundary points get a stable answer for identical input."""
        first = point_in_polygon((0.0, 0.5), unit_square)
        for _ in range(5):
            assert point_in_polygon((0.0, 0.5), unit_square) == first

    def test_concave(self):
        """U shape: the notch is outside."""
        u_shape = [(0, 0), (30, 0), (30, 30), (20, 30), (20, 10),
                   (10, 10), (10, 30), (0, 30)]
        assert point_in_polygon((5, 20), u_shape)
        assert not point_in_polygon((15, 20), u_shape)

    def test_too_few_vertices(self):
        assert not point_in_polygon((0, 0), [(0, 0), (1, 1)])


class TestOrientation:

    def test_collinear(self):
        assert orientation((0, 0), (1, 1), (2, 2)) == Orientation.COLLINEAR

    def test_turns(self):
        assert orientation((0, 0), (1, 0), (1, 1)) == Orientation.COUNTERCLOCKWISE
        assert orientation((0, 0), (1, 0), (1, -1)) == Orientation.CLOCKWISE


class TestArea:

    def test_unit_square(self, unit_square):
        assert polygon_area(unit_square) == pytest.approx(1.0)

    def test_reversed_winding(self, unit_square):
        assert polygon_area(list(reversed(unit_square))) == pytest.approx(1.0)

    @pytest.mark.parametrize("angle", [0.3, 1.0, math.pi / 4, 2.5])
    def test_rotation_invariant(self, unit_square, angle):
        assert polygon_area(rotate_polygon(unit_square, angle)) == pytest.approx(1.0)

    def test_degenerate(self):
        assert polygon_area([(0, 0), (1, 1)]) == 0.0

    def test_perimeter(self, unit_square):
        assert polygon_perimeter(unit_square) == pytest.approx(4.0)

    def test_polyline_length(self):
        assert polyline_length([(0, 0), (3, 4), (3, 10)]) == pytest.approx(11.0)


class TestTransforms:

    def test_scale_toward_centroid(self, unit_square):
        scaled = scale_polygon(unit_square, 0.5)
        assert scaled[0] == pytest.approx((0.25, 0.25))
        assert scaled[2] == pytest.approx((0.75, 0.75))

    def test_translate(self, unit_square):
        moved = translate_points(unit_square, 2, -1)
        assert moved[0] == (2, -1)

    def test_primary_angle_follows_longest_edge(self):
        tall = [(0, 0), (10, 0), (10, 50), (0, 50)]
        assert polygon_primary_angle(tall) == pytest.approx(math.pi / 2)

    def test_arrow_head(self):
        tip, left, right = arrow_head_points((0, 0), (100, 0), head_size=10)
        assert tip == (100, 0)
        assert left[0] < 100 and right[0] < 100
        assert left[1] == pytest.approx(-right[1])


class TestHelpers:

    def test_constrain_horizontal(self):
        assert constrain_point((0, 0), (50, 5), shift=True) == (50, 0)

    def test_constrain_diagonal(self):
        assert constrain_point((0, 0), (50, -48), shift=True) == (49, -49)

    def test_constrain_without_shift(self):
        assert constrain_point((0, 0), (50, 5), shift=False) == (50, 5)

    @pytest.mark.parametrize("num,expected", [(1, "I"), (4, "IV"), (9, "IX"), (14, "XIV"), (0, "")])
    def test_roman(self, num, expected):
        assert to_roman(num) == expected
