"""Tests for pixel-to-world calibration."""

import math

import pytest

from visualmapper.core.calibration import (
    SimilarityTransform,
    active_references,
    pixel_area_to_square_meters,
    pixels_to_meters,
    resolve_pixels_per_meter,
    scale_from_samples,
    transform_point_to_world,
)
from visualmapper.models import CalibrationSample, CoordinateReference, WorldPoint


class TestRulerScale:

    def test_weighted_by_length(self):
        samples = [CalibrationSample(100, 1), CalibrationSample(500, 2)]
        assert scale_from_samples(samples) == pytest.approx(200.0)

    def test_no_samples(self):
        assert scale_from_samples([]) is None

    def test_zero_meters(self):
        assert scale_from_samples([CalibrationSample(100, 0)]) is None

    def test_unit_conversions(self):
        assert pixels_to_meters(250, 100) == pytest.approx(2.5)
        assert pixel_area_to_square_meters(40000, 100) == pytest.approx(4.0)


class TestActiveReferences:

    def test_pair(self, reference_pair):
        assert active_references(reference_pair) == tuple(reference_pair)

    def test_single_reference(self, reference_pair):
        assert active_references(reference_pair[:1]) is None

    def test_coincident_pixels(self):
        refs = [CoordinateReference((5, 5), WorldPoint(0, 0), 1),
                CoordinateReference((5, 5), WorldPoint(10, 0), 2)]
        assert active_references(refs) is None


class TestTransformPointToWorld:

    def test_on_axis(self, reference_pair):
        world = transform_point_to_world((50, 0), *reference_pair)
        assert world.x == pytest.approx(5.0)
        assert world.y == pytest.approx(0.0)

    def test_off_axis(self, reference_pair):
        world = transform_point_to_world((100, 100), *reference_pair)
        assert world.x == pytest.approx(10.0)
        assert world.y == pytest.approx(10.0)

    def test_references_map_exactly(self):
        ref1 = CoordinateReference((10, 20), WorldPoint(6500.0, 2000.0), 1)
        ref2 = CoordinateReference((310, 420), WorldPoint(6530.0, 1960.0), 2)
        for ref in (ref1, ref2):
            world = transform_point_to_world(ref.pixel, ref1, ref2)
            assert world.x == pytest.approx(ref.world.x)
            assert world.y == pytest.approx(ref.world.y)

    def test_rotation(self):
        """Pixel x axis mapped onto world y axis is a 90 degree turn."""
        ref1 = CoordinateReference((0, 0), WorldPoint(0, 0), 1)
        ref2 = CoordinateReference((10, 0), WorldPoint(0, 10), 2)
        world = transform_point_to_world((0, 10), ref1, ref2)
        assert world.x == pytest.approx(-10.0)
        assert world.y == pytest.approx(0.0, abs=1e-9)

    def test_coincident_references(self):
        ref = CoordinateReference((5, 5), WorldPoint(3, 3), 1)
        assert transform_point_to_world((20, 20), ref, ref) == WorldPoint(0.0, 0.0)

    def test_elevation_interpolated(self):
        ref1 = CoordinateReference((0, 0), WorldPoint(0, 0, 10.0), 1)
        ref2 = CoordinateReference((100, 0), WorldPoint(10, 0, 20.0), 2)
        assert transform_point_to_world((25, 0), ref1, ref2).z == pytest.approx(12.5)

    def test_single_elevation(self):
        ref1 = CoordinateReference((0, 0), WorldPoint(0, 0), 1)
        ref2 = CoordinateReference((100, 0), WorldPoint(10, 0, 4.0), 2)
        assert transform_point_to_world((25, 0), ref1, ref2).z == 4.0

    def test_no_elevation(self, reference_pair):
        assert transform_point_to_world((25, 0), *reference_pair).z is None


class TestSimilarityTransform:

    def test_scale_and_rotation(self, reference_pair):
        transform = SimilarityTransform.from_references(*reference_pair)
        assert transform.scale == pytest.approx(0.1)
        assert transform.rotation == pytest.approx(0.0)
        assert transform.pixels_per_meter == pytest.approx(10.0)

    def test_round_trip(self):
        ref1 = CoordinateReference((10, 20), WorldPoint(100.0, 200.0), 1)
        ref2 = CoordinateReference((200, 90), WorldPoint(112.0, 230.0), 2)
        transform = SimilarityTransform.from_references(ref1, ref2)
        pixel = transform.to_pixel(transform.to_world((77, 140)))
        assert pixel == pytest.approx((77, 140))

    def test_zero_world_distance(self):
        ref1 = CoordinateReference((0, 0), WorldPoint(5, 5), 1)
        ref2 = CoordinateReference((10, 0), WorldPoint(5, 5), 2)
        transform = SimilarityTransform.from_references(ref1, ref2)
        assert transform.pixels_per_meter is None

    def test_rotation_angle(self):
        ref1 = CoordinateReference((0, 0), WorldPoint(0, 0), 1)
        ref2 = CoordinateReference((10, 0), WorldPoint(0, 10), 2)
        transform = SimilarityTransform.from_references(ref1, ref2)
        assert transform.rotation == pytest.approx(math.pi / 2)


class TestResolvePixelsPerMeter:

    def test_references_win_over_ruler(self, reference_pair, ruler_samples):
        assert resolve_pixels_per_meter(reference_pair, ruler_samples) == pytest.approx(10.0)

    def test_ruler_fallback(self, ruler_samples):
        assert resolve_pixels_per_meter([], ruler_samples) == pytest.approx(100.0)

    def test_uncalibrated(self):
        assert resolve_pixels_per_meter([], []) is None
