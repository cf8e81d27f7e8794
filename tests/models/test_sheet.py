"""Tests for the Sheet model and calibration records."""

import pytest

from visualmapper.models import (
    CalibrationSample,
    CoordinateReference,
    GridConfig,
    Sheet,
    WorldPoint,
)


class TestWorldPoint:

    def test_round_trip_with_elevation(self):
        point = WorldPoint(1.5, 2.5, 3.0)
        assert WorldPoint.from_dict(point.to_dict()) == point

    def test_elevation_omitted(self):
        assert WorldPoint(1, 2).to_dict() == {"x": 1, "y": 2}

    def test_reference_round_trip(self, reference_pair):
        ref = reference_pair[1]
        assert CoordinateReference.from_dict(ref.to_dict()) == ref


class TestSheet:

    def test_auto_id(self):
        assert len(Sheet().sheet_id) == 8

    def test_visible_shapes(self, calibrated_sheet, room_shape):
        room_shape.visible = False
        assert calibrated_sheet.visible_shapes == []

    def test_pixels_per_meter_from_ruler(self, calibrated_sheet):
        assert calibrated_sheet.pixels_per_meter == pytest.approx(100.0)

    def test_pixels_per_meter_references_win(self, calibrated_sheet, reference_pair):
        calibrated_sheet.coord_refs = reference_pair
        assert calibrated_sheet.pixels_per_meter == pytest.approx(10.0)

    def test_uncalibrated(self):
        sheet = Sheet()
        assert sheet.pixels_per_meter is None
        assert sheet.world_transform is None

    def test_world_transform(self, referenced_sheet):
        transform = referenced_sheet.world_transform
        assert transform.to_world((50, 0)).x == pytest.approx(5.0)

    def test_get_shape(self, calibrated_sheet):
        assert calibrated_sheet.get_shape("room-1").label == "Kitchen"
        assert calibrated_sheet.get_shape("nope") is None

    def test_round_trip(self, referenced_sheet):
        referenced_sheet.calibration_data = [CalibrationSample(120.0, 2.0)]
        referenced_sheet.grid_config = GridConfig(visible=True)
        restored = Sheet.from_dict(referenced_sheet.to_dict())
        assert restored == referenced_sheet
