"""Integration tests for end-to-end workflows: draw -> snap -> resolve -> export."""

import json

import pytest

from visualmapper.core import (
    calculate_snap_correction,
    check_polygon_self_intersection,
    find_shape_at,
    polygons_intersect,
    resolve_all_overlaps,
)
from visualmapper.io import export_dxf, export_geojson
from visualmapper.models import Shape, ShapeKind, Sheet
from visualmapper.utils.geometry import translate_points


class TestDrawingWorkflow:
    """Drawing a room next to an existing one."""

    def test_draw_snap_and_resolve(self, calibrated_sheet, square_100):
        existing = calibrated_sheet.shapes[0]

        # Draw a new room vertex by vertex, rejecting crossing edges
        drawn = []
        for vertex in [(95, 0), (200, 0), (200, 100), (95, 100)]:
            assert not check_polygon_self_intersection(drawn, vertex)
            drawn.append(vertex)
        assert not check_polygon_self_intersection(drawn, drawn[0])
        assert polygons_intersect(drawn, existing.points)

        resolved = resolve_all_overlaps(drawn, [existing.points])
        assert not polygons_intersect(resolved, existing.points)

        room = Shape(kind=ShapeKind.POLYGON, points=resolved, label="Hall")
        calibrated_sheet.shapes.append(room)
        assert find_shape_at(calibrated_sheet.shapes, (150, 50)) is room
        assert find_shape_at(calibrated_sheet.shapes, (50, 50)) is existing

    def test_drag_with_snap(self, calibrated_sheet):
        existing = calibrated_sheet.shapes[0]
        moving = [(104, 2), (204, 2), (204, 102), (104, 102)]

        correction = calculate_snap_correction(moving, [existing], threshold=10)
        moved = translate_points(moving, *correction.delta)

        assert moved[0] == pytest.approx((100, 0))
        assert not polygons_intersect(moved, existing.points)


class TestExportWorkflow:
    """Exporting a calibrated sheet to every vector format."""

    def test_export_all(self, calibrated_sheet, axis_shape, tmp_path):
        calibrated_sheet.shapes.append(axis_shape)

        dxf_path = tmp_path / "plan.dxf"
        geojson_path = tmp_path / "plan.geojson"
        assert export_dxf(str(dxf_path), calibrated_sheet)
        assert export_geojson(str(geojson_path), calibrated_sheet)

        assert "Kitchen" in dxf_path.read_text(encoding="utf-8")
        data = json.loads(geojson_path.read_text(encoding="utf-8"))
        assert [f["properties"]["label"] for f in data["features"]] == ["Kitchen"]

    def test_sheet_survives_serialization(self, referenced_sheet):
        restored = Sheet.from_dict(json.loads(json.dumps(referenced_sheet.to_dict())))
        assert restored.world_transform.to_world((50, 0)).x == pytest.approx(5.0)
