"""Pytest fixtures for Visual Mapper tests."""

import pytest

from visualmapper.models import (
    AxisConfig,
    CalibrationSample,
    CoordinateReference,
    GridConfig,
    Shape,
    ShapeKind,
    Sheet,
    WorldPoint,
)
from visualmapper.utils.profiling import PerformanceProfiler


# ============================================================================
# Polygon Fixtures
# ============================================================================

@pytest.fixture
def unit_square():
    """Axis-aligned unit square, counter-clockwise in y-down space."""
    return [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


@pytest.fixture
def square_100():
    """100px square at the origin."""
    return [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]


@pytest.fixture
def make_shape():
    """Factory for shapes with a given kind and points."""
    def _make(kind=ShapeKind.POLYGON, points=None, **kwargs):
        return Shape(kind=kind, points=list(points or []), **kwargs)
    return _make


@pytest.fixture
def room_shape(square_100):
    """A labelled 100px room that shows its measurements."""
    return Shape(
        shape_id="room-1",
        kind=ShapeKind.POLYGON,
        points=square_100,
        label="Kitchen",
        area_number=1,
        style={"show_area": True, "show_perimeter": True},
    )


@pytest.fixture
def axis_shape():
    """Three numeric axis lines running right from the origin."""
    return Shape(
        shape_id="axis-1",
        kind=ShapeKind.AXIS,
        points=[(0.0, 0.0), (100.0, 0.0)],
        axis_config=AxisConfig(spacing_mm=50, count=3, start_label="1", length_mm=200),
    )


# ============================================================================
# Calibration Fixtures
# ============================================================================

@pytest.fixture
def reference_pair():
    """Two references: 100px along x is 10 world units along x."""
    return [
        CoordinateReference(pixel=(0.0, 0.0), world=WorldPoint(0.0, 0.0), ref_id=1),
        CoordinateReference(pixel=(100.0, 0.0), world=WorldPoint(10.0, 0.0), ref_id=2),
    ]


@pytest.fixture
def ruler_samples():
    """Two ruler samples averaging 100 px/m."""
    return [CalibrationSample(pixels=100.0, meters=1.0),
            CalibrationSample(pixels=300.0, meters=3.0)]


@pytest.fixture
def calibrated_sheet(room_shape, ruler_samples):
    """Sheet calibrated by ruler only (100 px/m)."""
    return Sheet(
        sheet_id="sheet-1",
        name="Ground",
        title="Test Plan",
        floor="1st floor",
        image_size=(1000, 800),
        shapes=[room_shape],
        calibration_data=ruler_samples,
    )


@pytest.fixture
def referenced_sheet(room_shape, reference_pair):
    """Sheet with a two-point world transform."""
    return Sheet(
        sheet_id="sheet-2",
        title="World Plan",
        image_size=(1000, 800),
        shapes=[room_shape],
        coord_refs=reference_pair,
    )


@pytest.fixture
def visible_grid():
    """1 m grid, visible."""
    return GridConfig(visible=True, size_mm=1000)


# ============================================================================
# Profiler
# ============================================================================

@pytest.fixture(autouse=True)
def clean_profiler():
    """Each test starts with an empty timing history."""
    PerformanceProfiler.get_instance().clear()
    yield
    PerformanceProfiler.get_instance().clear()
