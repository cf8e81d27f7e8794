"""
Visual Mapper geometry core v1.0

Computational geometry and coordinate-transform engine behind the Visual
Mapper floor-plan annotation editor: snapping, overlap resolution,
self-intersection checks, calibration, axis grids, label placement, and
the coordinate mappers used by the PDF/DXF/GeoJSON/IFC exporters.

Usage:
    from visualmapper.models import Shape, ShapeKind, Sheet
    from visualmapper.core import resolve_all_overlaps, get_closest_snap_point
    from visualmapper.io import export_dxf
"""

__version__ = "1.0.0"
__author__ = "Visual Mapper Team"

__all__ = ["__version__"]
