"""Export coordinate mappers and file writers."""

from visualmapper.io.coordinates import (
    PdfPlacement,
    WorldMapper,
    IfcMapper,
    SpaceBoundary,
    page_size_for_image,
)
from visualmapper.io.dxf import DXFExporter, DxfOptions, HandleCounter, export_dxf
from visualmapper.io.geojson import build_feature_collection, export_geojson

__all__ = [
    "PdfPlacement",
    "WorldMapper",
    "IfcMapper",
    "SpaceBoundary",
    "page_size_for_image",
    "DXFExporter",
    "DxfOptions",
    "HandleCounter",
    "export_dxf",
    "build_feature_collection",
    "export_geojson",
]
