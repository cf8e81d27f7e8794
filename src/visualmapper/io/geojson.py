"""GeoJSON export of a sheet's annotations for web GIS tools."""

import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from visualmapper.io.coordinates import WorldMapper
from visualmapper.models.shapes import AREA_KINDS, Shape, ShapeKind
from visualmapper.models.sheet import Sheet
from visualmapper.utils.geometry import distance, polygon_area, polygon_perimeter
from visualmapper.utils.profiling import profile_block

logger = logging.getLogger("visualmapper.io.geojson")

# L-EST97, the national grid the world references are entered in
WORLD_CRS = "urn:ogc:def:crs:EPSG::3301"

Geometry = Optional[Dict[str, Any]]


def _area_geometry(shape: Shape, mapper: WorldMapper,
                   properties: Dict[str, Any]) -> Geometry:
    if not shape.points:
        return None
    ring = [list(mapper.to_xy(p)) for p in shape.points]
    ring.append(ring[0])
    return {"type": "Polygon", "coordinates": [ring]}


def _line_geometry(shape: Shape, mapper: WorldMapper,
                   properties: Dict[str, Any]) -> Geometry:
    if len(shape.points) < 2:
        return None
    if mapper.pixels_per_meter:
        properties["length_m"] = distance(shape.points[0], shape.points[1]) / mapper.pixels_per_meter
    return {"type": "LineString",
            "coordinates": [list(mapper.to_xy(p)) for p in shape.points]}


def _circle_geometry(shape: Shape, mapper: WorldMapper,
                     properties: Dict[str, Any]) -> Geometry:
    # No native circle type: center point plus a radius property
    if len(shape.points) < 2:
        return None
    if mapper.pixels_per_meter:
        properties["radius_m"] = distance(shape.points[0], shape.points[1]) / mapper.pixels_per_meter
    return {"type": "Point", "coordinates": list(mapper.to_xy(shape.points[0]))}


def _marker_geometry(shape: Shape, mapper: WorldMapper,
                     properties: Dict[str, Any]) -> Geometry:
    if not shape.points:
        return None
    if shape.kind == ShapeKind.BULLET:
        properties["bullet_label"] = shape.style_value("bullet_label")
    elif shape.kind == ShapeKind.ICON:
        properties["icon_name"] = shape.style_value("icon_name")
    return {"type": "Point", "coordinates": list(mapper.to_xy(shape.points[0]))}


def _no_geometry(shape: Shape, mapper: WorldMapper,
                 properties: Dict[str, Any]) -> Geometry:
    return None


_GEOMETRY_BUILDERS: Dict[ShapeKind, Callable[..., Geometry]] = {
    ShapeKind.POLYGON: _area_geometry,
    ShapeKind.RECTANGLE: _area_geometry,
    ShapeKind.SQUARE: _area_geometry,
    ShapeKind.TRIANGLE: _area_geometry,
    ShapeKind.LINE: _line_geometry,
    ShapeKind.ARROW: _line_geometry,
    ShapeKind.CIRCLE: _circle_geometry,
    ShapeKind.TEXT: _marker_geometry,
    ShapeKind.BULLET: _marker_geometry,
    ShapeKind.ICON: _marker_geometry,
    ShapeKind.IMAGE: _no_geometry,
    ShapeKind.CALLOUT: _no_geometry,
    ShapeKind.AXIS: _no_geometry,
}


def _area_properties(shape: Shape, pixels_per_meter: float) -> Dict[str, float]:
    result = {}
    if shape.style_value("show_area", False):
        result["area_m2"] = polygon_area(shape.points) / (pixels_per_meter * pixels_per_meter)
    if shape.style_value("show_perimeter", False):
        result["perimeter_m"] = polygon_perimeter(shape.points) / pixels_per_meter
    return result


def build_feature_collection(sheet: Sheet, use_world_coordinates: bool = True,
                             pixels_per_meter: Optional[float] = None) -> Dict[str, Any]:
    """
    Build a GeoJSON FeatureCollection for a sheet.

    Area shapes become closed Polygons, lines and arrows LineStrings, and
    circles, texts, bullets and icons Points. Shapes without a geographic
    meaning (images, callouts, axes) are left out.

    Args:
        sheet: Sheet to export; hidden shapes are skipped
        use_world_coordinates: Use the two-point transform when available
        pixels_per_meter: Overrides the sheet's own calibration

    Returns:
        GeoJSON dict; ``crs`` is set only for world coordinates
    """
    mapper = WorldMapper(sheet, use_world_coordinates,
                         pixels_per_meter=pixels_per_meter)

    features = []
    for shape in sheet.visible_shapes:
        properties: Dict[str, Any] = {
            "id": shape.shape_id,
            "type": shape.kind.value,
            "label": shape.label,
            "color": shape.color,
        }
        if mapper.pixels_per_meter and shape.kind in AREA_KINDS:
            properties.update(_area_properties(shape, mapper.pixels_per_meter))

        geometry = _GEOMETRY_BUILDERS[shape.kind](shape, mapper, properties)
        if geometry is None:
            continue

        features.append({
            "type": "Feature",
            "properties": properties,
            "geometry": geometry,
        })

    crs = None
    if mapper.uses_world_transform:
        crs = {"type": "name", "properties": {"name": WORLD_CRS}}

    return {
        "type": "FeatureCollection",
        "name": sheet.title or "Visual Mapper Export",
        "crs": crs,
        "features": features,
    }


def export_geojson(path: str, sheet: Sheet, **kwargs) -> bool:
    """
    Write a sheet to a GeoJSON file.

    Args:
        path: Output path
        sheet: Sheet to export
        **kwargs: Passed to build_feature_collection

    Returns:
        True if successful
    """
    try:
        with profile_block("geojson_export"):
            data = build_feature_collection(sheet, **kwargs)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

        logger.info(f"Exported {len(data['features'])} features to {path}")
        return True

    except (OSError, ValueError) as e:
        logger.error(f"Error exporting GeoJSON: {e}")
        return False
