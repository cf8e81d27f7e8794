"""
Coordinate mappers shared by the exporters.

Shapes live in image pixel space with Y pointing down. Each output format
wants something else:

- PDF: millimetres on the page, image fitted into the printable area.
- DXF / GeoJSON: world coordinates when the sheet has two references,
  otherwise metres (or raw pixels) with Y flipped up.
- IFC: as DXF, but uncalibrated pixels are read as millimetres and
  elevations default to the floor level.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from visualmapper.core.calibration import SimilarityTransform
from visualmapper.models.calibration import WorldPoint
from visualmapper.models.shapes import Shape, ShapeKind
from visualmapper.models.sheet import Sheet
from visualmapper.utils.geometry import (
    Point,
    centroid,
    polygon_area,
    polygon_perimeter,
)

# Portrait A4 in millimetres
A4_SIZE_MM = (210.0, 297.0)


def page_size_for_image(image_w: float, image_h: float) -> Tuple[float, float]:
    """A4 page size, landscape when the image is wider than tall."""
    short, long = A4_SIZE_MM
    if image_w > image_h:
        return (long, short)
    return (short, long)


@dataclass
class PdfPlacement:
    """
    Where the background image lands on a PDF page.

    Attributes:
        scale: Page millimetres per image pixel
        offset_x: Left edge of the image on the page
        offset_y: Top edge of the image on the page
        width: Drawn image width
        height: Drawn image height
    """
    scale: float
    offset_x: float
    offset_y: float
    width: float
    height: float

    @classmethod
    def fit(cls, image_w: float, image_h: float, page_w: float, page_h: float,
            margin: float = 10.0, header: float = 0.0,
            footer: float = 0.0) -> "PdfPlacement":
        """
        Fit an image into the printable area of a page, centred.

        Args:
            image_w, image_h: Image size in pixels
            page_w, page_h: Page size
            margin: Blank border on all four sides
            header: Extra space reserved above the image
            footer: Extra space reserved below the image

        Raises:
            ValueError: If the image has no area
        """
        if image_w <= 0 or image_h <= 0:
            raise ValueError(f"Image size must be positive, got {image_w}x{image_h}")

        available_w = page_w - 2 * margin
        available_h = page_h - 2 * margin - header - footer
        scale = min(available_w / image_w, available_h / image_h)

        width = image_w * scale
        height = image_h * scale
        return cls(
            scale=scale,
            offset_x=margin + (available_w - width) / 2,
            offset_y=margin + header + (available_h - height) / 2,
            width=width,
            height=height,
        )

    def to_pdf(self, point: Point) -> Point:
        """Map an image pixel to page coordinates."""
        return (self.offset_x + point[0] * self.scale,
                self.offset_y + point[1] * self.scale)

    def scale_length(self, length_px: float) -> float:
        return length_px * self.scale


class WorldMapper:
    """
    Pixel to world mapping for CAD and GIS output.

    Falls through three modes in order: the two-point similarity transform
    (only when ``use_world_coordinates`` is set and the references are
    usable), a pixels-per-meter scale, and raw pixels. The last two flip Y
    so that north points up.
    """

    # Raw pixel units per output unit when no scale is known
    RAW_PIXEL_SCALE = 1.0

    def __init__(self, sheet: Sheet, use_world_coordinates: bool = True,
                 default_z: float = 0.0, pixels_per_meter: Optional[float] = None):
        self.default_z = default_z
        self.pixels_per_meter = (pixels_per_meter if pixels_per_meter is not None
                                 else sheet.pixels_per_meter)
        self.transform: Optional[SimilarityTransform] = (
            sheet.world_transform if use_world_coordinates else None
        )

    @property
    def uses_world_transform(self) -> bool:
        return self.transform is not None

    def to_world(self, point: Point) -> WorldPoint:
        if self.transform is not None:
            world = self.transform.to_world(point)
            z = world.z if world.z else self.default_z
            return WorldPoint(world.x, world.y, z)
        if self.pixels_per_meter:
            return WorldPoint(point[0] / self.pixels_per_meter,
                              -point[1] / self.pixels_per_meter,
                              self.default_z)
        return WorldPoint(point[0] / self.RAW_PIXEL_SCALE,
                          -point[1] / self.RAW_PIXEL_SCALE,
                          self.default_z)

    def to_xy(self, point: Point) -> Point:
        return self.to_world(point).as_tuple()

    def map_points(self, points) -> List[WorldPoint]:
        return [self.to_world(p) for p in points]


@dataclass
class SpaceBoundary:
    """
    Floor-space record for BIM output.

    Attributes:
        shape_id: Source shape
        name: Space name (label, or a generated one)
        long_name: Shape label, possibly empty
        area_number: Room number, 0 when unset
        boundary_mm: Outline in millimetres (world x/y * 1000)
        elevation: Floor elevation in metres
        area_m2: Floor area; 0 when the sheet is uncalibrated
        perimeter_m: Outline length; 0 when the sheet is uncalibrated
        centroid: Mapped centre of the outline
    """
    shape_id: str
    name: str
    long_name: str
    area_number: int
    boundary_mm: List[Point]
    elevation: float
    area_m2: float
    perimeter_m: float
    centroid: WorldPoint


# Area kinds that become IFC spaces
SPACE_KINDS = frozenset({ShapeKind.POLYGON, ShapeKind.RECTANGLE, ShapeKind.SQUARE})


class IfcMapper(WorldMapper):
    """World mapper for IFC: pixels read as millimetres, z at floor level."""

    RAW_PIXEL_SCALE = 1000.0

    def __init__(self, sheet: Sheet, use_world_coordinates: bool = True,
                 floor_elevation: float = 0.0,
                 pixels_per_meter: Optional[float] = None):
        super().__init__(sheet, use_world_coordinates,
                         default_z=floor_elevation,
                         pixels_per_meter=pixels_per_meter)
        self.floor_elevation = floor_elevation

    def to_millimetres(self, point: Point) -> Point:
        world = self.to_world(point)
        return (world.x * 1000, world.y * 1000)

    def space_boundary(self, shape: Shape) -> SpaceBoundary:
        area_m2 = 0.0
        perimeter_m = 0.0
        if self.pixels_per_meter:
            ppm = self.pixels_per_meter
            area_m2 = polygon_area(shape.points) / (ppm * ppm)
            perimeter_m = polygon_perimeter(shape.points) / ppm

        return SpaceBoundary(
            shape_id=shape.shape_id,
            name=shape.label or f"Space_{shape.shape_id}",
            long_name=shape.label,
            area_number=shape.area_number,
            boundary_mm=[self.to_millimetres(p) for p in shape.points],
            elevation=self.floor_elevation,
            area_m2=area_m2,
            perimeter_m=perimeter_m,
            centroid=self.to_world(centroid(shape.points)),
        )

    def space_boundaries(self, sheet: Sheet) -> List[SpaceBoundary]:
        """One space per visible polygon, rectangle or square with an outline."""
        return [self.space_boundary(shape) for shape in sheet.visible_shapes
                if shape.kind in SPACE_KINDS and len(shape.points) >= 3]
