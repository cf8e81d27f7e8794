"""
DXF export of a sheet's annotations.

Writes plain AutoCAD R12 (AC1009) ASCII for maximum compatibility: area
shapes become closed POLYLINEs, lines and axes become LINEs, circles and
bullets become CIRCLEs, and labels and measurements become TEXTs, each on
one of the fixed layers below.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from visualmapper.config import EditorSettings
from visualmapper.core.axes import generate_axis_system
from visualmapper.models.calibration import WorldPoint
from visualmapper.models.shapes import Shape, ShapeKind
from visualmapper.models.sheet import Sheet
from visualmapper.io.coordinates import WorldMapper
from visualmapper.utils.geometry import (
    centroid,
    distance,
    midpoint,
    polygon_area,
    polygon_perimeter,
)
from visualmapper.utils.profiling import profile_block

logger = logging.getLogger("visualmapper.io.dxf")

# Layer name -> AutoCAD color index
LAYERS = {
    "AREAS": 1,       # Red
    "LINES": 3,       # Green
    "AXES": 5,        # Blue
    "LABELS": 7,      # White
    "DIMENSIONS": 4,  # Cyan
}


_SHAPE_LAYERS: Dict[ShapeKind, str] = {
    ShapeKind.POLYGON: "AREAS",
    ShapeKind.RECTANGLE: "AREAS",
    ShapeKind.SQUARE: "AREAS",
    ShapeKind.TRIANGLE: "AREAS",
    ShapeKind.CIRCLE: "AREAS",
    ShapeKind.IMAGE: "AREAS",
    ShapeKind.ICON: "AREAS",
    ShapeKind.LINE: "LINES",
    ShapeKind.ARROW: "LINES",
    ShapeKind.AXIS: "AXES",
    ShapeKind.TEXT: "LABELS",
    ShapeKind.BULLET: "LABELS",
    ShapeKind.CALLOUT: "LABELS",
}


# Padding around the drawing extents, in output units
EXTENTS_MARGIN = 10.0


class HandleCounter:
    """
    Entity handle source for one export.

    Handles are consecutive integers written as uppercase hex. Every export
    creates its own counter, so two exports never share state.
    """

    def __init__(self, start: int = 100):
        self._next = start

    def next(self) -> str:
        handle = format(self._next, "X")
        self._next += 1
        return handle

    @property
    def seed(self) -> str:
        """The next handle that would be issued ($HANDSEED)."""
        return format(self._next, "X")


@dataclass
class DxfOptions:
    """
    Export switches.

    Attributes:
        use_world_coordinates: Use the two-point transform when available
        include_labels: Emit shape labels and axis labels
        include_measurements: Emit area, perimeter and length texts
        layer_prefix: Prepended to every layer name
        pixels_per_meter: Overrides the sheet's own calibration
    """
    use_world_coordinates: bool = True
    include_labels: bool = True
    include_measurements: bool = True
    layer_prefix: str = ""
    pixels_per_meter: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: EditorSettings) -> "DxfOptions":
        return cls(
            use_world_coordinates=settings.use_world_coordinates,
            include_labels=settings.include_labels,
            include_measurements=settings.include_measurements,
            layer_prefix=settings.layer_prefix,
        )


def format_number(n: float) -> str:
    # Adding 0.0 turns -0.0 into 0.0
    return f"{n + 0.0:.6f}"


def escape_text(text: str) -> str:
    """Escape backslashes and turn newlines into DXF paragraph breaks."""
    return text.replace("\\", "\\\\").replace("\n", "\\P")


@dataclass
class _ExportContext:
    """State owned by a single ``DXFExporter.build`` call."""
    options: DxfOptions
    mapper: WorldMapper
    handles: HandleCounter
    ppm: Optional[float]

    def layer(self, name: str) -> str:
        return f"{self.options.layer_prefix}{name}"


class DXFExporter:
    """
    Builds R12 DXF content for a sheet.

    The exporter keeps no per-export state: each ``build`` call creates its
    own context, so one instance can serve concurrent exports.
    """

    def build(self, sheet: Sheet, options: DxfOptions = None) -> str:
        """
        Build the DXF file content.

        Args:
            sheet: Sheet to export; hidden shapes are skipped
            options: Export switches (defaults when omitted)

        Returns:
            DXF text, newline separated
        """
        options = options or DxfOptions()
        mapper = WorldMapper(sheet, options.use_world_coordinates,
                             pixels_per_meter=options.pixels_per_meter)
        ctx = _ExportContext(options=options, mapper=mapper,
                             handles=HandleCounter(), ppm=mapper.pixels_per_meter)

        shapes = sheet.visible_shapes

        entities: List[str] = []
        for shape in shapes:
            writer = self._ENTITY_WRITERS[shape.kind]
            entities.extend(writer(self, ctx, shape))

        if mapper.uses_world_transform:
            entities.extend(self._reference_markers(ctx, sheet))

        # Header goes last so $HANDSEED covers every issued handle
        lines = []
        lines.extend(self._header(ctx, shapes))
        lines.extend(self._tables(ctx))
        lines.extend([
            "0", "SECTION",
            "2", "BLOCKS",
            "0", "ENDSEC",
        ])
        lines.extend([
            "0", "SECTION",
            "2", "ENTITIES",
        ])
        lines.extend(entities)
        lines.extend([
            "0", "ENDSEC",
            "0", "EOF",
        ])

        logger.debug(f"DXF built: {len(shapes)} shapes, "
                     f"handle seed {ctx.handles.seed}")
        return "\n".join(lines) + "\n"

    # ===== Sections =====

    def _header(self, ctx: _ExportContext, shapes: List[Shape]) -> List[str]:
        points = [ctx.mapper.to_xy(p) for shape in shapes for p in shape.points]
        if not points:
            points = [(0.0, 0.0), (100.0, 100.0)]

        min_x = min(p[0] for p in points) - EXTENTS_MARGIN
        min_y = min(p[1] for p in points) - EXTENTS_MARGIN
        max_x = max(p[0] for p in points) + EXTENTS_MARGIN
        max_y = max(p[1] for p in points) + EXTENTS_MARGIN

        return [
            "0", "SECTION",
            "2", "HEADER",
            "9", "$ACADVER",
            "1", "AC1009",  # AutoCAD R12
            "9", "$INSBASE",
            "10", "0.0", "20", "0.0", "30", "0.0",
            "9", "$EXTMIN",
            "10", format_number(min_x), "20", format_number(min_y), "30", "0.0",
            "9", "$EXTMAX",
            "10", format_number(max_x), "20", format_number(max_y), "30", "0.0",
            "9", "$LIMMIN",
            "10", format_number(min_x), "20", format_number(min_y),
            "9", "$LIMMAX",
            "10", format_number(max_x), "20", format_number(max_y),
            "9", "$HANDLING",
            "70", "1",
            "9", "$HANDSEED",
            "5", ctx.handles.seed,
            "0", "ENDSEC",
        ]

    def _tables(self, ctx: _ExportContext) -> List[str]:
        lines = [
            "0", "SECTION",
            "2", "TABLES",
            "0", "TABLE",
            "2", "LTYPE",
            "70", "1",
            "0", "LTYPE",
            "2", "CONTINUOUS",
            "70", "0",
            "3", "Solid line",
            "72", "65",
            "73", "0",
            "40", "0.0",
            "0", "ENDTAB",
            "0", "TABLE",
            "2", "LAYER",
            "70", str(len(LAYERS) + 1),
        ]

        layer_defs = [(ctx.layer(name), color) for name, color in LAYERS.items()]
        layer_defs.append(("0", 7))
        for name, color in layer_defs:
            lines.extend([
                "0", "LAYER",
                "2", name,
                "70", "0",
                "62", str(color),
                "6", "CONTINUOUS",
            ])

        lines.extend([
            "0", "ENDTAB",
            "0", "TABLE",
            "2", "STYLE",
            "70", "1",
            "0", "STYLE",
            "2", "STANDARD",
            "70", "0",
            "40", "0.0",
            "41", "1.0",
            "50", "0.0",
            "71", "0",
            "42", "0.2",
            "3", "txt",
            "4", "",
            "0", "ENDTAB",
            "0", "ENDSEC",
        ])
        return lines

    # ===== Primitive entities =====

    def _line(self, ctx: _ExportContext, p1: WorldPoint, p2: WorldPoint,
              layer: str) -> List[str]:
        return [
            "0", "LINE",
            "5", ctx.handles.next(),
            "8", layer,
            "10", format_number(p1.x),
            "20", format_number(p1.y),
            "30", format_number(p1.z or 0),
            "11", format_number(p2.x),
            "21", format_number(p2.y),
            "31", format_number(p2.z or 0),
        ]

    def _circle(self, ctx: _ExportContext, center: WorldPoint, radius: float,
                layer: str) -> List[str]:
        return [
            "0", "CIRCLE",
            "5", ctx.handles.next(),
            "8", layer,
            "10", format_number(center.x),
            "20", format_number(center.y),
            "30", format_number(center.z or 0),
            "40", format_number(radius),
        ]

    def _text(self, ctx: _ExportContext, pos: WorldPoint, text: str, height: float,
              layer: str) -> List[str]:
        """Centred single-line TEXT (horizontal 1, vertical middle 2)."""
        x, y, z = format_number(pos.x), format_number(pos.y), format_number(pos.z or 0)
        return [
            "0", "TEXT",
            "5", ctx.handles.next(),
            "8", layer,
            "10", x, "20", y, "30", z,
            "40", format_number(height),
            "1", escape_text(text),
            "72", "1",
            "11", x, "21", y, "31", z,
            "73", "2",
        ]

    def _polyline(self, ctx: _ExportContext, points: List[WorldPoint],
                  layer: str) -> List[str]:
        lines = [
            "0", "POLYLINE",
            "5", ctx.handles.next(),
            "8", layer,
            "66", "1",
            "70", "1",  # Closed
        ]
        for p in points:
            lines.extend([
                "0", "VERTEX",
                "5", ctx.handles.next(),
                "8", layer,
                "10", format_number(p.x),
                "20", format_number(p.y),
                "30", "0.0",
            ])
        lines.extend([
            "0", "SEQEND",
            "5", ctx.handles.next(),
            "8", layer,
        ])
        return lines

    # ===== Shape writers =====

    def _write_area(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        if len(shape.points) < 2:
            return []
        lines = self._polyline(ctx, ctx.mapper.map_points(shape.points),
                               ctx.layer(_SHAPE_LAYERS[shape.kind]))

        center = ctx.mapper.to_world(centroid(shape.points))
        if ctx.options.include_labels and shape.label:
            height = 0.3 if ctx.ppm else 20
            lines.extend(self._text(ctx, center, shape.label, height, ctx.layer("LABELS")))

        if ctx.options.include_measurements and ctx.ppm:
            ppm = ctx.ppm
            height = 0.2
            if shape.style_value("show_area", False):
                area_m2 = polygon_area(shape.points) / (ppm * ppm)
                pos = WorldPoint(center.x, center.y - height * 2, 0.0)
                lines.extend(self._text(ctx, pos, f"{area_m2:.2f} m2", height,
                                        ctx.layer("DIMENSIONS")))
            if shape.style_value("show_perimeter", False):
                perimeter_m = polygon_perimeter(shape.points) / ppm
                pos = WorldPoint(center.x, center.y - height * 4, 0.0)
                lines.extend(self._text(ctx, pos, f"P: {perimeter_m:.2f} m", height,
                                        ctx.layer("DIMENSIONS")))
        return lines

    def _write_segment(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        if len(shape.points) < 2:
            return []
        start, end = shape.points[0], shape.points[1]
        lines = self._line(ctx, ctx.mapper.to_world(start), ctx.mapper.to_world(end),
                           ctx.layer(_SHAPE_LAYERS[shape.kind]))

        if (ctx.options.include_measurements and ctx.ppm
                and shape.kind == ShapeKind.LINE):
            length_m = distance(start, end) / ctx.ppm
            pos = ctx.mapper.to_world(midpoint(start, end))
            lines.extend(self._text(ctx, pos, f"{length_m:.2f} m", 0.15,
                                    ctx.layer("DIMENSIONS")))
        return lines

    def _write_circle(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        if len(shape.points) < 2:
            return []
        center = ctx.mapper.to_world(shape.points[0])
        edge = ctx.mapper.to_world(shape.points[1])
        radius = distance(center.as_tuple(), edge.as_tuple())
        return self._circle(ctx, center, radius, ctx.layer(_SHAPE_LAYERS[shape.kind]))

    def _write_text(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        if not shape.points or not shape.label:
            return []
        pos = ctx.mapper.to_world(shape.points[0])
        height = (shape.style_value("font_size") or 24) / (ctx.ppm or 100)
        return self._text(ctx, pos, shape.label, height, ctx.layer("LABELS"))

    def _write_bullet(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        if not shape.points:
            return []
        pos = ctx.mapper.to_world(shape.points[0])
        font_size = shape.style_value("font_size") or 24
        scale = ctx.ppm or 100
        lines = self._circle(ctx, pos, (font_size / 2) / scale,
                             ctx.layer(_SHAPE_LAYERS[shape.kind]))

        bullet_label = shape.style_value("bullet_label", "")
        if ctx.options.include_labels and bullet_label:
            lines.extend(self._text(ctx, pos, str(bullet_label), (font_size * 0.6) / scale,
                                    ctx.layer("LABELS")))
        return lines

    def _write_axis(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        if len(shape.points) < 2 or shape.axis_config is None:
            return []
        system = generate_axis_system(shape.points[0], shape.points[1],
                                      shape.axis_config, ctx.ppm)
        lines = []
        for p1, p2 in system.lines:
            lines.extend(self._line(ctx, ctx.mapper.to_world(p1), ctx.mapper.to_world(p2),
                                    ctx.layer("AXES")))

        if ctx.options.include_labels:
            height = 0.2 if ctx.ppm else 15
            for label in system.labels:
                lines.extend(self._text(ctx, ctx.mapper.to_world(label.position),
                                        label.text, height, ctx.layer("LABELS")))
        return lines

    def _write_nothing(self, ctx: _ExportContext, shape: Shape) -> List[str]:
        return []

    _ENTITY_WRITERS: Dict[ShapeKind,
                          Callable[["DXFExporter", _ExportContext, Shape], List[str]]] = {
        ShapeKind.POLYGON: _write_area,
        ShapeKind.RECTANGLE: _write_area,
        ShapeKind.SQUARE: _write_area,
        ShapeKind.TRIANGLE: _write_area,
        ShapeKind.LINE: _write_segment,
        ShapeKind.ARROW: _write_segment,
        ShapeKind.CIRCLE: _write_circle,
        ShapeKind.TEXT: _write_text,
        ShapeKind.BULLET: _write_bullet,
        ShapeKind.AXIS: _write_axis,
        # Raster and screen-only annotations have no CAD counterpart
        ShapeKind.ICON: _write_nothing,
        ShapeKind.IMAGE: _write_nothing,
        ShapeKind.CALLOUT: _write_nothing,
    }

    def _reference_markers(self, ctx: _ExportContext, sheet: Sheet) -> List[str]:
        """Small circle plus world-coordinate text at each reference pixel."""
        lines = []
        layer = ctx.layer("DIMENSIONS")
        for ref in sheet.coord_refs:
            pos = ctx.mapper.to_world(ref.pixel)
            lines.extend(self._circle(ctx, pos, 0.5, layer))
            text = f"REF{ref.ref_id}: ({ref.world.x:.3f}, {ref.world.y:.3f})"
            lines.extend(self._text(ctx, WorldPoint(pos.x + 0.6, pos.y, 0.0), text, 0.2, layer))
        return lines


def export_dxf(path: str, sheet: Sheet, **kwargs) -> bool:
    """
    Write a sheet to a DXF file.

    Args:
        path: Output path
        sheet: Sheet to export
        **kwargs: DxfOptions fields

    Returns:
        True if successful
    """
    try:
        options = DxfOptions(**kwargs)
        with profile_block("dxf_export"):
            content = DXFExporter().build(sheet, options)

        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

        logger.info(f"Exported DXF to {path}")
        return True

    except (OSError, ValueError) as e:
        logger.error(f"Error exporting DXF: {e}")
        return False
