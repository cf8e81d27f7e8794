"""Shape model - the annotation records the geometry core operates on."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import uuid

Point = Tuple[float, float]


class ShapeKind(str, Enum):
    """Every kind of annotation the editor can draw."""
    POLYGON = "polygon"
    RECTANGLE = "rectangle"
    SQUARE = "square"
    TRIANGLE = "triangle"
    CIRCLE = "circle"
    ICON = "icon"
    TEXT = "text"
    BULLET = "bullet"
    IMAGE = "image"
    LINE = "line"
    ARROW = "arrow"
    CALLOUT = "callout"
    AXIS = "axis"


# Closed rings that represent a floor area
AREA_KINDS = frozenset({
    ShapeKind.POLYGON, ShapeKind.RECTANGLE, ShapeKind.SQUARE, ShapeKind.TRIANGLE,
})

# Kinds whose vertices and edges act as snap targets
SNAPPABLE_KINDS = frozenset({
    ShapeKind.POLYGON, ShapeKind.RECTANGLE, ShapeKind.SQUARE,
})


@dataclass
class AxisConfig:
    """
    Parameters of an architectural axis grid.

    Attributes:
        spacing_mm: Distance between neighbouring axis lines
        count: Number of lines
        start_label: Label of the first line ("1" or "A")
        length_mm: Length of every line
        both_ends: Put a label bubble at both ends of each line
        reverse: Count labels downwards instead of upwards
    """
    spacing_mm: float = 6000.0
    count: int = 5
    start_label: str = "1"
    length_mm: float = 30000.0
    both_ends: bool = False
    reverse: bool = False

    def to_dict(self) -> dict:
        return {
            "spacing_mm": self.spacing_mm,
            "count": self.count,
            "start_label": self.start_label,
            "length_mm": self.length_mm,
            "both_ends": self.both_ends,
            "reverse": self.reverse,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AxisConfig":
        return cls(
            spacing_mm=data.get("spacing_mm", 6000.0),
            count=data.get("count", 5),
            start_label=data.get("start_label", "1"),
            length_mm=data.get("length_mm", 30000.0),
            both_ends=data.get("both_ends", False),
            reverse=data.get("reverse", False),
        )


@dataclass
class GridConfig:
    """Uniform background grid. Offsets are in pixels, the step in millimetres."""
    visible: bool = False
    size_mm: float = 1000.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    color: str = "#94a3b8"
    opacity: float = 0.5

    def to_dict(self) -> dict:
        return {
            "visible": self.visible,
            "size_mm": self.size_mm,
            "offset_x": self.offset_x,
            "offset_y": self.offset_y,
            "color": self.color,
            "opacity": self.opacity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GridConfig":
        return cls(
            visible=data.get("visible", False),
            size_mm=data.get("size_mm", 1000.0),
            offset_x=data.get("offset_x", 0.0),
            offset_y=data.get("offset_y", 0.0),
            color=data.get("color", "#94a3b8"),
            opacity=data.get("opacity", 0.5),
        )


@dataclass
class Shape:
    """
    A single annotation on a sheet.

    The meaning of ``points`` depends on the kind:

    - polygon, rectangle, square, triangle: ordered ring of vertices
    - circle: [center, edge point]
    - line, arrow: [start, end]
    - icon, bullet: [anchor]; text: [anchor] or a 4-corner box
    - callout: [box anchor, target]
    - axis: [origin, direction point]

    Attributes:
        shape_id: Unique identifier
        kind: Shape kind
        points: Geometry points in pixel space
        color: Display color (hex string)
        label: Human readable label
        area_number: Running number of area shapes
        visible: Hidden shapes are skipped by snapping, hit testing and export
        locked: Locked shapes cannot be picked or snapped to
        axis_config: Only used by axis shapes
        style: Opaque rendering attributes (stroke_width, font_size, ...)
    """
    shape_id: str = ""
    kind: ShapeKind = ShapeKind.POLYGON
    points: List[Point] = field(default_factory=list)
    color: str = "#3b82f6"
    label: str = ""
    area_number: int = 0
    visible: bool = True
    locked: bool = False
    axis_config: Optional[AxisConfig] = None
    style: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.shape_id:
            self.shape_id = str(uuid.uuid4())[:8]
        self.kind = ShapeKind(self.kind)

    @property
    def is_area(self) -> bool:
        return self.kind in AREA_KINDS

    @property
    def is_snappable(self) -> bool:
        return self.kind in SNAPPABLE_KINDS

    @property
    def is_interactive(self) -> bool:
        """Visible and unlocked - the only shapes a pointer can act on."""
        return self.visible and not self.locked

    def style_value(self, key: str, default: Any = None) -> Any:
        """Read a style attribute, treating missing and falsy-None alike."""
        value = self.style.get(key)
        return default if value is None else value

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        result = {
            "shape_id": self.shape_id,
            "kind": self.kind.value,
            "points": [list(p) for p in self.points],
            "color": self.color,
            "label": self.label,
            "area_number": self.area_number,
            "visible": self.visible,
            "locked": self.locked,
            "style": dict(self.style),
        }
        if self.axis_config is not None:
            result["axis_config"] = self.axis_config.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "Shape":
        """
        Deserialize from dictionary.

        Raises:
            ValueError: If the shape kind is unknown
        """
        kind_name = data.get("kind", "polygon")
        try:
            kind = ShapeKind(kind_name)
        except ValueError:
            raise ValueError(f"Unknown shape kind: {kind_name}") from None

        axis_data = data.get("axis_config")
        return cls(
            shape_id=data.get("shape_id", ""),
            kind=kind,
            points=[(float(p[0]), float(p[1])) for p in data.get("points", [])],
            color=data.get("color", "#3b82f6"),
            label=data.get("label", ""),
            area_number=data.get("area_number", 0),
            visible=data.get("visible", True),
            locked=data.get("locked", False),
            axis_config=AxisConfig.from_dict(axis_data) if axis_data else None,
            style=dict(data.get("style", {})),
        )
