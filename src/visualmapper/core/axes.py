"""
Axis system generator.

An axis system is a family of parallel, labelled reference lines
(architectural grid lines A, B, C ... or 1, 2, 3 ...). Sizes are given in
millimetres and converted to pixels with the sheet's calibration; an
uncalibrated sheet uses 1 px per mm so the user still sees something while
drawing.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from visualmapper.config import AXIS_MAX_LINES, AXIS_MIN_SPACING_PX, AXIS_MAX_LENGTH_PX
from visualmapper.models.shapes import AxisConfig
from visualmapper.utils.geometry import Point
from visualmapper.utils.profiling import timed

logger = logging.getLogger("visualmapper.axes")


@dataclass
class AxisLabel:
    """Label bubble text at a line endpoint."""
    position: Point
    text: str


@dataclass
class AxisSystem:
    """Generated axis lines (start, end) and their labels."""
    lines: List[Tuple[Point, Point]] = field(default_factory=list)
    labels: List[AxisLabel] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines


def _parse_int_prefix(text: str) -> Optional[int]:
    """Leading integer of text ("12b" -> 12), or None."""
    text = text.strip()
    end = 1 if text[:1] in "+-" else 0
    while end < len(text) and text[end].isdigit():
        end += 1
    digits = text[:end]
    if not digits.lstrip("+-"):
        return None
    return int(digits)


def next_label(start_label: str, index: int, reverse: bool = False) -> str:
    """
    Label of the index-th axis line.

    Numeric start labels count as integers; anything else advances by
    character code from the first character ("A" -> "B" -> "C").
    An empty start label counts from "1".
    """
    start_label = start_label or "1"
    step = -index if reverse else index
    number = _parse_int_prefix(start_label)
    if number is not None:
        return str(number + step)
    code = ord(start_label[0]) + step
    return chr(code) if 0 <= code <= 0x10FFFF else ""


@timed("axis_generation")
def generate_axis_system(origin: Point,
                         direction_point: Point,
                         config: Optional[AxisConfig],
                         pixels_per_meter: Optional[float]) -> AxisSystem:
    """
    Generate the lines and labels of an axis system.

    Lines run from origin toward direction_point and are stacked along the
    perpendicular (direction angle + 90 degrees), spacing_mm apart. Line
    count is capped at AXIS_MAX_LINES; configurations giving a pixel
    spacing below AXIS_MIN_SPACING_PX or a pixel length above
    AXIS_MAX_LENGTH_PX produce an empty system, as do missing or
    non-positive count, spacing or length.

    Args:
        origin: Start of the first line
        direction_point: Any point along the line direction
        config: Axis parameters
        pixels_per_meter: Calibration scale, None when uncalibrated

    Returns:
        AxisSystem; empty for invalid configurations
    """
    if config is None:
        return AxisSystem()

    if config.count <= 0 or config.spacing_mm <= 0 or config.length_mm <= 0:
        return AxisSystem()

    angle = math.atan2(direction_point[1] - origin[1], direction_point[0] - origin[0])
    perp_angle = angle + math.pi / 2

    px_per_mm = pixels_per_meter / 1000 if pixels_per_meter else 1.0
    length_px = config.length_mm * px_per_mm
    spacing_px = config.spacing_mm * px_per_mm

    if abs(spacing_px) < AXIS_MIN_SPACING_PX or abs(length_px) > AXIS_MAX_LENGTH_PX:
        logger.debug(
            f"Rejected axis config: spacing {spacing_px:.3f}px, length {length_px:.1f}px"
        )
        return AxisSystem()

    dx, dy = math.cos(angle), math.sin(angle)
    pdx, pdy = math.cos(perp_angle), math.sin(perp_angle)

    system = AxisSystem()
    for i in range(min(math.ceil(config.count), AXIS_MAX_LINES)):
        ox = origin[0] + pdx * spacing_px * i
        oy = origin[1] + pdy * spacing_px * i

        start = (ox, oy)
        end = (ox + dx * length_px, oy + dy * length_px)
        system.lines.append((start, end))

        text = next_label(config.start_label, i, config.reverse)
        system.labels.append(AxisLabel(start, text))
        if config.both_ends:
            system.labels.append(AxisLabel(end, text))

    return system


def full_extent_length_mm(image_extent_px: float,
                          pixels_per_meter: Optional[float],
                          coverage: float = 0.9) -> float:
    """Axis length covering most of an image side, in millimetres."""
    px_per_mm = pixels_per_meter / 1000 if pixels_per_meter else 1.0
    return image_extent_px / px_per_mm * coverage
