"""Label placement inside area polygons."""

import math
from dataclasses import dataclass
from typing import List, Sequence

from visualmapper.config import LABEL_PADDING
from visualmapper.utils.geometry import (
    Point,
    bounding_box,
    centroid,
    point_to_segment_distance,
    polygon_primary_angle,
)


@dataclass
class LabelStats:
    """
    Where and how large to draw a centred area label.

    Attributes:
        anchor: Text centre (polygon centroid)
        rotation: Text rotation in degrees
        max_font_size: Largest font that stays clear of the edges
        safe_width: Usable text box width around the anchor
        safe_height: Usable text box height around the anchor
    """
    anchor: Point
    rotation: float
    max_font_size: float
    safe_width: float
    safe_height: float


def _normalize_half_turn(angle_deg: float) -> float:
    """Fold an angle into [-90, 90]; text reads the same both ways."""
    while angle_deg > 90:
        angle_deg -= 180
    while angle_deg < -90:
        angle_deg += 180
    return angle_deg


def polygon_label_stats(points: Sequence[Point],
                        padding: float = LABEL_PADDING) -> LabelStats:
    """
    Compute label anchor, size limit and rotation for a polygon.

    The safe radius is the centroid's distance to the nearest edge minus
    padding. Boxes clearly taller than wide are rotated -90; all others
    follow the longest edge, with near-horizontal snapped to 0,
    near-vertical to -90, and anything else kept as the edge angle.
    """
    if len(points) < 3:
        return LabelStats(anchor=centroid(points), rotation=0.0,
                          max_font_size=16.0, safe_width=100.0, safe_height=100.0)

    anchor = centroid(points)
    n = len(points)
    min_dist = min(point_to_segment_distance(anchor, points[i], points[(i + 1) % n])
                   for i in range(n))

    box = bounding_box(points)
    if box.height > box.width * 1.2:
        rotation = -90.0
    else:
        angle = _normalize_half_turn(math.degrees(polygon_primary_angle(points)))
        if abs(angle) < 10:
            rotation = 0.0
        elif abs(abs(angle) - 90) < 10:
            rotation = -90.0
        else:
            rotation = angle

    safe_radius = max(0.0, min_dist - padding)
    return LabelStats(
        anchor=anchor,
        rotation=rotation,
        max_font_size=max(8.0, safe_radius * 1.5),
        safe_width=safe_radius * 3,
        safe_height=safe_radius * 1.6,
    )


def wrap_text(text: str, font_size: float, max_width: float) -> List[str]:
    """
    Greedy word wrap using an average glyph width of 0.6 * font_size.

    A single word longer than max_width still gets its own line.
    """
    words = text.split(" ")
    char_width = font_size * 0.6
    lines = []
    current = words[0]

    for word in words[1:]:
        width = (len(current) + 1 + len(word)) * char_width
        if width < max_width:
            current += " " + word
        else:
            lines.append(current)
            current = word
    lines.append(current)

    return lines
