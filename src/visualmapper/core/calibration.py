"""
Coordinate calibration.

Two ways to tie the image to the real world:

- Ruler samples give a scalar scale (pixels per meter), used for area and
  length display.
- Two coordinate references give a full similarity transform (scale,
  rotation, translation, plus interpolated elevation), used whenever real
  world x/y/z coordinates are needed.

When both are present the two-point transform wins.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from visualmapper.models.calibration import (
    CalibrationSample,
    CoordinateReference,
    WorldPoint,
)
from visualmapper.utils.geometry import Point


def scale_from_samples(samples: Sequence[CalibrationSample]) -> Optional[float]:
    """
    Pixels per meter from ruler samples.

    The ratio of the summed pixel lengths to the summed meter lengths, so
    long measurements weigh more than short ones.

    Returns:
        Scale, or None with no samples or a non-positive meter total
    """
    if not samples:
        return None
    total_pixels = sum(s.pixels for s in samples)
    total_meters = sum(s.meters for s in samples)
    if total_meters <= 0:
        return None
    return total_pixels / total_meters


def active_references(
        refs: Sequence[CoordinateReference],
) -> Optional[Tuple[CoordinateReference, CoordinateReference]]:
    """The reference pair, if exactly two exist and their pixels differ."""
    if len(refs) != 2:
        return None
    ref1, ref2 = refs
    if ref1.pixel[0] == ref2.pixel[0] and ref1.pixel[1] == ref2.pixel[1]:
        return None
    return ref1, ref2


@dataclass(frozen=True)
class SimilarityTransform:
    """
    Pixel-to-world similarity transform anchored at a reference pair.

    A pixel point is taken relative to ref1's pixel, rotated by
    ``rotation``, scaled by ``scale`` and offset by ref1's world position.
    """
    ref1: CoordinateReference
    ref2: CoordinateReference
    scale: float
    rotation: float

    @classmethod
    def from_references(cls, ref1: CoordinateReference,
                        ref2: CoordinateReference) -> Optional["SimilarityTransform"]:
        """Build the transform; None if the reference pixels coincide."""
        dpx = ref2.pixel[0] - ref1.pixel[0]
        dpy = ref2.pixel[1] - ref1.pixel[1]
        dist_px = math.hypot(dpx, dpy)
        if dist_px == 0:
            return None

        dwx = ref2.world.x - ref1.world.x
        dwy = ref2.world.y - ref1.world.y
        dist_world = math.hypot(dwx, dwy)

        rotation = math.atan2(dwy, dwx) - math.atan2(dpy, dpx)
        return cls(ref1, ref2, dist_world / dist_px, rotation)

    @property
    def pixels_per_meter(self) -> Optional[float]:
        if self.scale <= 0:
            return None
        return 1.0 / self.scale

    def _elevation(self, rel_x: float, rel_y: float) -> Optional[float]:
        z1 = self.ref1.world.z
        z2 = self.ref2.world.z
        if z1 is not None and z2 is not None:
            dpx = self.ref2.pixel[0] - self.ref1.pixel[0]
            dpy = self.ref2.pixel[1] - self.ref1.pixel[1]
            len_sq = dpx * dpx + dpy * dpy
            t = (rel_x * dpx + rel_y * dpy) / len_sq if len_sq > 0 else 0.0
            return z1 + t * (z2 - z1)
        if z1 is not None:
            return z1
        return z2

    def to_world(self, pixel_point: Point) -> WorldPoint:
        """Map a pixel point to world coordinates."""
        rel_x = pixel_point[0] - self.ref1.pixel[0]
        rel_y = pixel_point[1] - self.ref1.pixel[1]
        cos = math.cos(self.rotation)
        sin = math.sin(self.rotation)

        x = (rel_x * cos - rel_y * sin) * self.scale + self.ref1.world.x
        y = (rel_x * sin + rel_y * cos) * self.scale + self.ref1.world.y
        return WorldPoint(x, y, self._elevation(rel_x, rel_y))

    def to_pixel(self, world_point: WorldPoint) -> Point:
        """Inverse of to_world for x/y; elevation is ignored."""
        if self.scale == 0:
            return self.ref1.pixel
        wx = (world_point.x - self.ref1.world.x) / self.scale
        wy = (world_point.y - self.ref1.world.y) / self.scale
        cos = math.cos(-self.rotation)
        sin = math.sin(-self.rotation)
        return (wx * cos - wy * sin + self.ref1.pixel[0],
                wx * sin + wy * cos + self.ref1.pixel[1])


def transform_point_to_world(pixel_point: Point,
                             ref1: CoordinateReference,
                             ref2: CoordinateReference) -> WorldPoint:
    """
    Map a pixel point to world coordinates using two references.

    Coincident reference pixels cannot define a transform; the origin is
    returned in that case.
    """
    transform = SimilarityTransform.from_references(ref1, ref2)
    if transform is None:
        return WorldPoint(0.0, 0.0)
    return transform.to_world(pixel_point)


def resolve_pixels_per_meter(coord_refs: Sequence[CoordinateReference],
                             samples: Sequence[CalibrationSample]) -> Optional[float]:
    """
    Display scale for a sheet.

    The two-point references take precedence when they span a non-zero
    world distance; ruler samples are the fallback.
    """
    refs = active_references(coord_refs)
    if refs is not None:
        transform = SimilarityTransform.from_references(*refs)
        if transform is not None and transform.pixels_per_meter:
            return transform.pixels_per_meter
    return scale_from_samples(samples)


def pixels_to_meters(length_px: float, pixels_per_meter: float) -> float:
    return length_px / pixels_per_meter


def pixel_area_to_square_meters(area_px: float, pixels_per_meter: float) -> float:
    return area_px / (pixels_per_meter * pixels_per_meter)
