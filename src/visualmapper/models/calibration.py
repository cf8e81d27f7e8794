"""Calibration records: ruler samples and world-coordinate anchors."""

from dataclasses import dataclass
from typing import Optional, Tuple

Point = Tuple[float, float]


@dataclass
class WorldPoint:
    """A real-world coordinate with optional elevation."""
    x: float
    y: float
    z: Optional[float] = None

    def as_tuple(self) -> Point:
        return (self.x, self.y)

    def to_dict(self) -> dict:
        result = {"x": self.x, "y": self.y}
        if self.z is not None:
            result["z"] = self.z
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "WorldPoint":
        z = data.get("z")
        return cls(x=float(data["x"]), y=float(data["y"]),
                   z=float(z) if z is not None else None)


@dataclass
class CoordinateReference:
    """
    One calibration anchor tying an image pixel to a world coordinate.

    Two references with distinct pixels define a similarity transform.
    """
    pixel: Point
    world: WorldPoint
    ref_id: int = 1

    def to_dict(self) -> dict:
        return {
            "pixel": list(self.pixel),
            "world": self.world.to_dict(),
            "ref_id": self.ref_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CoordinateReference":
        px = data["pixel"]
        return cls(
            pixel=(float(px[0]), float(px[1])),
            world=WorldPoint.from_dict(data["world"]),
            ref_id=data.get("ref_id", 1),
        )


@dataclass
class CalibrationSample:
    """A ruler measurement: a pixel length the user says is ``meters`` long."""
    pixels: float
    meters: float

    def to_dict(self) -> dict:
        return {"pixels": self.pixels, "meters": self.meters}

    @classmethod
    def from_dict(cls, data: dict) -> "CalibrationSample":
        return cls(pixels=float(data["pixels"]), meters=float(data["meters"]))
