"""Sheet model - one calibrated background with its annotations."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import uuid

from visualmapper.models.shapes import Shape, GridConfig
from visualmapper.models.calibration import CoordinateReference, CalibrationSample


@dataclass
class Sheet:
    """
    A single page of a project.

    Attributes:
        sheet_id: Unique identifier
        name: Tab name
        title: Drawing title (used as export name)
        floor: Floor designation
        image_size: (width, height) of the background in pixels
        shapes: Annotations, in drawing order (last is topmost)
        calibration_data: Ruler samples
        coord_refs: World-coordinate anchors (0, 1 or 2)
        grid_config: Background grid, if any
    """
    sheet_id: str = ""
    name: str = ""
    title: str = ""
    floor: str = ""
    image_size: Tuple[int, int] = (0, 0)
    shapes: List[Shape] = field(default_factory=list)
    calibration_data: List[CalibrationSample] = field(default_factory=list)
    coord_refs: List[CoordinateReference] = field(default_factory=list)
    grid_config: Optional[GridConfig] = None

    def __post_init__(self):
        if not self.sheet_id:
            self.sheet_id = str(uuid.uuid4())[:8]

    @property
    def visible_shapes(self) -> List[Shape]:
        return [s for s in self.shapes if s.visible]

    @property
    def pixels_per_meter(self) -> Optional[float]:
        """Display scale: two-point references first, ruler samples second."""
        # Imported here: core.calibration depends on this package's records
        from visualmapper.core.calibration import resolve_pixels_per_meter
        return resolve_pixels_per_meter(self.coord_refs, self.calibration_data)

    @property
    def world_transform(self):
        """SimilarityTransform from the coordinate references, or None."""
        from visualmapper.core.calibration import SimilarityTransform, active_references
        refs = active_references(self.coord_refs)
        if refs is None:
            return None
        return SimilarityTransform.from_references(*refs)

    def get_shape(self, shape_id: str) -> Optional[Shape]:
        for shape in self.shapes:
            if shape.shape_id == shape_id:
                return shape
        return None

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {
            "sheet_id": self.sheet_id,
            "name": self.name,
            "title": self.title,
            "floor": self.floor,
            "image_size": list(self.image_size),
            "shapes": [s.to_dict() for s in self.shapes],
            "calibration_data": [c.to_dict() for c in self.calibration_data],
            "coord_refs": [r.to_dict() for r in self.coord_refs],
            "grid_config": self.grid_config.to_dict() if self.grid_config else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sheet":
        """Deserialize from dictionary."""
        grid = data.get("grid_config")
        size = data.get("image_size", (0, 0))
        return cls(
            sheet_id=data.get("sheet_id", ""),
            name=data.get("name", ""),
            title=data.get("title", ""),
            floor=data.get("floor", ""),
            image_size=(int(size[0]), int(size[1])),
            shapes=[Shape.from_dict(s) for s in data.get("shapes", [])],
            calibration_data=[CalibrationSample.from_dict(c)
                              for c in data.get("calibration_data", [])],
            coord_refs=[CoordinateReference.from_dict(r)
                        for r in data.get("coord_refs", [])],
            grid_config=GridConfig.from_dict(grid) if grid else None,
        )
