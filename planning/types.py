"""
Planning Geometry Types

Immutable value types for scout planning, all in scout image pixel space.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Tuple


class LineHandle(Enum):
    """The two z-range boundary lines."""
    START = "start"
    END = "end"


class FOVEdge(Enum):
    """Edges of the FOV rectangle."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


def round_px(value: float) -> int:
    """Round a pixel coordinate half-up to the nearest integer."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ScoutImageFrame:
    """Pixel extent of a scout image."""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Scout frame must be positive, got {self.width}x{self.height}"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class PlanningLines:
    """Z-range boundary lines (rows of the scout image)."""
    start_y: float
    end_y: float

    @property
    def extent(self) -> float:
        return self.end_y - self.start_y


@dataclass(frozen=True)
class FOVRectangle:
    """Field-of-view box on the scout image."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def with_edge(self, edge: FOVEdge, value: float) -> "FOVRectangle":
        """Return a copy with one edge replaced."""
        field_name = {
            FOVEdge.LEFT: "x_min",
            FOVEdge.RIGHT: "x_max",
            FOVEdge.TOP: "y_min",
            FOVEdge.BOTTOM: "y_max",
        }[edge]
        return replace(self, **{field_name: float(value)})

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def rounded(self) -> "FOVRectangle":
        return FOVRectangle(
            x_min=round_px(self.x_min),
            x_max=round_px(self.x_max),
            y_min=round_px(self.y_min),
            y_max=round_px(self.y_max),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "x_min": self.x_min,
            "x_max": self.x_max,
            "y_min": self.y_min,
            "y_max": self.y_max,
        }


@dataclass(frozen=True)
class PlanningSnapshot:
    """
    Persistable planning record.

    All coordinates are integers; rounding happens when the snapshot is taken,
    never in the live session.

    Attributes:
        start_y: Z start row (top line)
        end_y: Z end row (bottom line)
        frame_height: Scout image height the rows refer to
        fov: FOV box with integer edges
    """
    start_y: int
    end_y: int
    frame_height: int
    fov: FOVRectangle

    @property
    def is_well_formed(self) -> bool:
        """Whether both z-bounds are present and ordered."""
        return (
            self.start_y is not None
            and self.end_y is not None
            and self.frame_height > 0
            and self.start_y < self.end_y
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise using the planning record field names."""
        return {
            "z_pixel_start": self.start_y,
            "z_pixel_end": self.end_y,
            "scout_height_px": self.frame_height,
            "fov": {key: int(value) for key, value in self.fov.to_dict().items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanningSnapshot":
        """
        Parse a planning record.

        Raises:
            KeyError / ValueError / TypeError on malformed input
        """
        fov = data["fov"]
        return cls(
            start_y=int(data["z_pixel_start"]),
            end_y=int(data["z_pixel_end"]),
            frame_height=int(data["scout_height_px"]),
            fov=FOVRectangle(
                x_min=int(fov["x_min"]),
                x_max=int(fov["x_max"]),
                y_min=int(fov["y_min"]),
                y_max=int(fov["y_max"]),
            ),
        )
