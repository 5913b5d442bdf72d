"""Autopilot track configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TrackShape(str, Enum):
    """Parametric paths the autopilot can follow."""

    CIRCLE = "circle"
    SQUARE = "square"
    TRIANGLE = "triangle"
    FIGURE8 = "figure8"
    LINEAR = "linear"
    RANDOM = "random"


CLOSED_SHAPES = frozenset(
    {TrackShape.CIRCLE, TrackShape.SQUARE, TrackShape.TRIANGLE, TrackShape.FIGURE8}
)


class TrackConfig(BaseModel):
    """Shape parameters, all in percent of the pan/tilt pad.

    Values are not range-checked; geometry clamps them.

    Attributes:
        shape: Path shape.
        position: Progress along the path (0-100, wraps).
        size: Requested diameter.
        center_x: Horizontal centre (0 = left).
        center_y: Vertical centre (0 = top).
    """

    model_config = ConfigDict(frozen=True)

    shape: TrackShape = Field(default=TrackShape.CIRCLE)
    position: float = Field(default=0.0)
    size: float = Field(default=50.0)
    center_x: float = Field(default=50.0)
    center_y: float = Field(default=50.0)
