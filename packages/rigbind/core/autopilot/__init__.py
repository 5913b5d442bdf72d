"""Autopilot track generator and playback."""

from rigbind.core.autopilot.geometry import (
    MAX_RADIUS,
    compute_track_point,
    effective_radius,
    sample_track,
    to_pan_tilt,
    track_point,
)
from rigbind.core.autopilot.models import CLOSED_SHAPES, TrackConfig, TrackShape
from rigbind.core.autopilot.player import AutopilotPlayer, advance_rate

__all__ = [
    "CLOSED_SHAPES",
    "MAX_RADIUS",
    "AutopilotPlayer",
    "TrackConfig",
    "TrackShape",
    "advance_rate",
    "compute_track_point",
    "effective_radius",
    "sample_track",
    "to_pan_tilt",
    "track_point",
]
