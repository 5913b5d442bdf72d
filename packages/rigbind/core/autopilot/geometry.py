"""Track geometry.

Pure functions mapping (shape, position, size, centre) to a point on the
pan/tilt pad. Everything is in percent: x grows to the right, y grows
downward, and the output always lies in [0, 100]².

The usable radius shrinks so the path never leaves the pad::

    r = min(size / 2, cx, 100 - cx, cy, 100 - cy, 45)

The centre is preserved over the requested size.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from rigbind.core.autopilot.models import TrackConfig, TrackShape
from rigbind.core.utils.math import clamp, clamp_dmx, lerp

MAX_RADIUS = 45.0

Point = tuple[float, float]

# Per-axis (amplitude, frequency, phase) pairs for the random shape
_RANDOM_X = ((0.7, 2, 0.0), (0.3, 5, 1.3))
_RANDOM_Y = ((0.7, 3, math.pi / 2), (0.3, 7, 0.4))


def _pct(value: float) -> float:
    value = float(value)
    if math.isnan(value):
        return 0.0
    return clamp(value, 0.0, 100.0)


def effective_radius(size: float, center_x: float, center_y: float) -> float:
    """Largest radius that keeps the path inside the pad.

    Args:
        size: Requested diameter in percent
        center_x: Horizontal centre in percent
        center_y: Vertical centre in percent

    Returns:
        Radius in percent, never above 45
    """
    cx, cy = _pct(center_x), _pct(center_y)
    return min(_pct(size) / 2, cx, 100 - cx, cy, 100 - cy, MAX_RADIUS)


def _walk(vertices: Sequence[Point], progress: float) -> Point:
    """Point along a closed polygon with equal-length sides."""
    sides = len(vertices)
    t = progress * sides
    index = min(int(t), sides - 1)
    local = t - index
    (x0, y0), (x1, y1) = vertices[index], vertices[(index + 1) % sides]
    return lerp(x0, x1, local), lerp(y0, y1, local)


def _circle(progress: float, cx: float, cy: float, r: float) -> Point:
    angle = progress * 2 * math.pi - math.pi / 2
    return cx + r * math.cos(angle), cy + r * math.sin(angle)


def _square(progress: float, cx: float, cy: float, r: float) -> Point:
    corners = ((cx - r, cy - r), (cx + r, cy - r), (cx + r, cy + r), (cx - r, cy + r))
    return _walk(corners, progress)


def _triangle(progress: float, cx: float, cy: float, r: float) -> Point:
    # 12, 4 and 8 o'clock
    vertices = tuple(_circle(turn, cx, cy, r) for turn in (0.0, 1 / 3, 2 / 3))
    return _walk(vertices, progress)


def _linear(progress: float, cx: float, cy: float, r: float) -> Point:
    t = progress * 2
    if t < 1:
        return cx - r + t * 2 * r, cy
    return cx + r - (t - 1) * 2 * r, cy


def _figure8(progress: float, cx: float, cy: float, r: float) -> Point:
    half = r / 2
    t = progress * 2
    if t < 1:
        angle = t * 2 * math.pi
        return cx - half + half * math.cos(angle), cy + half * math.sin(angle)
    angle = (t - 1) * 2 * math.pi
    return cx + half - half * math.cos(angle), cy + half * math.sin(angle)


def _random(progress: float, cx: float, cy: float, r: float) -> Point:
    phase = progress * 2 * math.pi
    dx = r * sum(a * math.sin(f * phase + p) for a, f, p in _RANDOM_X)
    dy = r * sum(a * math.sin(f * phase + p) for a, f, p in _RANDOM_Y)
    distance = math.hypot(dx, dy)
    if distance > r > 0:
        dx, dy = dx * r / distance, dy * r / distance
    return cx + dx, cy + dy


_SHAPES = {
    TrackShape.CIRCLE: _circle,
    TrackShape.SQUARE: _square,
    TrackShape.TRIANGLE: _triangle,
    TrackShape.LINEAR: _linear,
    TrackShape.FIGURE8: _figure8,
    TrackShape.RANDOM: _random,
}


def compute_track_point(
    shape: TrackShape | str,
    position: float,
    size: float,
    center_x: float,
    center_y: float,
) -> Point:
    """Point on a track.

    Args:
        shape: Track shape
        position: Progress in percent; 0 and 100 are the same point
        size: Requested diameter in percent
        center_x: Horizontal centre in percent
        center_y: Vertical centre in percent

    Returns:
        (x, y) in [0, 100]²

    Raises:
        ValueError: If shape is not a known TrackShape

    Example:
        >>> compute_track_point("circle", 0, 50, 50, 50)
        (50.0, 25.0)
    """
    shape = TrackShape(shape)
    cx, cy = _pct(center_x), _pct(center_y)
    r = effective_radius(size, cx, cy)
    progress = (_pct(position) / 100) % 1.0

    x, y = _SHAPES[shape](progress, cx, cy, r)
    return clamp(x, 0.0, 100.0), clamp(y, 0.0, 100.0)


def track_point(config: TrackConfig) -> Point:
    """Point on the track described by ``config``."""
    return compute_track_point(
        config.shape, config.position, config.size, config.center_x, config.center_y
    )


def to_pan_tilt(x: float, y: float) -> tuple[int, int]:
    """Convert pad coordinates to DMX pan/tilt.

    The y axis is inverted: the top of the pad is full tilt.

    Args:
        x: Horizontal position in percent
        y: Vertical position in percent

    Returns:
        (pan, tilt) in [0, 255]
    """
    return clamp_dmx(x / 100 * 255), clamp_dmx((100 - y) / 100 * 255)


def sample_track(config: TrackConfig, samples: int = 100) -> np.ndarray:
    """Sample a full lap of a track for previews.

    Positions are spread evenly over [0, 100] inclusive, so closed shapes
    end where they start.

    Args:
        config: Track shape and placement; its position is ignored
        samples: Number of points

    Returns:
        Array of shape (samples, 2) holding x and y in percent
    """
    if samples <= 0:
        return np.empty((0, 2), dtype=float)
    positions = np.linspace(0.0, 100.0, samples)
    return np.array(
        [
            compute_track_point(
                config.shape, position, config.size, config.center_x, config.center_y
            )
            for position in positions
        ],
        dtype=float,
    )
