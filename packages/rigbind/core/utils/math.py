"""Math utilities for common operations."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity.

    Matches the rounding used by lighting consoles and browser UIs
    (``round_half_up(127.5) == 128``, ``round_half_up(-0.5) == 0``) rather
    than Python's banker's rounding.

    Args:
        value: Finite value to round

    Returns:
        Rounded integer
    """
    return math.floor(value + 0.5)


def clamp_dmx(value: float) -> int:
    """Round and clamp any numeric value into the DMX byte range [0, 255].

    Non-finite input never raises: NaN maps to 0, +inf to 255, -inf to 0.

    Args:
        value: Requested channel value

    Returns:
        Integer DMX value
    """
    value = float(value)
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return 255 if value > 0 else 0
    return clamp(round_half_up(value), 0, 255)


def lerp(a: Number, b: Number, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a) + (float(b) - float(a)) * t
