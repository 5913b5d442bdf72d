"""Shared utilities for rigbind."""

from rigbind.core.utils.json import load_json, read_json, write_json
from rigbind.core.utils.math import clamp, clamp_dmx, lerp, round_half_up

__all__ = [
    "clamp",
    "clamp_dmx",
    "lerp",
    "load_json",
    "read_json",
    "round_half_up",
    "write_json",
]
