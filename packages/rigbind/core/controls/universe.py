"""In-memory DMX universe backed by a numpy buffer."""

from __future__ import annotations

import logging

import numpy as np

from rigbind.core.config.fixtures.catalog import DMX_UNIVERSE_SIZE
from rigbind.core.utils.math import clamp_dmx

logger = logging.getLogger(__name__)


class DmxUniverse:
    """512-channel ``DmxOutput`` implementation.

    Used as the default output of a session and as the DMX collaborator in
    tests. Writes are clamped; out-of-range addresses are ignored.

    Example:
        >>> universe = DmxUniverse()
        >>> universe.set_dmx_channel_value(0, 300)
        >>> universe.get_dmx_channel_value(0)
        255
    """

    def __init__(self) -> None:
        self._values = np.zeros(DMX_UNIVERSE_SIZE, dtype=np.uint8)
        self.write_count = 0

    def set_dmx_channel_value(self, address: int, value: int) -> None:
        if not 0 <= address < DMX_UNIVERSE_SIZE:
            logger.debug("Ignoring write to out-of-range address %d", address)
            return
        self._values[address] = clamp_dmx(value)
        self.write_count += 1

    def get_dmx_channel_value(self, address: int) -> int:
        if not 0 <= address < DMX_UNIVERSE_SIZE:
            return 0
        return int(self._values[address])

    def snapshot(self) -> np.ndarray:
        """Copy of the full universe."""
        return self._values.copy()

    def blackout(self) -> None:
        """Zero every channel."""
        self._values[:] = 0
