"""Autopilot playback.

Drives pan/tilt from the track geometry on a repeating scheduler tick. At
most one tick loop runs per player; disabling or closing the player cancels
it before anything else happens.
"""

from __future__ import annotations

import logging

from rigbind.core.autopilot.geometry import to_pan_tilt, track_point
from rigbind.core.autopilot.models import TrackConfig, TrackShape
from rigbind.core.config.models import AutopilotConfig
from rigbind.core.controls.dispatcher import ControlDispatcher
from rigbind.core.controls.enums import ControlId
from rigbind.core.controls.models import DmxWrite
from rigbind.core.scheduling import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


def advance_rate(bpm: float, speed: float) -> float:
    """Track advance in percent per second.

    One lap every 2 s at 120 BPM and speed 50; scales linearly with both.

    Args:
        bpm: Tempo
        speed: Playback speed (50 = 1x)

    Returns:
        Percent of the track per second
    """
    cycles_per_minute = (bpm / 120) * 30 * (speed / 50)
    return cycles_per_minute / 60 * 100


class AutopilotPlayer:
    """Moves the selection along a track.

    Args:
        dispatcher: Receives pan/tilt intents
        scheduler: Drives the tick loop
        config: Tick interval, speed, tempo and auto-play
        track: Initial track shape and placement
    """

    def __init__(
        self,
        dispatcher: ControlDispatcher,
        scheduler: Scheduler,
        config: AutopilotConfig | None = None,
        track: TrackConfig | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.scheduler = scheduler
        config = config or AutopilotConfig()
        self.tick_interval_ms = config.tick_interval_ms
        self.speed = config.speed
        self.bpm = config.bpm
        self.auto_play = config.auto_play
        self.track = track or TrackConfig()
        self._timer: TimerHandle | None = None
        self._last_tick: float | None = None

    @property
    def enabled(self) -> bool:
        return self._timer is not None

    def enable(self) -> None:
        """Start the tick loop and move to the current point immediately.

        Calling this while already enabled does nothing.
        """
        if self._timer is not None:
            return
        self._last_tick = self.scheduler.now()
        self._timer = self.scheduler.call_every(self.tick_interval_ms, self._tick)
        logger.info("Autopilot enabled (%s)", self.track.shape.value)
        self.apply()

    def disable(self) -> None:
        """Cancel the tick loop. Safe to call repeatedly."""
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None
        self._last_tick = None
        logger.info("Autopilot disabled")

    def close(self) -> None:
        self.disable()

    def apply(self) -> list[DmxWrite]:
        """Dispatch pan/tilt for the current track point."""
        pan, tilt = to_pan_tilt(*track_point(self.track))
        writes = self.dispatcher.dispatch(ControlId.PAN, pan)
        writes.extend(self.dispatcher.dispatch(ControlId.TILT, tilt))
        return writes

    def _update(self, **changes: object) -> None:
        self.track = self.track.model_copy(update=changes)
        if self.enabled:
            self.apply()

    def set_shape(self, shape: TrackShape | str) -> None:
        self._update(shape=TrackShape(shape))

    def set_position(self, position: float) -> None:
        self._update(position=float(position) % 100)

    def set_size(self, size: float) -> None:
        self._update(size=float(size))

    def set_center(self, center_x: float, center_y: float) -> None:
        self._update(center_x=float(center_x), center_y=float(center_y))

    def set_speed(self, speed: float) -> None:
        """Change playback speed; picked up by the next tick."""
        self.speed = float(speed)

    def set_bpm(self, bpm: float) -> None:
        self.bpm = float(bpm)

    def set_auto_play(self, auto_play: bool) -> None:
        self.auto_play = auto_play

    def _tick(self) -> None:
        if self._timer is None:
            return
        now = self.scheduler.now()
        elapsed_s = (now - (self._last_tick if self._last_tick is not None else now)) / 1000
        self._last_tick = now

        if self.auto_play and elapsed_s > 0:
            position = (self.track.position + advance_rate(self.bpm, self.speed) * elapsed_s) % 100
            self.track = self.track.model_copy(update={"position": position})
        self.apply()
