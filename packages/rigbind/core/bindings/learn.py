"""MIDI learn state machine.

Captures the next Control-Change or Note-On message and writes it into the
binding registry for the target being learned::

    idle --start_learn--> learning --CC/Note-On--> success --reset_ms--> idle
                              |                                  ^
                              +--timeout_ms--> timeout --reset_ms+
                              +--cancel_learn--> idle

Only one session exists at a time. Every timer is bound to the session that
scheduled it and does nothing once that session has been replaced.
"""

from __future__ import annotations

import itertools
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rigbind.core.bindings.models import Binding, BindingTarget, MidiEvent, target_key
from rigbind.core.bindings.registry import BindingRegistry
from rigbind.core.config.models import LearnConfig
from rigbind.core.controls.enums import LearnStatus, MidiMessageType, NotificationLevel
from rigbind.core.controls.notifications import Notification, NullNotifier
from rigbind.core.controls.protocols import Notifier
from rigbind.core.scheduling import Scheduler, TimerHandle
from rigbind.core.utils.math import clamp_dmx

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1)


class LearnSession(BaseModel):
    """A single learn attempt.

    Attributes:
        session_id: Unique id of this attempt.
        target: Binding target key being learned.
        status: Current status.
        started_at: Scheduler time (ms) when learning began.
        min_value: Output range written into the captured binding.
        max_value: Output range written into the captured binding.
        binding: Captured binding once status is success.
    """

    model_config = ConfigDict(validate_assignment=True)

    session_id: int = Field(default_factory=lambda: next(_session_ids))
    target: str
    status: LearnStatus = LearnStatus.LEARNING
    started_at: float = 0.0
    min_value: int = Field(default=0, ge=0, le=255)
    max_value: int = Field(default=255, ge=0, le=255)
    binding: Binding | None = None


class LearnStateMachine:
    """Owns the learn session and its timers.

    Args:
        registry: Registry receiving captured bindings
        scheduler: Timer source for timeout and auto-reset
        notifier: Receives lifecycle notifications
        config: Timing and default range
    """

    def __init__(
        self,
        registry: BindingRegistry,
        scheduler: Scheduler,
        notifier: Notifier | None = None,
        config: LearnConfig | None = None,
    ) -> None:
        self.registry = registry
        self.scheduler = scheduler
        self.notifier = notifier or NullNotifier()
        self.config = config or LearnConfig()
        self._session: LearnSession | None = None
        self._timeout_timer: TimerHandle | None = None
        self._reset_timer: TimerHandle | None = None

    @property
    def session(self) -> LearnSession | None:
        """Current session, including one showing success/timeout."""
        return self._session

    @property
    def status(self) -> LearnStatus:
        return self._session.status if self._session is not None else LearnStatus.IDLE

    @property
    def is_learning(self) -> bool:
        return self.status == LearnStatus.LEARNING

    @property
    def target(self) -> str | None:
        """Target currently being learned, if any."""
        if self._session is not None and self._session.status == LearnStatus.LEARNING:
            return self._session.target
        return None

    def _notify(self, level: NotificationLevel, message: str) -> None:
        self.notifier.notify(Notification(level=level, message=message))

    def _cancel_timers(self) -> None:
        for timer in (self._timeout_timer, self._reset_timer):
            if timer is not None:
                timer.cancel()
        self._timeout_timer = None
        self._reset_timer = None

    def start_learn(
        self,
        control: BindingTarget,
        min_value: int | None = None,
        max_value: int | None = None,
    ) -> LearnSession:
        """Begin learning a binding for ``control``.

        Any session in flight is cancelled first, along with its timers.

        Args:
            control: Target to bind
            min_value: Output range minimum (defaults from config), clamped to 0-255
            max_value: Output range maximum (defaults from config), clamped to 0-255

        Returns:
            The new session
        """
        key = target_key(control)
        session = LearnSession(
            target=key,
            started_at=self.scheduler.now(),
            min_value=clamp_dmx(self.config.default_min if min_value is None else min_value),
            max_value=clamp_dmx(self.config.default_max if max_value is None else max_value),
        )

        previous = self.target
        self._cancel_timers()
        if previous is not None:
            logger.info("Cancelled learn for '%s' to start '%s'", previous, key)

        self._session = session
        self._timeout_timer = self.scheduler.call_later(
            self.config.timeout_ms, lambda: self._on_timeout(session)
        )

        logger.info(
            "Learn started for '%s' (range %d-%d)", key, session.min_value, session.max_value
        )
        self._notify(
            NotificationLevel.INFO, f"MIDI Learn started for {key}. Send a MIDI CC or Note."
        )
        return session

    def cancel_learn(self) -> None:
        """Return to idle immediately, discarding any capture in progress."""
        previous = self.target
        self._cancel_timers()
        self._session = None
        if previous is not None:
            logger.info("Learn cancelled for '%s'", previous)
            self._notify(NotificationLevel.INFO, "MIDI Learn cancelled.")

    def handle_midi(self, event: MidiEvent) -> Binding | None:
        """Offer a MIDI message to the active session.

        Args:
            event: Decoded MIDI message

        Returns:
            The captured binding, or None when the message was not consumed
        """
        session = self._session
        if session is None or session.status != LearnStatus.LEARNING:
            return None

        if event.type == MidiMessageType.CC and event.controller is not None:
            physical = {"controller": event.controller}
            described = f"MIDI CC {event.controller}"
        elif event.type == MidiMessageType.NOTE_ON and event.note is not None:
            physical = {"note": event.note}
            described = f"MIDI Note {event.note}"
        else:
            logger.debug("Ignoring %s while learning '%s'", event.type.value, session.target)
            return None

        existing = self.registry.get(session.target)
        try:
            binding = Binding.model_validate(
                {
                    "control": session.target,
                    "channel": event.channel,
                    **physical,
                    "min_value": session.min_value,
                    "max_value": session.max_value,
                    "osc_address": existing.osc_address if existing is not None else None,
                }
            )
        except ValidationError as e:
            logger.warning("Ignoring unbindable MIDI message %s: %s", event, e.errors()[0]["msg"])
            return None

        self._cancel_timers()
        self.registry.set(session.target, binding)
        session.binding = binding
        session.status = LearnStatus.SUCCESS
        self._schedule_reset(session)

        logger.info("Learned '%s' -> %s on channel %d", session.target, described, event.channel)
        self._notify(
            NotificationLevel.SUCCESS,
            f"{session.target} mapped to {described} on CH {event.channel}.",
        )
        return binding

    def forget(self, control: BindingTarget) -> Binding | None:
        """Remove the binding of ``control`` and tell the user."""
        removed = self.registry.remove(control)
        if removed is not None:
            self._notify(NotificationLevel.INFO, f"MIDI mapping removed for {removed.control}.")
        return removed

    def _on_timeout(self, session: LearnSession) -> None:
        if self._session is not session or session.status != LearnStatus.LEARNING:
            return
        self._timeout_timer = None
        session.status = LearnStatus.TIMEOUT
        self._schedule_reset(session)

        logger.info("Learn for '%s' timed out", session.target)
        self._notify(NotificationLevel.WARNING, f"MIDI Learn for {session.target} timed out.")

    def _schedule_reset(self, session: LearnSession) -> None:
        self._reset_timer = self.scheduler.call_later(
            self.config.reset_ms, lambda: self._on_reset(session)
        )

    def _on_reset(self, session: LearnSession) -> None:
        if self._session is not session:
            return
        if session.status in (LearnStatus.SUCCESS, LearnStatus.TIMEOUT):
            self._reset_timer = None
            self._session = None
            logger.debug("Learn status for '%s' reset to idle", session.target)
