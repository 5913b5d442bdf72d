"""Runtime input routing.

Maps decoded MIDI and OSC events to bindings, rescales the input into each
binding's output range and dispatches the result. Bindings whose target is an
action fire the action instead, once the input crosses the bang threshold.
"""

from __future__ import annotations

import logging
import math
from typing import Literal

from rigbind.core.bindings.actions import ActionRegistry
from rigbind.core.bindings.models import (
    MIDI_DATA_MAX,
    Binding,
    MidiEvent,
    OscEvent,
    RoutedInput,
)
from rigbind.core.bindings.registry import BindingRegistry
from rigbind.core.config.models import RouterConfig
from rigbind.core.controls.dispatcher import ControlDispatcher
from rigbind.core.utils.math import clamp, round_half_up

logger = logging.getLogger(__name__)


def _finite(value: float | None) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return float(value)


def scale_midi(value: float | None, min_value: int, max_value: int) -> int:
    """Rescale a 7-bit MIDI data value into [min_value, max_value].

    The result is floored, so CC 64 on the default 0-255 range gives 128 and
    the endpoints land exactly on min_value and max_value.

    Args:
        value: CC value or note velocity, clamped to [0, 127]
        min_value: Output for 0
        max_value: Output for 127

    Returns:
        ``floor(min + value/127 * (max - min))``
    """
    data = clamp(_finite(value), 0.0, float(MIDI_DATA_MAX))
    span = max_value - min_value
    if data.is_integer():
        return min_value + (int(data) * span) // MIDI_DATA_MAX
    return math.floor(min_value + (data / MIDI_DATA_MAX) * span)


def scale_osc(value: float | None, min_value: int, max_value: int) -> int:
    """Rescale a normalized OSC value into [min_value, max_value].

    Args:
        value: OSC argument, clamped to [0, 1]
        min_value: Output for 0
        max_value: Output for 1

    Returns:
        ``round_half_up(min + value * (max - min))``
    """
    data = clamp(_finite(value), 0.0, 1.0)
    return round_half_up(min_value + data * (max_value - min_value))


class InputRouter:
    """Route inbound events through the binding registry.

    Args:
        registry: Bindings to match against
        dispatcher: Receives control intents
        actions: Bang actions by name
        config: Bang thresholds
    """

    def __init__(
        self,
        registry: BindingRegistry,
        dispatcher: ControlDispatcher,
        actions: ActionRegistry | None = None,
        config: RouterConfig | None = None,
    ) -> None:
        self.registry = registry
        self.dispatcher = dispatcher
        self.actions = actions or ActionRegistry()
        self.config = config or RouterConfig()

    def handle_midi(self, event: MidiEvent) -> list[RoutedInput]:
        """Route a MIDI message.

        Args:
            event: Decoded MIDI message

        Returns:
            One record per binding that fired, in registration order
        """
        routed: list[RoutedInput] = []
        for binding in self.registry.find_midi(event):
            result = self._route(
                binding,
                source="midi",
                scaled=scale_midi(event.data, binding.min_value, binding.max_value),
                bang=_finite(event.data) > self.config.midi_bang_threshold,
            )
            if result is not None:
                routed.append(result)

        if not routed:
            logger.debug("No binding for MIDI %s ch%d", event.type.value, event.channel)
        return routed

    def handle_osc(self, event: OscEvent) -> list[RoutedInput]:
        """Route an OSC message by exact address.

        Args:
            event: Decoded OSC message

        Returns:
            One record per binding that fired, in registration order
        """
        routed: list[RoutedInput] = []
        for binding in self.registry.find_osc(event.address):
            result = self._route(
                binding,
                source="osc",
                scaled=scale_osc(event.value, binding.min_value, binding.max_value),
                bang=_finite(event.value) > self.config.osc_bang_threshold,
            )
            if result is not None:
                routed.append(result)

        if not routed:
            logger.debug("No binding for OSC %s", event.address)
        return routed

    def _route(
        self, binding: Binding, *, source: Literal["midi", "osc"], scaled: int, bang: bool
    ) -> RoutedInput | None:
        control = binding.control_id
        if control is not None:
            writes = self.dispatcher.dispatch(control, scaled)
            logger.debug("%s -> %s=%d (%d write(s))", source, control.value, scaled, len(writes))
            return RoutedInput(
                source=source, control=binding.control, value=scaled, writes=tuple(writes)
            )

        handler = self.actions.resolve(binding.control)
        if handler is None:
            logger.debug("Binding target '%s' is neither a control nor an action", binding.control)
            return None
        if not bang:
            return None
        handler()
        logger.debug("%s -> action '%s'", source, binding.control)
        return RoutedInput(source=source, control=binding.control, action=binding.control)
