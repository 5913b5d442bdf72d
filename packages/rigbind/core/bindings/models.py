"""Binding and input event models.

A ``Binding`` ties one target (a canonical control id such as ``dimmer``, or
a bang action name such as ``fixture_next``) to a physical MIDI control
and/or an OSC address, plus the output range the input is rescaled into.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rigbind.core.controls.enums import ControlId, MidiMessageType
from rigbind.core.controls.models import DmxWrite

MIDI_CHANNELS = 16
MIDI_DATA_MAX = 127

BindingTarget = ControlId | str


def target_key(target: BindingTarget) -> str:
    """Registry key for a binding target.

    Canonical control ids collapse to their value so ``ControlId.PAN`` and
    ``"pan"`` address the same binding.
    """
    if isinstance(target, ControlId):
        return target.value
    try:
        return ControlId(target).value
    except ValueError:
        return target


class MidiEvent(BaseModel):
    """Decoded MIDI message delivered by the transport.

    Data bytes are not range-checked here; the router clamps them.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: MidiMessageType
    channel: int = Field(default=0, description="MIDI channel 0-15")
    controller: int | None = None
    note: int | None = None
    value: float | None = None
    velocity: float | None = None

    @property
    def data(self) -> float:
        """CC value or note velocity, whichever the message carries."""
        if self.type == MidiMessageType.CC:
            return self.value if self.value is not None else 0
        if self.velocity is not None:
            return self.velocity
        return self.value if self.value is not None else 0


class OscEvent(BaseModel):
    """Decoded OSC message delivered by the transport."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str
    value: float = 0.0
    control_name: str = Field(default="", alias="controlName")


class Binding(BaseModel):
    """Physical input bound to one target.

    Attributes:
        control: Target key (canonical control id value or action name).
        channel: MIDI channel 0-15; required when controller or note is set.
        controller: CC number. Mutually exclusive with ``note``.
        note: Note number. Mutually exclusive with ``controller``.
        min_value: Output for input 0.
        max_value: Output for full-scale input. May be below ``min_value``
            for an inverted response.
        osc_address: Exact OSC address that also drives this target.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    control: str = Field(..., min_length=1)
    channel: int | None = Field(default=None, ge=0, le=MIDI_CHANNELS - 1)
    controller: int | None = Field(default=None, ge=0, le=MIDI_DATA_MAX)
    note: int | None = Field(default=None, ge=0, le=MIDI_DATA_MAX)
    min_value: int = Field(default=0, ge=0, le=255, alias="minValue")
    max_value: int = Field(default=255, ge=0, le=255, alias="maxValue")
    osc_address: str | None = Field(default=None, alias="oscAddress")

    @field_validator("control", mode="before")
    @classmethod
    def _normalize_control(cls, value: Any) -> Any:
        if isinstance(value, str):
            return target_key(value)
        return value

    @field_validator("osc_address", mode="before")
    @classmethod
    def _blank_address(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _validate_midi(self) -> Binding:
        if self.controller is not None and self.note is not None:
            raise ValueError("A binding uses either a controller or a note, not both")
        if self.has_midi and self.channel is None:
            raise ValueError("A MIDI binding requires a channel")
        return self

    @property
    def control_id(self) -> ControlId | None:
        """Canonical control id, or None for action targets."""
        try:
            return ControlId(self.control)
        except ValueError:
            return None

    @property
    def has_midi(self) -> bool:
        return self.controller is not None or self.note is not None

    @property
    def midi_key(self) -> str | None:
        """Physical MIDI control identity, e.g. ``"0:cc:7"``."""
        if self.controller is not None:
            return f"{self.channel}:cc:{self.controller}"
        if self.note is not None:
            return f"{self.channel}:note:{self.note}"
        return None

    def matches_midi(self, event: MidiEvent) -> bool:
        """Whether ``event`` drives this binding.

        Note-Off never matches. Note-On with velocity 0 still matches as a
        Note-On.
        """
        if not self.has_midi or event.channel != self.channel:
            return False
        if self.controller is not None:
            return event.type == MidiMessageType.CC and event.controller == self.controller
        return event.type == MidiMessageType.NOTE_ON and event.note == self.note

    def matches_osc(self, address: str) -> bool:
        return self.osc_address is not None and self.osc_address == address


class RoutedInput(BaseModel):
    """What an inbound event triggered.

    Attributes:
        source: ``"midi"`` or ``"osc"``.
        control: Binding target key.
        value: Rescaled output for control targets, None for actions.
        action: Action name when a bang action fired.
        writes: DMX writes performed by the dispatch.
    """

    model_config = ConfigDict(frozen=True)

    source: Literal["midi", "osc"]
    control: str
    value: int | None = None
    action: str | None = None
    writes: tuple[DmxWrite, ...] = Field(default_factory=tuple)


__all__ = [
    "Binding",
    "BindingTarget",
    "MidiEvent",
    "OscEvent",
    "RoutedInput",
    "target_key",
]
