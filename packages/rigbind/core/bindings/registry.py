"""Binding registry.

Holds at most one ``Binding`` per target. Several targets may point at the
same physical MIDI control or OSC address; those collisions are reported but
never resolved automatically.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from rigbind.core.bindings.models import Binding, BindingTarget, MidiEvent, target_key
from rigbind.core.utils.math import clamp_dmx

logger = logging.getLogger(__name__)

SETTINGS_VERSION = "1.0.0"


class BindingRegistry:
    """Map of target to physical binding.

    Iteration yields bindings in registration order; replacing a binding
    keeps its original position.

    Example:
        >>> registry = BindingRegistry()
        >>> _ = registry.set(ControlId.DIMMER, Binding(control="dimmer", channel=0, controller=7))
        >>> registry.find_midi(MidiEvent(type="cc", channel=0, controller=7, value=64))
        [Binding(control='dimmer', ...)]
    """

    def __init__(self) -> None:
        self._bindings: dict[str, Binding] = {}

    def set(self, control: BindingTarget, binding: Binding) -> Binding:
        """Store ``binding`` for ``control``, replacing any existing one.

        Args:
            control: Target the binding drives
            binding: Binding to store; its ``control`` is forced to the key

        Returns:
            The stored binding
        """
        key = target_key(control)
        if binding.control != key:
            binding = binding.model_copy(update={"control": key})

        previous = self._bindings.get(key)
        if previous is not None and previous != binding:
            logger.warning(
                "Overwriting binding for '%s' (old=%s, new=%s)",
                key,
                previous.midi_key or previous.osc_address,
                binding.midi_key or binding.osc_address,
            )
        self._bindings[key] = binding
        logger.debug("Registered binding for '%s'", key)
        return binding

    def get(self, control: BindingTarget) -> Binding | None:
        """Get the binding for a target.

        Args:
            control: Target key

        Returns:
            Binding if registered, None otherwise
        """
        return self._bindings.get(target_key(control))

    def remove(self, control: BindingTarget) -> Binding | None:
        """Remove and return the binding for a target, if any."""
        removed = self._bindings.pop(target_key(control), None)
        if removed is not None:
            logger.debug("Removed binding for '%s'", removed.control)
        return removed

    def clear(self) -> None:
        self._bindings.clear()

    def set_range(self, control: BindingTarget, min_value: int, max_value: int) -> Binding | None:
        """Change the output range of an existing binding.

        Bounds outside 0-255 are clamped into range.

        Args:
            control: Target key
            min_value: Output for input 0
            max_value: Output for full-scale input

        Returns:
            Updated binding, or None when the target has no binding
        """
        binding = self.get(control)
        if binding is None:
            logger.debug("No binding for '%s'; range not set", target_key(control))
            return None
        updated = binding.model_copy(
            update={"min_value": clamp_dmx(min_value), "max_value": clamp_dmx(max_value)}
        )
        self._bindings[updated.control] = updated
        return updated

    def set_osc_address(self, control: BindingTarget, address: str | None) -> Binding | None:
        """Attach, replace or clear the OSC address of a target.

        Creates an OSC-only binding when the target has none. Clearing the
        address of an OSC-only binding removes it.

        Args:
            control: Target key
            address: OSC address, or None/blank to clear

        Returns:
            Resulting binding, or None when nothing remains bound
        """
        key = target_key(control)
        address = address.strip() if address else None
        binding = self._bindings.get(key)

        if binding is None:
            if not address:
                return None
            return self.set(key, Binding(control=key, osc_address=address))

        updated = binding.model_copy(update={"osc_address": address or None})
        if not updated.has_midi and updated.osc_address is None:
            self.remove(key)
            return None
        self._bindings[key] = updated
        return updated

    def find_midi(self, event: MidiEvent) -> list[Binding]:
        """Bindings driven by a MIDI event, in registration order."""
        return [binding for binding in self._bindings.values() if binding.matches_midi(event)]

    def find_osc(self, address: str) -> list[Binding]:
        """Bindings whose OSC address equals ``address`` exactly."""
        return [binding for binding in self._bindings.values() if binding.matches_osc(address)]

    def collisions(self) -> dict[str, list[str]]:
        """Physical inputs bound to more than one target.

        Returns:
            Mapping of ``"midi:<channel>:cc|note:<number>"`` or
            ``"osc:<address>"`` to the target keys sharing it
        """
        shared: dict[str, list[str]] = {}
        for binding in self._bindings.values():
            if binding.midi_key is not None:
                shared.setdefault(f"midi:{binding.midi_key}", []).append(binding.control)
            if binding.osc_address is not None:
                shared.setdefault(f"osc:{binding.osc_address}", []).append(binding.control)
        return {key: targets for key, targets in shared.items() if len(targets) > 1}

    def to_dict(self) -> dict[str, Any]:
        """Export as a versioned settings document.

        Format::

            {
                "version": "1.0.0",
                "midiMappings": {"dimmer": {"channel": 0, "controller": 7,
                                            "minValue": 0, "maxValue": 255}},
                "oscAddresses": {"dimmer": "/rig/dimmer"}
            }
        """
        midi: dict[str, dict[str, Any]] = {}
        osc: dict[str, str] = {}
        for binding in self._bindings.values():
            entry: dict[str, Any] = {
                "minValue": binding.min_value,
                "maxValue": binding.max_value,
            }
            if binding.has_midi:
                entry["channel"] = binding.channel
                if binding.controller is not None:
                    entry["controller"] = binding.controller
                else:
                    entry["note"] = binding.note
            midi[binding.control] = entry
            if binding.osc_address is not None:
                osc[binding.control] = binding.osc_address
        return {"version": SETTINGS_VERSION, "midiMappings": midi, "oscAddresses": osc}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BindingRegistry:
        """Build a registry from a settings document.

        Args:
            data: Document produced by ``to_dict``

        Returns:
            Populated registry

        Raises:
            ValueError: If the version or midiMappings key is missing
            ValidationError: If an entry is not a valid binding
        """
        if not data.get("version") or not isinstance(data.get("midiMappings"), dict):
            raise ValueError("Invalid binding settings: 'version' and 'midiMappings' required")
        if data["version"] != SETTINGS_VERSION:
            logger.warning(
                "Binding settings version %s differs from %s", data["version"], SETTINGS_VERSION
            )

        osc = data.get("oscAddresses") or {}
        registry = cls()
        for control, entry in data["midiMappings"].items():
            if not isinstance(entry, dict):
                raise ValueError(f"Invalid binding entry for '{control}': {entry!r}")
            payload = {**entry, "control": control}
            if control in osc:
                payload["oscAddress"] = osc[control]
            registry.set(control, Binding.model_validate(payload))
        for control, address in osc.items():
            if registry.get(control) is None:
                registry.set_osc_address(control, address)
        return registry

    def __iter__(self) -> Iterator[Binding]:
        return iter(list(self._bindings.values()))

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, control: object) -> bool:
        if not isinstance(control, str):
            return False
        return target_key(control) in self._bindings
