"""MIDI/OSC input bindings.

- models: Binding, MidiEvent, OscEvent, RoutedInput
- registry: one binding per target, with settings export/import
- learn: capture the next MIDI message into the registry
- actions: bang actions (navigation, scenes)
- router: match, rescale and dispatch inbound events
"""

from rigbind.core.bindings.actions import (
    ActionRegistry,
    SceneController,
    register_navigation_actions,
    register_scene_actions,
)
from rigbind.core.bindings.learn import LearnSession, LearnStateMachine
from rigbind.core.bindings.models import Binding, MidiEvent, OscEvent, RoutedInput, target_key
from rigbind.core.bindings.registry import SETTINGS_VERSION, BindingRegistry
from rigbind.core.bindings.router import InputRouter, scale_midi, scale_osc

__all__ = [
    "SETTINGS_VERSION",
    "ActionRegistry",
    "Binding",
    "BindingRegistry",
    "InputRouter",
    "LearnSession",
    "LearnStateMachine",
    "MidiEvent",
    "OscEvent",
    "RoutedInput",
    "SceneController",
    "register_navigation_actions",
    "register_scene_actions",
    "scale_midi",
    "scale_osc",
    "target_key",
]
