"""Control resolution and dispatch.

Turns abstract control intents into DMX writes:
- normalizer: free-text channel types to canonical ``ControlId``
- selection: active selection to affected fixtures
- dispatcher: clamped DMX writes for each affected fixture
- navigation: fixture/group step-through
- universe: in-memory DMX output
"""

from __future__ import annotations

from rigbind.core.controls.dispatcher import ControlDispatcher
from rigbind.core.controls.enums import (
    ControlId,
    LearnStatus,
    MidiMessageType,
    NotificationLevel,
    SelectionMode,
)
from rigbind.core.controls.models import ControlIntent, DmxWrite
from rigbind.core.controls.navigation import SelectionNavigator
from rigbind.core.controls.normalizer import (
    CHANNEL_TYPE_ALIASES,
    ChannelTypeNormalizer,
    normalize_channel_type,
)
from rigbind.core.controls.notifications import LoggingNotifier, Notification, NullNotifier
from rigbind.core.controls.protocols import DmxOutput, Notifier
from rigbind.core.controls.selection import (
    AffectedFixture,
    Capability,
    Selection,
    derive_capabilities,
    filter_capabilities,
    filter_fixtures,
    filter_groups,
    fixture_channel_map,
    resolve_selection,
)
from rigbind.core.controls.universe import DmxUniverse

__all__ = [
    "CHANNEL_TYPE_ALIASES",
    "AffectedFixture",
    "Capability",
    "ChannelTypeNormalizer",
    "ControlDispatcher",
    "ControlId",
    "ControlIntent",
    "DmxOutput",
    "DmxUniverse",
    "DmxWrite",
    "LearnStatus",
    "LoggingNotifier",
    "MidiMessageType",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "NullNotifier",
    "Selection",
    "SelectionMode",
    "SelectionNavigator",
    "derive_capabilities",
    "filter_capabilities",
    "filter_fixtures",
    "filter_groups",
    "fixture_channel_map",
    "normalize_channel_type",
    "resolve_selection",
]
