"""Control vocabulary enums.

Closed sets shared by the normalizer, selection resolver, dispatcher and
input bindings.
"""

from enum import Enum


class ControlId(str, Enum):
    """Canonical control identifiers.

    Every free-text channel type in the fixture catalog either normalizes to
    one of these or to nothing at all.
    """

    PAN = "pan"
    TILT = "tilt"
    FINE_PAN = "finePan"
    FINE_TILT = "fineTilt"
    DIMMER = "dimmer"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    WHITE = "white"
    AMBER = "amber"
    UV = "uv"
    CYAN = "cyan"
    MAGENTA = "magenta"
    YELLOW = "yellow"
    GOBO = "gobo"
    GOBO_ROTATION = "goboRotation"
    SHUTTER = "shutter"
    STROBE = "strobe"
    FOCUS = "focus"
    ZOOM = "zoom"
    IRIS = "iris"
    PRISM = "prism"
    COLOR_WHEEL = "colorWheel"
    FROST = "frost"
    MACRO = "macro"
    SPEED = "speed"
    LAMP = "lamp"
    RESET = "reset"


class SelectionMode(str, Enum):
    """How the active selection picks fixtures.

    Attributes:
        CHANNELS: Explicit set of 0-based DMX addresses.
        FIXTURES: Set of fixture ids.
        GROUPS: Set of group ids, expanded by catalog index.
        CAPABILITIES: Set of capability (canonical control) ids.
    """

    CHANNELS = "channels"
    FIXTURES = "fixtures"
    GROUPS = "groups"
    CAPABILITIES = "capabilities"


class LearnStatus(str, Enum):
    """Learn session status."""

    IDLE = "idle"
    LEARNING = "learning"
    SUCCESS = "success"
    TIMEOUT = "timeout"


class MidiMessageType(str, Enum):
    """Decoded MIDI message kinds consumed by the router."""

    CC = "cc"
    NOTE_ON = "noteon"
    NOTE_OFF = "noteoff"


class NotificationLevel(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
