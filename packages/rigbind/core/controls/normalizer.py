"""Channel type normalization.

Maps free-text channel-type strings from the fixture catalog onto the closed
``ControlId`` vocabulary. Matching precedence is fixed:

1. case-insensitive exact match on a canonical id ("PAN", "finepan")
2. the alias table ("r" -> red, "intensity" -> dimmer, "pan_fine" -> finePan)

Anything else is non-canonical and never matches a control lookup. The alias
table is plain data; extending it never touches dispatch code.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rigbind.core.controls.enums import ControlId

logger = logging.getLogger(__name__)

CHANNEL_TYPE_ALIASES: Mapping[str, ControlId] = {
    # Movement
    "pan_coarse": ControlId.PAN,
    "pan coarse": ControlId.PAN,
    "tilt_coarse": ControlId.TILT,
    "tilt coarse": ControlId.TILT,
    "pan_fine": ControlId.FINE_PAN,
    "fine_pan": ControlId.FINE_PAN,
    "pan fine": ControlId.FINE_PAN,
    "fine pan": ControlId.FINE_PAN,
    "panfine": ControlId.FINE_PAN,
    "tilt_fine": ControlId.FINE_TILT,
    "fine_tilt": ControlId.FINE_TILT,
    "tilt fine": ControlId.FINE_TILT,
    "fine tilt": ControlId.FINE_TILT,
    "tiltfine": ControlId.FINE_TILT,
    # Intensity
    "intensity": ControlId.DIMMER,
    "master": ControlId.DIMMER,
    "dim": ControlId.DIMMER,
    "brightness": ControlId.DIMMER,
    # Colour mixing
    "r": ControlId.RED,
    "g": ControlId.GREEN,
    "b": ControlId.BLUE,
    "w": ControlId.WHITE,
    "a": ControlId.AMBER,
    "ultraviolet": ControlId.UV,
    "ultra_violet": ControlId.UV,
    "c": ControlId.CYAN,
    "m": ControlId.MAGENTA,
    "y": ControlId.YELLOW,
    "color_wheel": ControlId.COLOR_WHEEL,
    "color wheel": ControlId.COLOR_WHEEL,
    "colour_wheel": ControlId.COLOR_WHEEL,
    "colour wheel": ControlId.COLOR_WHEEL,
    "colourwheel": ControlId.COLOR_WHEEL,
    # Beam
    "gobowheel": ControlId.GOBO,
    "gobo_wheel": ControlId.GOBO,
    "gobo wheel": ControlId.GOBO,
    "gobo_rotation": ControlId.GOBO_ROTATION,
    "gobo rotation": ControlId.GOBO_ROTATION,
    "gobo_rot": ControlId.GOBO_ROTATION,
    "rotation": ControlId.GOBO_ROTATION,
    "prism_wheel": ControlId.PRISM,
    "frost_filter": ControlId.FROST,
    "diffusion": ControlId.FROST,
    # Control
    "macros": ControlId.MACRO,
    "effect_speed": ControlId.SPEED,
    "pan_tilt_speed": ControlId.SPEED,
    "lamp_on": ControlId.LAMP,
    "lamp_control": ControlId.LAMP,
    "reset_control": ControlId.RESET,
    "function": ControlId.RESET,
}


def _key(raw: str) -> str:
    return raw.strip().lower()


class ChannelTypeNormalizer:
    """Data-driven partial function from channel-type text to ``ControlId``.

    Example:
        >>> normalizer = ChannelTypeNormalizer()
        >>> normalizer.normalize("Intensity")
        <ControlId.DIMMER: 'dimmer'>
        >>> normalizer.normalize("wibble") is None
        True
    """

    def __init__(self, aliases: Mapping[str, ControlId | str] | None = None) -> None:
        self._canonical: dict[str, ControlId] = {_key(c.value): c for c in ControlId}
        self._aliases: dict[str, ControlId] = {}
        for alias, control in CHANNEL_TYPE_ALIASES.items():
            self.register_alias(alias, control)
        for alias, control in (aliases or {}).items():
            self.register_alias(alias, control)

    def register_alias(self, alias: str, control: ControlId | str) -> None:
        """Add or replace an alias.

        Aliases that collide with a canonical id are ignored because exact
        canonical matches always take precedence.

        Args:
            alias: Free-text channel type (case-insensitive)
            control: Canonical control id or its string value

        Raises:
            ValueError: If control is not a canonical id
        """
        target = control if isinstance(control, ControlId) else self._canonical.get(_key(control))
        if target is None:
            raise ValueError(f"Unknown canonical control id: {control!r}")

        key = _key(alias)
        if key in self._canonical:
            logger.debug("Alias %r shadows canonical id; ignoring", alias)
            return
        self._aliases[key] = target

    def normalize(self, raw: str | None) -> ControlId | None:
        """Normalize a channel type.

        Args:
            raw: Free-text channel type

        Returns:
            Canonical ControlId, or None when the text is not recognised
        """
        if not isinstance(raw, str):
            return None
        key = _key(raw)
        canonical = self._canonical.get(key)
        if canonical is not None:
            return canonical
        return self._aliases.get(key)

    @property
    def aliases(self) -> dict[str, ControlId]:
        """Copy of the current alias table."""
        return dict(self._aliases)


_default_normalizer = ChannelTypeNormalizer()


def default_normalizer() -> ChannelTypeNormalizer:
    """Shared normalizer with the built-in alias table."""
    return _default_normalizer


def normalize_channel_type(raw: str | None) -> ControlId | None:
    """Normalize a channel type using the built-in alias table.

    Args:
        raw: Free-text channel type

    Returns:
        Canonical ControlId, or None when the text is not recognised
    """
    return _default_normalizer.normalize(raw)
