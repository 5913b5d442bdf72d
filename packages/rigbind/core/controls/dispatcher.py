"""Control dispatch.

``ControlDispatcher`` is the single path from an abstract control intent to
DMX writes. Every input source (UI gestures, MIDI/OSC bindings, the autopilot
track) goes through it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from rigbind.core.controls.enums import ControlId
from rigbind.core.controls.models import ControlIntent, DmxWrite
from rigbind.core.controls.normalizer import ChannelTypeNormalizer, default_normalizer
from rigbind.core.controls.protocols import DmxOutput
from rigbind.core.controls.selection import AffectedFixture
from rigbind.core.utils.math import clamp_dmx

logger = logging.getLogger(__name__)

AffectedProvider = Callable[[], list[AffectedFixture]]


class ControlDispatcher:
    """Resolve the current selection and write one DMX value per fixture.

    The affected fixtures are pulled from ``affected_provider`` on every
    dispatch, so selection or catalog changes take effect immediately.

    Args:
        output: DMX collaborator
        affected_provider: Callable returning the current affected fixtures
        verify: Read back each write and log mismatches
        normalizer: Used to resolve control names given as strings

    Example:
        >>> dispatcher = ControlDispatcher(universe, lambda: affected)
        >>> dispatcher.dispatch(ControlId.PAN, 300)
        [DmxWrite(fixture_id='F1', control=<ControlId.PAN: 'pan'>, address=1, value=255)]
    """

    def __init__(
        self,
        output: DmxOutput,
        affected_provider: AffectedProvider,
        *,
        verify: bool = False,
        normalizer: ChannelTypeNormalizer | None = None,
    ) -> None:
        self.output = output
        self._affected_provider = affected_provider
        self.verify = verify
        self._normalizer = normalizer or default_normalizer()

    def _resolve_control(self, control: ControlId | str) -> ControlId | None:
        if isinstance(control, ControlId):
            return control
        return self._normalizer.normalize(control)

    def dispatch(self, control: ControlId | str, value: float) -> list[DmxWrite]:
        """Write ``value`` to ``control`` on every affected fixture that has it.

        The value is rounded half-up and clamped to [0, 255]. Fixtures without
        the control are skipped.

        Args:
            control: Canonical control id, or a name normalizable to one
            value: Requested value

        Returns:
            Writes performed, in catalog order
        """
        control_id = self._resolve_control(control)
        if control_id is None:
            logger.debug("Ignoring dispatch to unknown control %r", control)
            return []

        affected = self._affected_provider()
        if not affected:
            logger.debug("Dispatch %s=%r with empty selection; nothing written", control_id, value)
            return []

        dmx_value = clamp_dmx(value)
        writes: list[DmxWrite] = []
        for item in affected:
            address = item.address_for(control_id)
            if address is None:
                continue
            self.output.set_dmx_channel_value(address, dmx_value)
            writes.append(
                DmxWrite(
                    fixture_id=item.fixture_id,
                    control=control_id,
                    address=address,
                    value=dmx_value,
                )
            )

        if self.verify:
            self._verify(writes)

        logger.debug("Dispatched %s=%d to %d channel(s)", control_id.value, dmx_value, len(writes))
        return writes

    def dispatch_intent(self, intent: ControlIntent) -> list[DmxWrite]:
        """Dispatch a single ``ControlIntent``."""
        return self.dispatch(intent.control, intent.value)

    def dispatch_many(self, intents: Iterable[ControlIntent]) -> list[DmxWrite]:
        """Dispatch several intents in order and collect all writes."""
        writes: list[DmxWrite] = []
        for intent in intents:
            writes.extend(self.dispatch_intent(intent))
        return writes

    def _verify(self, writes: list[DmxWrite]) -> None:
        for write in writes:
            actual = self.output.get_dmx_channel_value(write.address)
            if actual != write.value:
                logger.warning(
                    "DMX read-back mismatch at %d: wrote %d, read %r",
                    write.address,
                    write.value,
                    actual,
                )
