"""Collaborator protocols.

The DMX transport and the user-notification surface live outside rigbind;
these protocols describe the only calls made on them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rigbind.core.controls.notifications import Notification


@runtime_checkable
class DmxOutput(Protocol):
    """Single-universe DMX sink."""

    def set_dmx_channel_value(self, address: int, value: int) -> None:
        """Write one channel.

        Args:
            address: 0-based channel address in [0, 511]
            value: Channel value in [0, 255]
        """
        ...

    def get_dmx_channel_value(self, address: int) -> int:
        """Read back one channel (verification and capture only)."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """User-facing notification sink."""

    def notify(self, notification: Notification) -> None:
        """Deliver a notification."""
        ...


__all__ = [
    "DmxOutput",
    "Notifier",
]
