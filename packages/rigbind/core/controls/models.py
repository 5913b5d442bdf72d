"""Control intent and DMX write models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from rigbind.core.controls.enums import ControlId


class ControlIntent(BaseModel):
    """An abstract request to set one control on the current selection.

    Attributes:
        control: Canonical control id.
        value: Requested value, typically 0-255. Clamped at dispatch.
    """

    model_config = ConfigDict(frozen=True)

    control: ControlId
    value: float


class DmxWrite(BaseModel):
    """One write performed by the dispatcher."""

    model_config = ConfigDict(frozen=True)

    fixture_id: str
    control: ControlId
    address: int = Field(ge=0, le=511)
    value: int = Field(ge=0, le=255)


__all__ = [
    "ControlIntent",
    "DmxWrite",
]
