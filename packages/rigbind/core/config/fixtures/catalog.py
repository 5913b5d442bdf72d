"""Fixture catalog read models.

The catalog is owned by an external editor; rigbind only reads it. Raw
catalog payloads are camelCase (``startAddress``, ``dmxAddress``,
``fixtureIndices``) and may be partially broken, so construction from raw
data is tolerant: a fixture with malformed channel data is kept but treated
as having no channels.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DMX_UNIVERSE_SIZE = 512


class Channel(BaseModel):
    """A single DMX channel of a fixture."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = Field(..., description="Free-text channel type (e.g. 'Pan', 'intensity')")
    dmx_address: int | None = Field(
        default=None,
        alias="dmxAddress",
        description="Explicit 1-based DMX address overriding the positional one",
    )

    def resolve_address(self, start_address: int, index: int) -> int | None:
        """Resolve the 0-based DMX address of this channel.

        Args:
            start_address: 1-based start address of the owning fixture
            index: 0-based position of the channel within the fixture

        Returns:
            Address in [0, 511], or None when it falls outside the universe
        """
        if self.dmx_address is not None:
            address = self.dmx_address - 1
        else:
            address = start_address + index - 1

        if 0 <= address < DMX_UNIVERSE_SIZE:
            return address
        return None


class Fixture(BaseModel):
    """A controllable device occupying a DMX range from its start address."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique fixture identifier")
    name: str = Field(default="", description="Display name")
    start_address: int = Field(default=1, alias="startAddress", description="1-based start")
    channels: tuple[Channel, ...] = Field(default_factory=tuple)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    def iter_addresses(self) -> Iterator[tuple[Channel, int]]:
        """Yield (channel, resolved 0-based address), skipping unresolvable channels."""
        for index, channel in enumerate(self.channels):
            address = channel.resolve_address(self.start_address, index)
            if address is not None:
                yield channel, address

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> Fixture:
        """Build a fixture from a raw catalog entry.

        Malformed channel data (channels not a list, a channel without a
        string type, a non-numeric address or start address) yields a
        fixture with no channels instead of an error.

        Args:
            raw: Raw catalog entry

        Returns:
            Validated Fixture

        Raises:
            ValidationError: If the entry has no usable id
        """
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "Malformed fixture %r treated as having no channels: %s",
                raw.get("id"),
                e.errors()[0]["msg"] if e.errors() else e,
            )

        stripped = {key: value for key, value in raw.items() if key not in ("channels",)}
        stripped.pop("startAddress", None)
        stripped.pop("start_address", None)
        return cls.model_validate(stripped)


class FixtureGroup(BaseModel):
    """A named, user-defined set of fixtures referenced by catalog index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(default="")
    fixture_indices: tuple[int, ...] = Field(default_factory=tuple, alias="fixtureIndices")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class FixtureCatalog(BaseModel):
    """Ordered fixtures plus the groups that reference them."""

    model_config = ConfigDict(frozen=True)

    fixtures: tuple[Fixture, ...] = Field(default_factory=tuple)
    groups: tuple[FixtureGroup, ...] = Field(default_factory=tuple)

    @classmethod
    def from_raw(cls, data: dict[str, Any] | list[Any]) -> FixtureCatalog:
        """Build a catalog from raw payload, dropping unusable entries.

        Args:
            data: Either ``{"fixtures": [...], "groups": [...]}`` or a bare
                  list of fixtures

        Returns:
            FixtureCatalog
        """
        if isinstance(data, list):
            raw_fixtures: Any = data
            raw_groups: Any = []
        else:
            raw_fixtures = data.get("fixtures", [])
            raw_groups = data.get("groups", [])

        fixtures: list[Fixture] = []
        for entry in raw_fixtures if isinstance(raw_fixtures, list) else []:
            if not isinstance(entry, dict):
                logger.warning("Skipping non-object fixture entry: %r", entry)
                continue
            try:
                fixtures.append(Fixture.from_raw(entry))
            except ValidationError:
                logger.warning("Skipping fixture without a usable id: %r", entry)

        groups: list[FixtureGroup] = []
        for entry in raw_groups if isinstance(raw_groups, list) else []:
            try:
                groups.append(FixtureGroup.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed group entry: %r", entry)

        return cls(fixtures=tuple(fixtures), groups=tuple(groups))

    def get_fixture(self, fixture_id: str) -> Fixture | None:
        """Get a fixture by id.

        Args:
            fixture_id: Fixture identifier

        Returns:
            Fixture if found, None otherwise
        """
        return next((f for f in self.fixtures if f.id == fixture_id), None)

    def get_group(self, group_id: str) -> FixtureGroup | None:
        """Get a group by id."""
        return next((g for g in self.groups if g.id == group_id), None)

    def __iter__(self):  # type: ignore[override]
        """Iterate over fixtures in catalog order."""
        return iter(self.fixtures)

    def __len__(self) -> int:
        return len(self.fixtures)
