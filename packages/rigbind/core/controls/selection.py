"""Selection resolution.

Turns the active selection (channels, fixtures, groups or capabilities) into
the list of fixtures a control intent will reach, each with its
canonical-control to DMX-address map.

Resolution is pure and recomputed on every call. An empty selection in the
active mode always resolves to an empty list, never to "all fixtures".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from rigbind.core.config.fixtures.catalog import Fixture, FixtureGroup
from rigbind.core.controls.enums import ControlId, SelectionMode
from rigbind.core.controls.normalizer import ChannelTypeNormalizer, default_normalizer

logger = logging.getLogger(__name__)


class Selection(BaseModel):
    """Active selection state.

    Only the state for ``mode`` is consulted; the other sets are retained so
    switching modes back and forth keeps the user's previous picks.

    Attributes:
        mode: Active selection mode.
        channels: Selected 0-based DMX addresses.
        fixtures: Selected fixture ids.
        groups: Selected group ids.
        capabilities: Selected capability ids (canonical control ids).
    """

    model_config = ConfigDict(validate_assignment=True)

    mode: SelectionMode = Field(default=SelectionMode.FIXTURES)
    channels: set[int] = Field(default_factory=set)
    fixtures: list[str] = Field(default_factory=list)
    groups: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """Whether the active mode has nothing selected."""
        if self.mode == SelectionMode.CHANNELS:
            return not self.channels
        if self.mode == SelectionMode.FIXTURES:
            return not self.fixtures
        if self.mode == SelectionMode.GROUPS:
            return not self.groups
        return not self.capabilities


@dataclass(frozen=True)
class AffectedFixture:
    """A fixture reached by the current selection.

    Attributes:
        fixture: The catalog fixture.
        channels: Canonical control id to resolved 0-based DMX address.
    """

    fixture: Fixture
    channels: Mapping[ControlId, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "channels", MappingProxyType(dict(self.channels)))

    def __hash__(self) -> int:
        return hash((self.fixture.id, frozenset(self.channels.items())))

    @property
    def fixture_id(self) -> str:
        return self.fixture.id

    def address_for(self, control: ControlId) -> int | None:
        """Resolved address of a control on this fixture, if present."""
        return self.channels.get(control)


class Capability(BaseModel):
    """A canonical control shared by several fixtures."""

    model_config = ConfigDict(frozen=True)

    control: ControlId
    fixture_ids: tuple[str, ...] = Field(default_factory=tuple)


def fixture_channel_map(
    fixture: Fixture,
    *,
    addresses: set[int] | None = None,
    normalizer: ChannelTypeNormalizer | None = None,
) -> dict[ControlId, int]:
    """Map a fixture's normalizable channels to resolved addresses.

    When several channels normalize to the same control the lowest channel
    index wins.

    Args:
        fixture: Fixture to map
        addresses: If given, only channels resolving into this set are kept
        normalizer: Normalizer to use (defaults to the built-in table)

    Returns:
        Canonical control id to 0-based DMX address
    """
    normalizer = normalizer or default_normalizer()
    mapping: dict[ControlId, int] = {}
    for channel, address in fixture.iter_addresses():
        if addresses is not None and address not in addresses:
            continue
        control = normalizer.normalize(channel.type)
        if control is None or control in mapping:
            continue
        mapping[control] = address
    return mapping


def _fixture_controls(fixture: Fixture, normalizer: ChannelTypeNormalizer) -> set[ControlId]:
    controls: set[ControlId] = set()
    for channel, _address in fixture.iter_addresses():
        control = normalizer.normalize(channel.type)
        if control is not None:
            controls.add(control)
    return controls


def derive_capabilities(
    fixtures: Sequence[Fixture],
    *,
    min_fixtures: int = 2,
    normalizer: ChannelTypeNormalizer | None = None,
) -> list[Capability]:
    """Derive the capabilities present on at least ``min_fixtures`` fixtures.

    Args:
        fixtures: Catalog fixtures in order
        min_fixtures: Minimum number of fixtures sharing a control
        normalizer: Normalizer to use (defaults to the built-in table)

    Returns:
        Capabilities in canonical-id declaration order
    """
    normalizer = normalizer or default_normalizer()
    owners: dict[ControlId, list[str]] = {}
    for fixture in fixtures:
        for control in _fixture_controls(fixture, normalizer):
            owners.setdefault(control, []).append(fixture.id)

    return [
        Capability(control=control, fixture_ids=tuple(owners[control]))
        for control in ControlId
        if len(owners.get(control, ())) >= min_fixtures
    ]


def _expand_groups(
    group_ids: Iterable[str],
    fixtures: Sequence[Fixture],
    groups: Sequence[FixtureGroup],
) -> set[int]:
    by_id = {group.id: group for group in groups}
    indices: set[int] = set()
    for group_id in group_ids:
        group = by_id.get(group_id)
        if group is None:
            logger.debug("Ignoring unknown group %r", group_id)
            continue
        for index in group.fixture_indices:
            if 0 <= index < len(fixtures):
                indices.add(index)
            else:
                logger.debug("Group %r references missing fixture index %d", group_id, index)
    return indices


def resolve_selection(
    selection: Selection,
    fixtures: Sequence[Fixture],
    groups: Sequence[FixtureGroup] = (),
    *,
    min_capability_fixtures: int = 2,
    normalizer: ChannelTypeNormalizer | None = None,
) -> list[AffectedFixture]:
    """Resolve the affected fixtures for a selection.

    Args:
        selection: Active selection state
        fixtures: Catalog fixtures in order
        groups: Catalog groups
        min_capability_fixtures: Fixtures required for a capability to be
            selectable
        normalizer: Normalizer to use (defaults to the built-in table)

    Returns:
        Affected fixtures in catalog order, each at most once
    """
    normalizer = normalizer or default_normalizer()
    if selection.is_empty():
        return []

    if selection.mode == SelectionMode.CHANNELS:
        affected: list[AffectedFixture] = []
        for fixture in fixtures:
            if not any(address in selection.channels for _, address in fixture.iter_addresses()):
                continue
            channels = fixture_channel_map(
                fixture, addresses=selection.channels, normalizer=normalizer
            )
            affected.append(AffectedFixture(fixture=fixture, channels=channels))
        return affected

    if selection.mode == SelectionMode.FIXTURES:
        wanted = set(selection.fixtures)
        targets = [fixture for fixture in fixtures if fixture.id in wanted]
    elif selection.mode == SelectionMode.GROUPS:
        indices = _expand_groups(selection.groups, fixtures, groups)
        targets = [fixture for index, fixture in enumerate(fixtures) if index in indices]
    else:
        available = {
            capability.control
            for capability in derive_capabilities(
                fixtures, min_fixtures=min_capability_fixtures, normalizer=normalizer
            )
        }
        selected = {normalizer.normalize(name) for name in selection.capabilities}
        selected &= available
        targets = [
            fixture
            for fixture in fixtures
            if selected & _fixture_controls(fixture, normalizer)
        ]

    return [
        AffectedFixture(
            fixture=fixture, channels=fixture_channel_map(fixture, normalizer=normalizer)
        )
        for fixture in targets
    ]


def _address_range(fixture: Fixture) -> str:
    return f"{fixture.start_address}-{fixture.start_address + len(fixture.channels) - 1}"


def filter_fixtures(fixtures: Sequence[Fixture], text: str) -> list[Fixture]:
    """Filter fixtures by name or address range text ("1-6").

    Blank text returns every fixture.
    """
    needle = text.strip().lower()
    if not needle:
        return list(fixtures)
    return [
        fixture
        for fixture in fixtures
        if needle in fixture.name.lower() or needle in _address_range(fixture)
    ]


def filter_groups(groups: Sequence[FixtureGroup], text: str) -> list[FixtureGroup]:
    """Filter groups by name."""
    needle = text.strip().lower()
    if not needle:
        return list(groups)
    return [group for group in groups if needle in group.name.lower()]


def filter_capabilities(capabilities: Sequence[Capability], text: str) -> list[Capability]:
    """Filter capabilities by control id."""
    needle = text.strip().lower()
    if not needle:
        return list(capabilities)
    return [cap for cap in capabilities if needle in cap.control.value.lower()]


__all__ = [
    "AffectedFixture",
    "Capability",
    "Selection",
    "derive_capabilities",
    "filter_capabilities",
    "filter_fixtures",
    "filter_groups",
    "fixture_channel_map",
    "resolve_selection",
]
