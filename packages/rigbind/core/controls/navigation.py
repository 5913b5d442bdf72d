"""Step-through navigation of fixtures and groups.

Bang actions such as ``fixture_next`` move a cursor through the catalog and
replace the selection with the single fixture (or group) under it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from rigbind.core.config.fixtures.catalog import Fixture, FixtureGroup
from rigbind.core.controls.enums import SelectionMode
from rigbind.core.controls.selection import Selection

logger = logging.getLogger(__name__)


class SelectionNavigator:
    """Cycle the selection through fixtures or groups, wrapping at the ends.

    Both cursors start at index 0, so the first ``next`` lands on the second
    entry.

    Args:
        selection: Selection to mutate
        fixtures: Callable returning the current catalog fixtures
        groups: Callable returning the current catalog groups
    """

    def __init__(
        self,
        selection: Selection,
        fixtures: Callable[[], Sequence[Fixture]],
        groups: Callable[[], Sequence[FixtureGroup]],
    ) -> None:
        self.selection = selection
        self._fixtures = fixtures
        self._groups = groups
        self.fixture_index = 0
        self.group_index = 0

    @staticmethod
    def _step(index: int, count: int, delta: int) -> int:
        return (index + delta) % count

    def _move_fixture(self, delta: int) -> Fixture | None:
        fixtures = self._fixtures()
        if not fixtures:
            return None
        self.fixture_index = self._step(self.fixture_index, len(fixtures), delta)
        fixture = fixtures[self.fixture_index]
        self.selection.fixtures = [fixture.id]
        self.selection.mode = SelectionMode.FIXTURES
        logger.debug("Selected fixture %s (index %d)", fixture.id, self.fixture_index)
        return fixture

    def _move_group(self, delta: int) -> FixtureGroup | None:
        groups = self._groups()
        if not groups:
            return None
        self.group_index = self._step(self.group_index, len(groups), delta)
        group = groups[self.group_index]
        self.selection.groups = [group.id]
        self.selection.mode = SelectionMode.GROUPS
        logger.debug("Selected group %s (index %d)", group.id, self.group_index)
        return group

    def next_fixture(self) -> Fixture | None:
        """Select the next fixture. No-op on an empty catalog."""
        return self._move_fixture(1)

    def previous_fixture(self) -> Fixture | None:
        """Select the previous fixture. No-op on an empty catalog."""
        return self._move_fixture(-1)

    def next_group(self) -> FixtureGroup | None:
        return self._move_group(1)

    def previous_group(self) -> FixtureGroup | None:
        return self._move_group(-1)
