"""Fixture catalog models.

Read-only view of the externally owned fixture catalog:
- Channel: free-text channel type plus optional explicit DMX address
- Fixture: id, name, start address and ordered channels
- FixtureGroup: named set of fixtures referenced by catalog index
- FixtureCatalog: ordered fixtures plus groups, tolerant of malformed entries
"""

from __future__ import annotations

from rigbind.core.config.fixtures.catalog import (
    DMX_UNIVERSE_SIZE,
    Channel,
    Fixture,
    FixtureCatalog,
    FixtureGroup,
)

__all__ = [
    "DMX_UNIVERSE_SIZE",
    "Channel",
    "Fixture",
    "FixtureCatalog",
    "FixtureGroup",
]
