"""Shared pytest fixtures for rigbind tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from rigbind.core.config.fixtures.catalog import FixtureCatalog
from rigbind.core.controls.notifications import Notification
from rigbind.core.controls.universe import DmxUniverse
from rigbind.core.scheduling import ManualScheduler

# ============================================================================
# Collaborators
# ============================================================================


class RecordingNotifier:
    """Notifier that keeps every notification for assertions."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.notifications]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock starting at 0 ms."""
    return ManualScheduler()


@pytest.fixture
def universe() -> DmxUniverse:
    return DmxUniverse()


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def raw_catalog() -> dict[str, Any]:
    """Two RGB movers, a gobo spot and an unaddressed hazer.

    F1 occupies DMX 1-6 (0-based 0-5), F2 occupies 11-16, F3 occupies 21-25.
    """
    return {
        "fixtures": [
            {
                "id": "F1",
                "name": "Mover Left",
                "startAddress": 1,
                "channels": [
                    {"type": "Dimmer"},
                    {"type": "Pan"},
                    {"type": "Tilt"},
                    {"type": "Red"},
                    {"type": "Green"},
                    {"type": "Blue"},
                ],
            },
            {
                "id": "F2",
                "name": "Mover Right",
                "startAddress": 11,
                "channels": [
                    {"type": "intensity"},
                    {"type": "pan_coarse"},
                    {"type": "tilt_coarse"},
                    {"type": "r"},
                    {"type": "g"},
                    {"type": "b"},
                ],
            },
            {
                "id": "F3",
                "name": "Gobo Spot",
                "startAddress": 21,
                "channels": [
                    {"type": "dimmer"},
                    {"type": "gobo"},
                    {"type": "Gobo Rotation"},
                    {"type": "focus"},
                    {"type": "wibble"},
                ],
            },
        ],
        "groups": [
            {"id": "G1", "name": "Movers", "fixtureIndices": [0, 1]},
            {"id": "G2", "name": "Spots", "fixtureIndices": [2]},
        ],
    }


@pytest.fixture
def catalog(raw_catalog: dict[str, Any]) -> FixtureCatalog:
    return FixtureCatalog.from_raw(raw_catalog)


@pytest.fixture
def f1_catalog() -> FixtureCatalog:
    """Single fixture F1 at start address 1 with dimmer, pan, tilt, red, green, blue."""
    return FixtureCatalog.from_raw(
        {
            "fixtures": [
                {
                    "id": "F1",
                    "name": "Mover",
                    "startAddress": 1,
                    "channels": [
                        {"type": t} for t in ("dimmer", "pan", "tilt", "red", "green", "blue")
                    ],
                }
            ]
        }
    )


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """Scratch directory for config files written by a test."""
    path = tmp_path / "rig"
    path.mkdir()
    return path
