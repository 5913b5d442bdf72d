"""Tests for fixture catalog models."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from rigbind.core.config.fixtures import Channel, Fixture, FixtureCatalog, FixtureGroup


class TestChannel:
    def test_positional_address(self) -> None:
        assert Channel(type="pan").resolve_address(start_address=10, index=2) == 11

    def test_explicit_address_wins(self) -> None:
        channel = Channel.model_validate({"type": "pan", "dmxAddress": 40})

        assert channel.resolve_address(start_address=10, index=2) == 39

    @pytest.mark.parametrize(("start", "index"), [(0, 0), (512, 1), (600, 0)])
    def test_outside_universe(self, start: int, index: int) -> None:
        assert Channel(type="pan").resolve_address(start, index) is None


class TestFixture:
    def test_camel_case_payload(self) -> None:
        fixture = Fixture.model_validate(
            {"id": "F1", "name": "Mover", "startAddress": 5, "channels": [{"type": "Pan"}]}
        )

        assert fixture.start_address == 5
        assert [address for _, address in fixture.iter_addresses()] == [4]

    def test_numeric_id_is_coerced(self) -> None:
        assert Fixture.model_validate({"id": 7}).id == "7"

    def test_addresses_past_the_universe_are_skipped(self) -> None:
        fixture = Fixture.model_validate(
            {"id": "X", "startAddress": 511, "channels": [{"type": "pan"}, {"type": "tilt"}, {"type": "dimmer"}]}
        )

        assert [(c.type, a) for c, a in fixture.iter_addresses()] == [("pan", 510), ("tilt", 511)]

    @pytest.mark.parametrize(
        "raw",
        [
            {"id": "F1", "startAddress": 1, "channels": "pan,tilt"},
            {"id": "F1", "startAddress": 1, "channels": [{"type": 4}]},
            {"id": "F1", "startAddress": 1, "channels": [{"type": "pan", "dmxAddress": "x"}]},
            {"id": "F1", "startAddress": "one", "channels": [{"type": "pan"}]},
        ],
    )
    def test_malformed_channel_data_keeps_fixture_without_channels(
        self, raw: dict, caplog
    ) -> None:
        with caplog.at_level(logging.WARNING):
            fixture = Fixture.from_raw(raw)

        assert fixture.id == "F1"
        assert fixture.channels == ()
        assert "treated as having no channels" in caplog.text

    def test_missing_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            Fixture.from_raw({"name": "nameless", "channels": []})


class TestFixtureCatalog:
    def test_from_raw(self, catalog: FixtureCatalog) -> None:
        assert len(catalog) == 3
        assert [f.id for f in catalog] == ["F1", "F2", "F3"]
        assert catalog.get_group("G1") == FixtureGroup(id="G1", name="Movers", fixture_indices=(0, 1))

    def test_lookup(self, catalog: FixtureCatalog) -> None:
        assert catalog.get_fixture("F2").name == "Mover Right"  # type: ignore[union-attr]
        assert catalog.get_fixture("nope") is None
        assert catalog.get_group("nope") is None

    def test_bare_fixture_list(self) -> None:
        catalog = FixtureCatalog.from_raw([{"id": "A"}, {"id": "B"}])

        assert [f.id for f in catalog.fixtures] == ["A", "B"]
        assert catalog.groups == ()

    def test_unusable_entries_are_dropped(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            catalog = FixtureCatalog.from_raw(
                {
                    "fixtures": [{"id": "A"}, "junk", {"name": "no id"}],
                    "groups": [{"id": "G", "fixtureIndices": [0]}, {"fixtureIndices": "x"}],
                }
            )

        assert [f.id for f in catalog.fixtures] == ["A"]
        assert [g.id for g in catalog.groups] == ["G"]
        assert caplog.text.count("Skipping") == 3

    def test_non_list_sections_are_empty(self) -> None:
        catalog = FixtureCatalog.from_raw({"fixtures": {"id": "A"}, "groups": None})

        assert len(catalog) == 0
        assert catalog.groups == ()
