"""Tests for ControlDispatcher."""

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from rigbind.core.config.fixtures.catalog import FixtureCatalog
from rigbind.core.controls.dispatcher import ControlDispatcher
from rigbind.core.controls.enums import ControlId, SelectionMode
from rigbind.core.controls.models import ControlIntent, DmxWrite
from rigbind.core.controls.selection import Selection, resolve_selection
from rigbind.core.controls.universe import DmxUniverse


def _dispatcher(
    universe: DmxUniverse, catalog: FixtureCatalog, selection: Selection, **kwargs
) -> ControlDispatcher:
    return ControlDispatcher(
        universe,
        lambda: resolve_selection(selection, catalog.fixtures, catalog.groups),
        **kwargs,
    )


class TestDispatch:
    """Intent to DMX write."""

    def test_pan_300_on_f1_writes_255(
        self, universe: DmxUniverse, f1_catalog: FixtureCatalog
    ) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]))

        writes = dispatcher.dispatch("pan", 300)

        assert writes == [DmxWrite(fixture_id="F1", control=ControlId.PAN, address=1, value=255)]
        assert universe.get_dmx_channel_value(1) == 255

    def test_nothing_else_is_written(
        self, universe: DmxUniverse, f1_catalog: FixtureCatalog
    ) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]))

        dispatcher.dispatch(ControlId.RED, 200)

        snapshot = universe.snapshot()
        assert snapshot[3] == 200
        assert np.count_nonzero(snapshot) == 1
        assert universe.write_count == 1

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(-10, 0), (0, 0), (12.5, 13), (127.49, 127), (254.5, 255), (1e9, 255), (math.nan, 0)],
    )
    def test_values_are_rounded_and_clamped(
        self,
        universe: DmxUniverse,
        f1_catalog: FixtureCatalog,
        value: float,
        expected: int,
    ) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]))

        (write,) = dispatcher.dispatch(ControlId.DIMMER, value)

        assert write.value == expected
        assert universe.get_dmx_channel_value(0) == expected

    def test_one_write_per_fixture_that_has_the_control(
        self, universe: DmxUniverse, catalog: FixtureCatalog
    ) -> None:
        selection = Selection(mode=SelectionMode.GROUPS, groups=["G1", "G2"])
        dispatcher = _dispatcher(universe, catalog, selection)

        pan = dispatcher.dispatch(ControlId.PAN, 64)
        dimmer = dispatcher.dispatch(ControlId.DIMMER, 255)

        assert [(w.fixture_id, w.address) for w in pan] == [("F1", 1), ("F2", 11)]
        assert [(w.fixture_id, w.address) for w in dimmer] == [("F1", 0), ("F2", 10), ("F3", 20)]

    def test_fixture_without_control_is_skipped(
        self, universe: DmxUniverse, catalog: FixtureCatalog
    ) -> None:
        dispatcher = _dispatcher(universe, catalog, Selection(fixtures=["F3"]))

        assert dispatcher.dispatch(ControlId.RED, 100) == []
        assert universe.write_count == 0

    def test_string_names_are_normalized(
        self, universe: DmxUniverse, f1_catalog: FixtureCatalog
    ) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]))

        (write,) = dispatcher.dispatch("Intensity", 90)

        assert write.control is ControlId.DIMMER
        assert write.address == 0


class TestNoOps:
    def test_empty_selection_writes_nothing(
        self, universe: DmxUniverse, catalog: FixtureCatalog, caplog
    ) -> None:
        dispatcher = _dispatcher(universe, catalog, Selection())

        with caplog.at_level(logging.DEBUG, logger="rigbind.core.controls.dispatcher"):
            assert dispatcher.dispatch(ControlId.DIMMER, 255) == []

        assert universe.write_count == 0
        assert "empty selection" in caplog.text

    def test_unknown_control_writes_nothing(
        self, universe: DmxUniverse, f1_catalog: FixtureCatalog
    ) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]))

        assert dispatcher.dispatch("wibble", 255) == []
        assert universe.write_count == 0

    def test_selection_changes_apply_on_next_dispatch(
        self, universe: DmxUniverse, catalog: FixtureCatalog
    ) -> None:
        selection = Selection(fixtures=["F1"])
        dispatcher = _dispatcher(universe, catalog, selection)

        dispatcher.dispatch(ControlId.PAN, 10)
        selection.fixtures = ["F2"]
        dispatcher.dispatch(ControlId.PAN, 20)

        assert universe.get_dmx_channel_value(1) == 10
        assert universe.get_dmx_channel_value(11) == 20


class TestIntents:
    def test_dispatch_many(self, universe: DmxUniverse, f1_catalog: FixtureCatalog) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]))

        writes = dispatcher.dispatch_many(
            [
                ControlIntent(control=ControlId.PAN, value=100),
                ControlIntent(control=ControlId.TILT, value=150),
            ]
        )

        assert [(w.control, w.value) for w in writes] == [
            (ControlId.PAN, 100),
            (ControlId.TILT, 150),
        ]


class _StuckOutput:
    """Output that drops every write."""

    def set_dmx_channel_value(self, address: int, value: int) -> None:
        return None

    def get_dmx_channel_value(self, address: int) -> int:
        return 0


class TestVerify:
    def test_mismatch_is_logged(self, f1_catalog: FixtureCatalog, caplog) -> None:
        selection = Selection(fixtures=["F1"])
        dispatcher = ControlDispatcher(
            _StuckOutput(),
            lambda: resolve_selection(selection, f1_catalog.fixtures),
            verify=True,
        )

        with caplog.at_level(logging.WARNING):
            writes = dispatcher.dispatch(ControlId.PAN, 200)

        assert len(writes) == 1
        assert "read-back mismatch" in caplog.text

    def test_matching_readback_is_silent(
        self, universe: DmxUniverse, f1_catalog: FixtureCatalog, caplog
    ) -> None:
        dispatcher = _dispatcher(universe, f1_catalog, Selection(fixtures=["F1"]), verify=True)

        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(ControlId.PAN, 200)

        assert "mismatch" not in caplog.text
