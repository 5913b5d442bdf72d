"""Tests for autopilot playback."""

from __future__ import annotations

import pytest

from rigbind.core.autopilot.models import TrackConfig, TrackShape
from rigbind.core.autopilot.player import AutopilotPlayer, advance_rate
from rigbind.core.config.fixtures.catalog import FixtureCatalog
from rigbind.core.config.models import AutopilotConfig
from rigbind.core.controls.dispatcher import ControlDispatcher
from rigbind.core.controls.enums import ControlId
from rigbind.core.controls.selection import Selection, resolve_selection
from rigbind.core.controls.universe import DmxUniverse
from rigbind.core.scheduling import ManualScheduler

PAN, TILT = 1, 2


@pytest.fixture
def player(
    universe: DmxUniverse, f1_catalog: FixtureCatalog, scheduler: ManualScheduler
) -> AutopilotPlayer:
    selection = Selection(fixtures=["F1"])
    dispatcher = ControlDispatcher(universe, lambda: resolve_selection(selection, f1_catalog.fixtures))
    return AutopilotPlayer(dispatcher, scheduler)


class TestAdvanceRate:
    def test_default_is_half_a_lap_per_second(self) -> None:
        assert advance_rate(120, 50) == pytest.approx(50.0)

    def test_scales_with_tempo_and_speed(self) -> None:
        assert advance_rate(60, 50) == pytest.approx(25.0)
        assert advance_rate(120, 100) == pytest.approx(100.0)
        assert advance_rate(120, 0) == 0


class TestEnableDisable:
    def test_enable_applies_immediately(self, player: AutopilotPlayer, universe: DmxUniverse) -> None:
        player.enable()

        assert player.enabled
        assert universe.get_dmx_channel_value(PAN) == 128
        assert universe.get_dmx_channel_value(TILT) == 191

    def test_enable_twice_runs_one_loop(self, player: AutopilotPlayer, scheduler: ManualScheduler) -> None:
        player.enable()
        player.enable()

        assert scheduler.pending == 1

    def test_disable_cancels_tick(
        self, player: AutopilotPlayer, scheduler: ManualScheduler, universe: DmxUniverse
    ) -> None:
        player.enable()
        scheduler.advance(100)
        player.disable()
        writes = universe.write_count

        scheduler.advance(1_000)

        assert not player.enabled
        assert scheduler.pending == 0
        assert universe.write_count == writes

    def test_close_is_idempotent(self, player: AutopilotPlayer, scheduler: ManualScheduler) -> None:
        player.enable()
        player.close()
        player.close()

        assert scheduler.pending == 0


class TestPlayback:
    def test_ticks_advance_position(
        self, player: AutopilotPlayer, scheduler: ManualScheduler, universe: DmxUniverse
    ) -> None:
        player.enable()

        scheduler.advance(1_000)

        assert player.track.position == pytest.approx(50.0)
        assert universe.get_dmx_channel_value(PAN) == 128
        assert universe.get_dmx_channel_value(TILT) == 64

    def test_position_wraps(self, player: AutopilotPlayer, scheduler: ManualScheduler) -> None:
        player.enable()

        scheduler.advance(2_500)

        assert player.track.position == pytest.approx(25.0)

    def test_each_tick_writes_pan_and_tilt(
        self, player: AutopilotPlayer, scheduler: ManualScheduler, universe: DmxUniverse
    ) -> None:
        player.enable()
        before = universe.write_count

        scheduler.advance(250)

        assert universe.write_count - before == 10 * 2

    def test_auto_play_off_holds_position(
        self, player: AutopilotPlayer, scheduler: ManualScheduler
    ) -> None:
        player.set_auto_play(False)
        player.enable()

        scheduler.advance(1_000)

        assert player.track.position == 0

    def test_speed_change_applies_on_next_tick(
        self, player: AutopilotPlayer, scheduler: ManualScheduler
    ) -> None:
        player.enable()
        player.set_speed(100)

        scheduler.advance(500)

        assert player.track.position == pytest.approx(50.0)

    def test_bpm(self, player: AutopilotPlayer, scheduler: ManualScheduler) -> None:
        player.set_bpm(60)
        player.enable()

        scheduler.advance(1_000)

        assert player.track.position == pytest.approx(25.0)

    def test_configured_tick_interval(
        self, universe: DmxUniverse, f1_catalog: FixtureCatalog, scheduler: ManualScheduler
    ) -> None:
        selection = Selection(fixtures=["F1"])
        dispatcher = ControlDispatcher(universe, lambda: resolve_selection(selection, f1_catalog.fixtures))
        player = AutopilotPlayer(
            dispatcher, scheduler, AutopilotConfig(tick_interval_ms=100, auto_play=False)
        )
        player.enable()
        before = universe.write_count

        scheduler.advance(1_000)

        assert universe.write_count - before == 10 * 2


class TestSetters:
    def test_setters_refresh_output_while_enabled(
        self, player: AutopilotPlayer, universe: DmxUniverse
    ) -> None:
        player.enable()

        player.set_position(25)

        assert universe.get_dmx_channel_value(PAN) == 191
        assert universe.get_dmx_channel_value(TILT) == 128

    def test_setters_do_not_write_while_disabled(
        self, player: AutopilotPlayer, universe: DmxUniverse
    ) -> None:
        player.set_shape("square")
        player.set_size(80)
        player.set_center(40, 60)
        player.set_position(125)

        assert universe.write_count == 0
        assert player.track == TrackConfig(
            shape=TrackShape.SQUARE, position=25, size=80, center_x=40, center_y=60
        )

    def test_set_shape_rejects_unknown(self, player: AutopilotPlayer) -> None:
        with pytest.raises(ValueError):
            player.set_shape("spiral")

    def test_apply_returns_writes(self, player: AutopilotPlayer) -> None:
        writes = player.apply()

        assert [w.control for w in writes] == [ControlId.PAN, ControlId.TILT]

    def test_empty_selection_is_harmless(
        self, universe: DmxUniverse, scheduler: ManualScheduler
    ) -> None:
        player = AutopilotPlayer(ControlDispatcher(universe, lambda: []), scheduler)
        player.enable()

        scheduler.advance(100)

        assert universe.write_count == 0
