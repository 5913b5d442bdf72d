"""Tests for bang actions."""

from __future__ import annotations

import logging

from rigbind.core.bindings.actions import (
    ActionRegistry,
    SceneController,
    register_navigation_actions,
    register_scene_actions,
)
from rigbind.core.config.fixtures.catalog import FixtureCatalog
from rigbind.core.controls.navigation import SelectionNavigator
from rigbind.core.controls.selection import Selection


class FakeScenes:
    """Scene storage that records calls."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def next_scene(self) -> None:
        self.calls.append("next")

    def previous_scene(self) -> None:
        self.calls.append("previous")

    def capture_scene(self) -> None:
        self.calls.append("capture")

    def load_current_scene(self) -> None:
        self.calls.append("load")

    def load_scene(self, name: str) -> None:
        self.calls.append(f"load:{name}")


class TestActionRegistry:
    def test_register_and_fire(self) -> None:
        actions = ActionRegistry()
        fired: list[str] = []
        actions.register("blackout", lambda: fired.append("blackout"), aliases=("bo",))

        assert actions.fire("blackout")
        assert actions.fire("bo")
        assert fired == ["blackout", "blackout"]
        assert actions.names == ["blackout", "bo"]

    def test_unknown_action(self) -> None:
        actions = ActionRegistry()

        assert not actions.fire("nope")
        assert "nope" not in actions
        assert actions.resolve("nope") is None

    def test_overwrite_warns(self, caplog) -> None:
        actions = ActionRegistry()
        actions.register("a", lambda: None)

        with caplog.at_level(logging.WARNING):
            actions.register("a", lambda: None)

        assert "Overwriting action 'a'" in caplog.text

    def test_prefix_passes_remainder(self) -> None:
        actions = ActionRegistry()
        received: list[str] = []
        actions.register_prefix("scene-", received.append)

        assert actions.fire("scene-Intro Look")
        assert received == ["Intro Look"]

    def test_bare_prefix_is_not_an_action(self) -> None:
        actions = ActionRegistry()
        actions.register_prefix("scene-", lambda name: None)

        assert "scene-" not in actions

    def test_exact_name_beats_prefix_and_longest_prefix_wins(self) -> None:
        actions = ActionRegistry()
        hits: list[str] = []
        actions.register_prefix("scene-", lambda name: hits.append(f"short:{name}"))
        actions.register_prefix("scene-bank-", lambda name: hits.append(f"long:{name}"))
        actions.register("scene-special", lambda: hits.append("exact"))

        actions.fire("scene-bank-2")
        actions.fire("scene-special")
        actions.fire("scene-x")

        assert hits == ["long:2", "exact", "short:x"]


class TestBuiltInActions:
    def test_navigation_actions(self, catalog: FixtureCatalog) -> None:
        selection = Selection()
        navigator = SelectionNavigator(selection, lambda: catalog.fixtures, lambda: catalog.groups)
        actions = ActionRegistry()
        register_navigation_actions(actions, navigator)

        actions.fire("fixture_next")
        assert selection.fixtures == ["F2"]
        actions.fire("fixture_prev")
        assert selection.fixtures == ["F1"]
        actions.fire("group_previous")
        assert selection.groups == ["G2"]
        assert set(actions.names) == {
            "fixture_next",
            "fixture_previous",
            "fixture_prev",
            "group_next",
            "group_previous",
            "group_prev",
        }

    def test_scene_actions(self) -> None:
        scenes = FakeScenes()
        assert isinstance(scenes, SceneController)
        actions = ActionRegistry()
        register_scene_actions(actions, scenes)

        for name in ("scene_next", "scene_prev", "scene_capture", "scene_save", "scene_load", "scene-chorus"):
            assert actions.fire(name)

        assert scenes.calls == ["next", "previous", "capture", "capture", "load", "load:chorus"]
