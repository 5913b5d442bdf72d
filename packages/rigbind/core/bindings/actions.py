"""Bang-style actions.

Some binding targets are not controls but one-shot actions (step to the next
fixture, recall a scene). They ignore the scaled input value and fire only
when the input crosses the router's threshold.

Actions are registered by name, with optional aliases, or by prefix:
``scene-`` followed by a scene name recalls that scene.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from rigbind.core.controls.navigation import SelectionNavigator

logger = logging.getLogger(__name__)

ActionHandler = Callable[[], object]
PrefixHandler = Callable[[str], object]

SCENE_PREFIX = "scene-"


@runtime_checkable
class SceneController(Protocol):
    """Host-supplied scene storage driven by scene actions."""

    def next_scene(self) -> None: ...

    def previous_scene(self) -> None: ...

    def capture_scene(self) -> None: ...

    def load_current_scene(self) -> None: ...

    def load_scene(self, name: str) -> None: ...


class ActionRegistry:
    """Named one-shot actions.

    Example:
        >>> actions = ActionRegistry()
        >>> actions.register("fixture_next", navigator.next_fixture)
        >>> actions.fire("fixture_next")
        True
    """

    def __init__(self) -> None:
        self._actions: dict[str, ActionHandler] = {}
        self._prefixes: dict[str, PrefixHandler] = {}

    def register(
        self, name: str, handler: ActionHandler, *, aliases: Iterable[str] = ()
    ) -> None:
        """Register an action under ``name`` and any aliases.

        Args:
            name: Action name (the binding target key)
            handler: Callable run when the action fires
            aliases: Extra names for the same action
        """
        for key in (name, *aliases):
            if key in self._actions:
                logger.warning("Overwriting action '%s'", key)
            self._actions[key] = handler
        logger.debug("Registered action '%s'", name)

    def register_prefix(self, prefix: str, handler: PrefixHandler) -> None:
        """Register a handler for every name starting with ``prefix``.

        The handler receives the remainder of the name.
        """
        self._prefixes[prefix] = handler
        logger.debug("Registered action prefix '%s'", prefix)

    def resolve(self, name: str) -> ActionHandler | None:
        """Find the handler for an action name.

        Exact names win over prefixes; among prefixes the longest wins.

        Returns:
            Zero-argument callable, or None when ``name`` is not an action
        """
        handler = self._actions.get(name)
        if handler is not None:
            return handler
        for prefix in sorted(self._prefixes, key=len, reverse=True):
            if name.startswith(prefix) and len(name) > len(prefix):
                return functools.partial(self._prefixes[prefix], name[len(prefix) :])
        return None

    def fire(self, name: str) -> bool:
        """Run an action by name.

        Returns:
            True if an action ran, False if ``name`` is unknown
        """
        handler = self.resolve(name)
        if handler is None:
            logger.debug("No action named '%s'", name)
            return False
        logger.debug("Firing action '%s'", name)
        handler()
        return True

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    @property
    def names(self) -> list[str]:
        """Registered exact names, sorted."""
        return sorted(self._actions)


def register_navigation_actions(actions: ActionRegistry, navigator: SelectionNavigator) -> None:
    """Register fixture and group step-through actions."""
    actions.register("fixture_next", navigator.next_fixture)
    actions.register("fixture_previous", navigator.previous_fixture, aliases=("fixture_prev",))
    actions.register("group_next", navigator.next_group)
    actions.register("group_previous", navigator.previous_group, aliases=("group_prev",))


def register_scene_actions(actions: ActionRegistry, scenes: SceneController) -> None:
    """Register scene actions backed by the host's scene storage."""
    actions.register("scene_next", scenes.next_scene)
    actions.register("scene_previous", scenes.previous_scene, aliases=("scene_prev",))
    actions.register("scene_save", scenes.capture_scene, aliases=("scene_capture",))
    actions.register("scene_load", scenes.load_current_scene)
    actions.register_prefix(SCENE_PREFIX, scenes.load_scene)
