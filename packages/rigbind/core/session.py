"""rigbind session coordinator.

Wires the control stack for one rig from an ``AppConfig``:
- fixture catalog and the active selection
- dispatcher writing to the DMX output
- binding registry, MIDI learn and the input router
- fixture/group navigation and scene actions
- autopilot playback

Presentation layers hold a session and feed it user gestures and decoded
MIDI/OSC events.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

from rigbind.core.autopilot.player import AutopilotPlayer
from rigbind.core.bindings.actions import (
    ActionRegistry,
    SceneController,
    register_navigation_actions,
    register_scene_actions,
)
from rigbind.core.bindings.learn import LearnStateMachine
from rigbind.core.bindings.models import MidiEvent, OscEvent, RoutedInput
from rigbind.core.bindings.registry import BindingRegistry
from rigbind.core.bindings.router import InputRouter
from rigbind.core.config.fixtures import FixtureCatalog
from rigbind.core.config.loader import (
    load_binding_registry,
    load_fixture_catalog,
    save_binding_registry,
)
from rigbind.core.config.models import AppConfig, ConfigBase
from rigbind.core.controls.dispatcher import ControlDispatcher
from rigbind.core.controls.enums import ControlId
from rigbind.core.controls.models import DmxWrite
from rigbind.core.controls.navigation import SelectionNavigator
from rigbind.core.controls.normalizer import ChannelTypeNormalizer
from rigbind.core.controls.notifications import LoggingNotifier
from rigbind.core.controls.protocols import DmxOutput, Notifier
from rigbind.core.controls.selection import (
    AffectedFixture,
    Capability,
    Selection,
    derive_capabilities,
    resolve_selection,
)
from rigbind.core.controls.universe import DmxUniverse
from rigbind.core.scheduling import ManualScheduler, Scheduler
from rigbind.core.utils.logging import get_logger

T = TypeVar("T", bound=ConfigBase)


class ControlSession:
    """Control stack for one rig.

    Example:
        session = ControlSession(catalog="rig.yaml")
        session.selection.fixtures = ["F1"]
        session.dispatch("pan", 200)
        session.handle_midi(MidiEvent(type="cc", channel=0, controller=7, value=64))
    """

    def __init__(
        self,
        *,
        app_config: AppConfig | Path | str | None = None,
        catalog: FixtureCatalog | Path | str | None = None,
        bindings: BindingRegistry | Path | str | None = None,
        output: DmxOutput | None = None,
        scheduler: Scheduler | None = None,
        notifier: Notifier | None = None,
        scenes: SceneController | None = None,
        base_dir: Path | str | None = None,
        session_id: str | None = None,
    ):
        """Initialize the session.

        Args:
            app_config: AppConfig instance, path, or None (uses default path)
            catalog: Catalog instance or path; falls back to
                     ``app_config.fixtures_path``, then to an empty catalog
            bindings: Registry instance or path; falls back to
                      ``app_config.bindings_path``, then to an empty registry
            output: DMX output (defaults to an in-memory universe)
            scheduler: Timer source (defaults to a ManualScheduler the host
                       advances)
            notifier: Learn notifications sink (defaults to logging)
            scenes: Host scene storage; enables scene actions when given
            base_dir: Directory relative config paths resolve against
            session_id: Optional session ID. If None, generates a new UUID.

        Raises:
            FileNotFoundError: If a configured file doesn't exist
            ValidationError: If a config is invalid
        """
        self.app_config: AppConfig = self._resolve_config(app_config, AppConfig)
        self.session_id = session_id or str(uuid4())
        self.log = get_logger(__name__, session_id=self.session_id)
        self.base_dir = Path(base_dir) if base_dir is not None else Path(".")

        self.catalog = self._resolve_catalog(catalog)
        self.registry = self._resolve_registry(bindings)
        self.normalizer = ChannelTypeNormalizer(self.app_config.normalizer.aliases)
        self.selection = Selection()
        self.output: DmxOutput = output if output is not None else DmxUniverse()
        self.scheduler: Scheduler = scheduler if scheduler is not None else ManualScheduler()

        self.dispatcher = ControlDispatcher(
            self.output,
            self.affected_fixtures,
            verify=self.app_config.dispatch.verify,
            normalizer=self.normalizer,
        )
        self.learn = LearnStateMachine(
            self.registry,
            self.scheduler,
            notifier if notifier is not None else LoggingNotifier(),
            self.app_config.learn,
        )

        self.navigator = SelectionNavigator(
            self.selection, lambda: self.catalog.fixtures, lambda: self.catalog.groups
        )
        self.actions = ActionRegistry()
        register_navigation_actions(self.actions, self.navigator)
        if scenes is not None:
            register_scene_actions(self.actions, scenes)
        self._bind_default_osc_addresses()

        self.router = InputRouter(self.registry, self.dispatcher, self.actions, self.app_config.router)
        self.autopilot = AutopilotPlayer(self.dispatcher, self.scheduler, self.app_config.autopilot)

        self.log.debug(
            "Session initialized: %d fixture(s), %d binding(s)",
            len(self.catalog.fixtures),
            len(self.registry),
        )

    @staticmethod
    def _resolve_config(value: Any, config_cls: type[T]) -> T:
        """Resolve config from value, path, or default.

        Args:
            value: Config instance, path, or None
            config_cls: Config class to instantiate

        Returns:
            Config instance

        Raises:
            TypeError: If value is wrong type
            FileNotFoundError: If path doesn't exist
            ValidationError: If config is invalid
        """
        if value is None:
            return config_cls.load_or_default()
        elif isinstance(value, (Path, str)):
            return config_cls.load_or_default(Path(value))
        elif isinstance(value, config_cls):
            return value
        else:
            raise TypeError(
                f"Expected {config_cls.__name__}, Path, str, or None; got {type(value).__name__}"
            )

    def _path(self, value: Path | str) -> Path:
        path = Path(value)
        return path if path.is_absolute() else self.base_dir / path

    def _resolve_catalog(self, value: FixtureCatalog | Path | str | None) -> FixtureCatalog:
        if isinstance(value, FixtureCatalog):
            return value
        if value is None:
            value = self.app_config.fixtures_path
        if value is None:
            return FixtureCatalog()
        return load_fixture_catalog(self._path(value))

    def _resolve_registry(self, value: BindingRegistry | Path | str | None) -> BindingRegistry:
        if isinstance(value, BindingRegistry):
            return value
        if value is None:
            value = self.app_config.bindings_path
        if value is None:
            return BindingRegistry()
        return load_binding_registry(self._path(value))

    def _bind_default_osc_addresses(self) -> None:
        for action, address in self.app_config.router.default_osc_addresses.items():
            existing = self.registry.get(action)
            if existing is None or existing.osc_address is None:
                self.registry.set_osc_address(action, address)

    @classmethod
    def from_directory(
        cls,
        config_dir: Path | str = ".",
        **kwargs: Any,
    ) -> ControlSession:
        """Create session from a directory containing config.json.

        Relative fixture and binding paths in the config resolve against the
        same directory.

        Args:
            config_dir: Directory containing config files (default: current directory)
            **kwargs: Forwarded to the constructor

        Returns:
            Initialized ControlSession
        """
        config_dir = Path(config_dir)
        return cls(app_config=config_dir / "config.json", base_dir=config_dir, **kwargs)

    def affected_fixtures(self) -> list[AffectedFixture]:
        """Resolve the current selection against the catalog."""
        return resolve_selection(
            self.selection,
            self.catalog.fixtures,
            self.catalog.groups,
            min_capability_fixtures=self.app_config.selection.min_capability_fixtures,
            normalizer=self.normalizer,
        )

    def capabilities(self) -> list[Capability]:
        """Capabilities selectable in the current catalog."""
        return derive_capabilities(
            self.catalog.fixtures,
            min_fixtures=self.app_config.selection.min_capability_fixtures,
            normalizer=self.normalizer,
        )

    def set_catalog(self, catalog: FixtureCatalog) -> None:
        """Replace the fixture catalog; the selection is kept as is."""
        self.catalog = catalog
        self.log.info("Catalog replaced: %d fixture(s)", len(catalog.fixtures))

    def dispatch(self, control: ControlId | str, value: float) -> list[DmxWrite]:
        return self.dispatcher.dispatch(control, value)

    def handle_midi(self, event: MidiEvent) -> list[RoutedInput]:
        """Feed a MIDI message to learn first, then to the router.

        A message captured by an active learn session is consumed and not
        routed.
        """
        captured = self.learn.handle_midi(event)
        if captured is not None:
            self.log.debug("MIDI consumed by learn", extra={"control": captured.control})
            return []
        return self.router.handle_midi(event)

    def handle_osc(self, event: OscEvent) -> list[RoutedInput]:
        return self.router.handle_osc(event)

    def save_bindings(self, path: Path | str | None = None) -> Path:
        """Export bindings to ``path`` or the configured bindings file.

        Raises:
            ValueError: If no path is given or configured
        """
        target = path if path is not None else self.app_config.bindings_path
        if target is None:
            raise ValueError("No bindings path given or configured")
        resolved = self._path(target)
        save_binding_registry(self.registry, resolved)
        self.log.info("Saved %d binding(s) to %s", len(self.registry), resolved)
        return resolved

    def close(self) -> None:
        """Stop autopilot and abandon any learn session."""
        self.autopilot.close()
        self.learn.cancel_learn()
        self.log.debug("Session closed")

    def __enter__(self) -> ControlSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
