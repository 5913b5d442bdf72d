"""Configuration models for rigbind."""

from __future__ import annotations

from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field


class ConfigBase(BaseModel):
    """Base class for all rigbind configurations.

    Provides common functionality for loading from files with defaults.
    Subclasses must implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type.

        Returns:
            Path to the default config file
        """
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path, or from the default path when it exists.

        A missing default file yields an all-defaults instance; a missing
        explicit path is an error.

        Args:
            path: Path to config file, or None to use default

        Returns:
            Loaded config instance

        Raises:
            FileNotFoundError: If an explicit config file doesn't exist
            ValidationError: If config is invalid
        """
        from rigbind.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
            if not Path(path).exists():
                return cls()
        raw = load_config(path)
        return cls.model_validate(raw)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file; stdout when unset")


class LearnConfig(BaseModel):
    """MIDI learn timing and default output range."""

    timeout_ms: int = Field(default=30_000, gt=0, description="Learning gives up after this")
    reset_ms: int = Field(
        default=3_000, ge=0, description="Delay before success/timeout returns to idle"
    )
    default_min: int = Field(default=0, ge=0, le=255)
    default_max: int = Field(default=255, ge=0, le=255)


class RouterConfig(BaseModel):
    """Bang-action thresholds and default navigation OSC addresses."""

    midi_bang_threshold: int = Field(
        default=63, ge=0, le=127, description="Fire when value/velocity exceeds this"
    )
    osc_bang_threshold: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Fire when the OSC value exceeds this"
    )
    default_osc_addresses: dict[str, str] = Field(
        default_factory=lambda: {
            "fixture_previous": "/supercontrol/fixture/prev",
            "fixture_next": "/supercontrol/fixture/next",
            "group_previous": "/supercontrol/group/prev",
            "group_next": "/supercontrol/group/next",
        },
        description="OSC addresses bound to navigation actions when not already bound",
    )


class AutopilotConfig(BaseModel):
    """Autopilot track playback."""

    tick_interval_ms: int = Field(default=25, gt=0, description="Geometry recompute interval")
    speed: float = Field(default=50.0, ge=0.0, le=100.0, description="Playback speed (50=1x)")
    bpm: float = Field(default=120.0, gt=0.0, description="Tempo driving auto-play")
    auto_play: bool = Field(default=True, description="Advance position on every tick")


class SelectionConfig(BaseModel):
    """Selection resolution policy."""

    min_capability_fixtures: int = Field(
        default=2,
        ge=1,
        description="Fixtures that must share a control for it to be a capability",
    )


class NormalizerConfig(BaseModel):
    """Extra channel-type aliases (alias -> canonical control id)."""

    aliases: dict[str, str] = Field(default_factory=dict)


class DispatchConfig(BaseModel):
    """Control dispatch options."""

    verify: bool = Field(default=False, description="Read back writes and log mismatches")


class AppConfig(ConfigBase):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")
    logging: LoggingConfig = LoggingConfig()
    learn: LearnConfig = LearnConfig()
    router: RouterConfig = RouterConfig()
    autopilot: AutopilotConfig = AutopilotConfig()
    selection: SelectionConfig = SelectionConfig()
    normalizer: NormalizerConfig = NormalizerConfig()
    dispatch: DispatchConfig = DispatchConfig()
    fixtures_path: str | None = Field(default=None, description="Fixture catalog file")
    bindings_path: str | None = Field(default=None, description="Binding settings file")

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("config.json")
