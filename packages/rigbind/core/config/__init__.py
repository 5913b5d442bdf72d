"""Configuration management for rigbind.

Loaders live in ``rigbind.core.config.loader``.
"""

from rigbind.core.config.fixtures import (
    DMX_UNIVERSE_SIZE,
    Channel,
    Fixture,
    FixtureCatalog,
    FixtureGroup,
)
from rigbind.core.config.models import (
    AppConfig,
    AutopilotConfig,
    ConfigBase,
    DispatchConfig,
    LearnConfig,
    LoggingConfig,
    NormalizerConfig,
    RouterConfig,
    SelectionConfig,
)

__all__ = [
    # Fixtures
    "DMX_UNIVERSE_SIZE",
    "Channel",
    "Fixture",
    "FixtureCatalog",
    "FixtureGroup",
    # Models
    "AppConfig",
    "AutopilotConfig",
    "ConfigBase",
    "DispatchConfig",
    "LearnConfig",
    "LoggingConfig",
    "NormalizerConfig",
    "RouterConfig",
    "SelectionConfig",
]
