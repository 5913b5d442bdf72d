"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from rigbind.core.bindings.registry import BindingRegistry
from rigbind.core.config.fixtures import FixtureCatalog
from rigbind.core.config.models import AppConfig
from rigbind.core.utils.json import load_json, write_json
from rigbind.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

# Default app config path (can be overridden)
_DEFAULT_APP_CONFIG_PATH = Path("config.json")
_app_config_cache: AppConfig | None = None


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("bindings.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def _load_document(path: Path) -> tuple[str, Any]:
    """Parse a JSON or YAML file without constraining its top-level shape.

    Returns:
        Tuple of (format, parsed content); an empty YAML file parses as {}
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            return fmt, load_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    return fmt, {} if content is None else content


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats. Format is auto-detected
    from file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)
    fmt, content = _load_document(path)

    if not isinstance(content, dict):
        raise ValueError(
            f"Invalid {fmt.upper()} in {path}: expected a mapping, got {type(content).__name__}"
        )
    return content


def save_config(data: dict[str, Any], path: str | Path) -> None:
    """Write a configuration dictionary as JSON or YAML.

    Args:
        data: Dictionary to write
        path: Destination (.json, .yaml, or .yml)

    Raises:
        ValueError: If format is not supported
    """
    path = Path(path)
    fmt = detect_format(path)

    if fmt == "json":
        write_json(path, data)
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    Args:
        path: Path to app config file (.json, .yaml, or .yml)
              Defaults to config.json

    Returns:
        Validated AppConfig instance with defaults for missing values

    Raises:
        ValidationError: If config is invalid
    """
    global _app_config_cache

    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    # Use cached config if available and path matches default
    if _app_config_cache is not None and path == _DEFAULT_APP_CONFIG_PATH:
        return _app_config_cache

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug("No config at %s; using defaults", path)
        config = AppConfig()

    if path == _DEFAULT_APP_CONFIG_PATH:
        _app_config_cache = config

    return config


def clear_app_config_cache() -> None:
    """Forget the cached default app config."""
    global _app_config_cache
    _app_config_cache = None


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def load_fixture_catalog(path: str | Path) -> FixtureCatalog:
    """Load a fixture catalog.

    The document holds ``fixtures`` and optionally ``groups``, or is a bare
    list of fixtures (older rig files) which loads with no groups. Malformed
    entries are dropped or stripped of channels with a warning.

    Args:
        path: Path to catalog file (.json, .yaml, or .yml)

    Returns:
        FixtureCatalog

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed or holds neither a mapping
            nor a list

    Example:
        >>> catalog = load_fixture_catalog("rig.yaml")
        >>> catalog.get_fixture("F1")
    """
    path = Path(path)
    fmt, raw = _load_document(path)

    if not isinstance(raw, dict | list):
        raise ValueError(
            f"Invalid {fmt.upper()} in {path}: expected a mapping or a fixture list, "
            f"got {type(raw).__name__}"
        )

    catalog = FixtureCatalog.from_raw(raw)
    logger.debug(
        "Loaded %d fixture(s) and %d group(s) from %s",
        len(catalog.fixtures),
        len(catalog.groups),
        path,
    )
    return catalog


def load_binding_registry(path: str | Path) -> BindingRegistry:
    """Load binding settings exported by ``save_binding_registry``.

    Args:
        path: Path to settings file (.json, .yaml, or .yml)

    Returns:
        Populated BindingRegistry

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed or lacks a version header
        ValidationError: If a binding entry is invalid
    """
    registry = BindingRegistry.from_dict(load_config(path))
    logger.debug("Loaded %d binding(s) from %s", len(registry), path)
    return registry


def save_binding_registry(registry: BindingRegistry, path: str | Path) -> None:
    """Write binding settings as JSON or YAML.

    Args:
        registry: Registry to export
        path: Destination (.json, .yaml, or .yml)
    """
    save_config(registry.to_dict(), path)
    logger.debug("Saved %d binding(s) to %s", len(registry), path)
