"""
Configuration loading for the Knowledge Graph Engine.

Settings are assembled from three layers, later layers winning:

1. Model defaults (settings.py)
2. An optional YAML file
3. ``KG_ENGINE__{SECTION}__{KEY}`` environment variables

Example:
    KG_ENGINE__GRAPH__MAX_CANDIDATES=8 kg-engine show num
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from kg_engine.config.settings import Settings
from kg_engine.core.exceptions import ConfigurationError

ENV_PREFIX = "KG_ENGINE"

_settings_instance: Settings | None = None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base, recursing into nested sections."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _parse_env_value(raw: str) -> Any:
    """
    Convert an environment string to a scalar.

    Only words are read as booleans, so a numeric value such as
    ``KG_ENGINE__GRAPH__MAX_CANDIDATES=1`` stays an integer.
    """
    word = raw.strip().lower()

    if word in ("true", "yes", "on"):
        return True
    if word in ("false", "no", "off"):
        return False
    if word in ("", "none", "null"):
        return None

    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue

    return raw


def _load_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Collect ``{prefix}__SECTION__KEY`` variables into a nested dict.

    Variables naming only a section (``{prefix}__GRAPH``) are ignored.
    """
    marker = f"{prefix}__"
    overrides: dict[str, Any] = {}

    for name, raw in os.environ.items():
        if not name.startswith(marker):
            continue

        *sections, key = name[len(marker):].lower().split("__")
        if not sections:
            continue

        target = overrides
        for section in sections:
            target = target.setdefault(section, {})
        target[key] = _parse_env_value(raw)

    return overrides


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Read a YAML configuration file.

    Raises:
        FileNotFoundError: If the file does not exist
        yaml.YAMLError: If the file is not valid YAML
        ConfigurationError: If the top level is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        content = yaml.safe_load(f)

    if content is None:
        return {}

    if not isinstance(content, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping",
            details={"path": str(path), "type": type(content).__name__},
        )

    return content


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """
    Build validated settings from defaults, a YAML file and the environment.

    Args:
        config_path: YAML file to read. None means defaults plus environment.
        env_prefix: Prefix of override variables

    Returns:
        Validated Settings instance

    Raises:
        FileNotFoundError: If config_path is given but missing
        ConfigurationError: If the merged values fail validation
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        data = _load_yaml_file(Path(config_path))

    data = _deep_merge(data, _load_env_overrides(env_prefix))

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={"errors": e.error_count()},
        ) from e


def get_settings(
    config_path: Path | str | None = None,
    reload: bool = False,
) -> Settings:
    """
    Return the process-wide settings, loading them on first use.

    Args:
        config_path: YAML file, only read on first load or reload
        reload: Force a fresh load
    """
    global _settings_instance

    if _settings_instance is None or reload:
        _settings_instance = load_config(config_path)

    return _settings_instance


def reset_settings() -> None:
    """Forget the cached settings so the next get_settings() reloads."""
    global _settings_instance
    _settings_instance = None


def get_default_config_path() -> Path | None:
    """
    Locate a config.yaml in the usual places.

    Checked in order: ./config.yaml, ./config/config.yaml and
    ~/.kg_engine/config.yaml.
    """
    candidates = (
        Path.cwd() / "config.yaml",
        Path.cwd() / "config" / "config.yaml",
        Path.home() / ".kg_engine" / "config.yaml",
    )
    return next((path for path in candidates if path.exists()), None)
