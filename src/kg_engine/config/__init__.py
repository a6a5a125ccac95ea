"""
Configuration module for Knowledge Graph Engine.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from kg_engine.config.settings import (
    Settings,
    GraphSettings,
    FileSettings,
    ExportSettings,
    LoggingSettings,
)
from kg_engine.config.loader import (
    load_config,
    get_settings,
    reset_settings,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "GraphSettings",
    "FileSettings",
    "ExportSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
    "get_default_config_path",
]
