"""
Configuration module for domlens.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from domlens.config.settings import (
    Settings,
    ParserSettings,
    ValidatorSettings,
    FormatterSettings,
    CacheSettings,
    LoggingSettings,
)
from domlens.config.loader import load_config, get_settings, reset_settings

__all__ = [
    "Settings",
    "ParserSettings",
    "ValidatorSettings",
    "FormatterSettings",
    "CacheSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
]
