"""
Configuration loader with YAML file support and environment variable overrides.

Sources, lowest priority first:
1. Default values (settings.py)
2. YAML configuration file
3. Environment variables

Environment variables use the pattern: DOMLENS__{SECTION}__{KEY}
Example: DOMLENS__CACHE__MAX_SIZE=500
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from domlens.config.settings import Settings
from domlens.core.exceptions import ConfigurationError

ENV_PREFIX = "DOMLENS"

_settings_instance: Settings | None = None

_TRUE_VALUES = {"true", "yes", "on"}
_FALSE_VALUES = {"false", "no", "off"}
_NULL_VALUES = {"none", "null", ""}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge two nested mappings, override wins on conflicting leaves."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _coerce_env_value(raw: str) -> Any:
    """
    Turn an environment string into a bool, None, int, float or str.

    "1" and "0" stay integers so numeric settings such as
    DOMLENS__PARSER__MAX_DEPTH=1 are not read as booleans.
    """
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    if lowered in _NULL_VALUES:
        return None

    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    return raw


def _load_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Collect {PREFIX}__{SECTION}__{KEY} variables into a nested mapping.

    Variables with fewer than two path segments after the prefix are
    ignored since every setting lives inside a section.
    """
    marker = f"{prefix}__"
    overrides: dict[str, Any] = {}

    for name, raw in os.environ.items():
        if not name.startswith(marker):
            continue

        path = [part for part in name[len(marker):].lower().split("__") if part]
        if len(path) < 2:
            continue

        node = overrides
        for section in path[:-1]:
            node = node.setdefault(section, {})
        node[path[-1]] = _coerce_env_value(raw)

    return overrides


def _read_yaml(path: Path) -> dict[str, Any]:
    """
    Read a YAML mapping from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as handle:
            content = yaml.safe_load(handle)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Configuration file is not valid YAML",
            details={"path": str(path), "error": str(e)},
        ) from e

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
    Build Settings from defaults, an optional YAML file and the environment.

    Args:
        config_path: YAML file to read. None uses defaults and environment only.
        env_prefix: Prefix for environment variable overrides

    Returns:
        Validated Settings instance

    Raises:
        FileNotFoundError: If config_path is given but doesn't exist
        ConfigurationError: If the merged configuration is invalid
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        data = _deep_merge(data, _read_yaml(Path(config_path)))

    data = _deep_merge(data, _load_env_overrides(env_prefix))

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={"errors": e.error_count(), "first": e.errors()[0]["msg"]},
        ) from e


def get_settings(
    config_path: Path | str | None = None,
    reload: bool = False,
) -> Settings:
    """
    Get the process-wide Settings, loading them on first use.

    Args:
        config_path: YAML file used on first load or reload. Falls back to
            get_default_config_path() when omitted.
        reload: Force a fresh load

    Returns:
        Shared Settings instance
    """
    global _settings_instance

    if _settings_instance is None or reload:
        path = config_path if config_path is not None else get_default_config_path()
        _settings_instance = load_config(path)

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached Settings so the next get_settings() reloads."""
    global _settings_instance
    _settings_instance = None


@lru_cache(maxsize=1)
def get_default_config_path() -> Path | None:
    """
    Find a domlens.yaml in the usual places.

    Checked in order: ./domlens.yaml, ./config/domlens.yaml,
    ~/.domlens/domlens.yaml.
    """
    candidates = [
        Path.cwd() / "domlens.yaml",
        Path.cwd() / "config" / "domlens.yaml",
        Path.home() / ".domlens" / "domlens.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None
