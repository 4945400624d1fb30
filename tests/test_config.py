"""
Tests for configuration module.

Tests settings defaults, validation, YAML loading and environment
variable overrides.
"""

from pathlib import Path

import pytest
import yaml

from domlens.config import (
    Settings,
    ParserSettings,
    CacheSettings,
    FormatterSettings,
    ValidatorSettings,
    load_config,
    get_settings,
    reset_settings,
)
from domlens.core.exceptions import ConfigurationError


class TestSettings:
    """Tests for Settings model."""

    def test_default_settings_valid(self):
        """Default settings should match the parser's documented defaults."""
        settings = Settings()

        assert settings.parser.max_depth == 100
        assert settings.parser.include_images is True
        assert settings.parser.include_scripts is False
        assert settings.parser.validate_result is True
        assert settings.validator.max_text_length == 10000
        assert settings.formatter.default_format == "json"
        assert settings.cache.ttl_seconds == 3600
        assert settings.cache.max_size == 100
        assert settings.cache.hash_algorithm == "sha256"

    def test_validate_alias(self):
        """The validate flag can be given under its short name."""
        assert ParserSettings(validate=False).validate_result is False
        assert ParserSettings(validate_result=False).validate_result is False

    def test_parser_settings_validation(self):
        """Parser settings should validate constraints."""
        assert ParserSettings(max_depth=5).max_depth == 5

        with pytest.raises(ValueError):
            ParserSettings(max_depth=0)

    def test_cache_settings_validation(self):
        """Negative TTL and unknown hash algorithms are rejected."""
        assert CacheSettings(ttl_seconds=0).ttl_seconds == 0

        with pytest.raises(ValueError):
            CacheSettings(ttl_seconds=-1)

        with pytest.raises(ValueError):
            CacheSettings(hash_algorithm="sha1")

    def test_formatter_settings_validation(self):
        with pytest.raises(ValueError):
            FormatterSettings(default_format="yaml")

    def test_settings_nested_override(self):
        """Nested settings can be overridden."""
        settings = Settings(
            parser={"max_depth": 20, "strict_mode": True},
            validator={"strict": True},
        )

        assert settings.parser.max_depth == 20
        assert settings.parser.strict_mode is True
        assert settings.validator.strict is True
        # Non-overridden should keep defaults
        assert settings.validator.max_depth == ValidatorSettings().max_depth

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError):
            Settings(browser={"headless": True})


class TestConfigLoader:
    """Tests for configuration loading."""

    def test_load_config_defaults(self):
        """Loading without file should use defaults."""
        settings = load_config(config_path=None)

        assert isinstance(settings, Settings)
        assert settings.parser.max_depth == 100

    def test_load_config_from_yaml(self, temp_dir: Path):
        """Configuration should load from YAML file."""
        config_path = temp_dir / "domlens.yaml"
        config_data = {
            "parser": {"max_depth": 30},
            "cache": {"enabled": False, "max_size": 5},
        }

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        settings = load_config(config_path)

        assert settings.parser.max_depth == 30
        assert settings.cache.enabled is False
        assert settings.cache.max_size == 5
        assert settings.cache.ttl_seconds == 3600

    def test_load_config_env_override(self, temp_dir: Path, monkeypatch):
        """Environment variables should override file settings."""
        config_path = temp_dir / "domlens.yaml"
        config_path.write_text("cache:\n  max_size: 5\n")
        monkeypatch.setenv("DOMLENS__CACHE__MAX_SIZE", "999")
        monkeypatch.setenv("DOMLENS__PARSER__STRICT_MODE", "true")

        settings = load_config(config_path)

        assert settings.cache.max_size == 999
        assert settings.parser.strict_mode is True

    def test_env_numeric_one_stays_integer(self, monkeypatch):
        monkeypatch.setenv("DOMLENS__PARSER__MAX_DEPTH", "1")

        assert load_config(config_path=None).parser.max_depth == 1

    def test_load_config_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "missing.yaml")

    def test_load_config_invalid_yaml(self, temp_dir: Path):
        """Invalid YAML should raise ConfigurationError."""
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text("{ invalid yaml content")

        with pytest.raises(ConfigurationError):
            load_config(config_path)

    def test_load_config_non_mapping(self, temp_dir: Path):
        config_path = temp_dir / "list.yaml"
        config_path.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path)

    def test_load_config_invalid_values(self, temp_dir: Path):
        """Values failing validation are reported as ConfigurationError."""
        config_path = temp_dir / "bad.yaml"
        config_path.write_text("parser:\n  max_depth: -3\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path)

    def test_empty_file_uses_defaults(self, temp_dir: Path):
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")

        assert load_config(config_path) == Settings()


class TestSettingsSingleton:
    """Tests for the cached settings instance."""

    def test_get_settings_cached(self, temp_dir: Path):
        config_path = temp_dir / "domlens.yaml"
        config_path.write_text("parser:\n  max_depth: 7\n")

        first = get_settings(config_path)
        second = get_settings()

        assert first is second
        assert second.parser.max_depth == 7

    def test_reload_and_reset(self, temp_dir: Path):
        config_path = temp_dir / "domlens.yaml"
        config_path.write_text("parser:\n  max_depth: 7\n")
        first = get_settings(config_path)

        config_path.write_text("parser:\n  max_depth: 8\n")
        reloaded = get_settings(config_path, reload=True)
        assert reloaded is not first
        assert reloaded.parser.max_depth == 8

        reset_settings()
        assert get_settings(config_path) is not reloaded
