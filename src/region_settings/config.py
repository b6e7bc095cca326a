"""Configuration management for region_settings.

Configuration is merged from ordered sources, later (higher priority)
sources overriding earlier ones:

    ConfigSource[] (ordered by priority)
         |
         +---> FileConfigSource (YAML, JSON, TOML)      priority 50
         +---> EnvConfigSource  (REGION_SETTINGS__*)    priority 100
         |
         v
    ConfigManager ---> merge & validate ---> ConfigProfile

Recognized keys:
    locale                          Locale identifier replacing the system one
    overrides.temperature_unit      C / F
    overrides.measurement_system    metric / us / uksystem
    overrides.first_day_of_week     MON / FRI / SAT / SUN
    logging.level                   DEBUG ... CRITICAL
    logging.format                  console / json

Environment variables use ``__`` for nesting, so
``REGION_SETTINGS__OVERRIDES__FIRST_DAY_OF_WEEK=mon`` sets
``overrides.first_day_of_week``.

Usage:
    >>> from region_settings.config import load_config, create_reader
    >>> profile = load_config(config_path="region_settings.yaml")
    >>> reader = create_reader(profile)
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from region_settings.context import (
    LocaleContextReader,
    OverrideLocaleReader,
    StaticLocaleReader,
    SystemLocaleReader,
    parse_preference,
)
from region_settings.errors import InvalidPreferenceError, RegionSettingsError
from region_settings.types import PreferenceCategory, PreferenceValue

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(RegionSettingsError):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {', '.join(errors)}")


class ConfigSourceError(ConfigError):
    """Configuration source error."""

    pass


# =============================================================================
# Configuration Sources
# =============================================================================


class ConfigSource(ABC):
    """Abstract base class for configuration sources.

    Sources are merged in ascending priority order, so a higher priority
    source overrides a lower one.
    """

    def __init__(self, priority: int = 0) -> None:
        self._priority = priority

    @property
    def priority(self) -> int:
        return self._priority

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from source.

        Returns:
            Dictionary of configuration values.
        """
        pass


class EnvConfigSource(ConfigSource):
    """Environment variable configuration source.

    Example:
        REGION_SETTINGS__LOCALE=en_GB
        REGION_SETTINGS__LOGGING__LEVEL=DEBUG

        Will produce:
        {"locale": "en_GB", "logging": {"level": "DEBUG"}}
    """

    def __init__(
        self,
        prefix: str = "REGION_SETTINGS",
        separator: str = "__",
        priority: int = 100,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize environment source.

        Args:
            prefix: Environment variable prefix.
            separator: Separator for nested keys.
            priority: Source priority.
            environ: Environment to read (default: ``os.environ``).
        """
        super().__init__(priority)
        self._prefix = prefix
        self._separator = separator
        self._environ = os.environ if environ is None else environ

    def load(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        prefix = f"{self._prefix}{self._separator}"

        for key, value in self._environ.items():
            if not key.startswith(prefix):
                continue
            parts = key[len(prefix) :].lower().split(self._separator)

            current = result
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_value(value)

        return result

    def _parse_value(self, value: str) -> Any:
        if value.lower() in ("null", "none", ""):
            return None
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False
        return value


class FileConfigSource(ConfigSource):
    """File-based configuration source.

    Supports YAML, JSON, and TOML, detected from the file extension.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        required: bool = False,
        priority: int = 50,
    ) -> None:
        """Initialize file source.

        Args:
            path: Path to configuration file.
            required: Raise error if the file is missing or unreadable.
            priority: Source priority.
        """
        super().__init__(priority)
        self._path = Path(path)
        self._required = required

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        if not self._path.exists():
            if self._required:
                raise ConfigSourceError(f"Configuration file not found: {self._path}")
            return {}

        try:
            content = self._path.read_text(encoding="utf-8")
            suffix = self._path.suffix.lower()

            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            elif suffix == ".toml":
                data = tomllib.loads(content)
            else:
                raise ConfigSourceError(f"Unsupported file format: {suffix}")

        except (OSError, ValueError, yaml.YAMLError) as e:
            if self._required:
                raise ConfigSourceError(f"Failed to load config {self._path}: {e}") from e
            logger.warning("Ignoring unreadable config file %s: %s", self._path, e)
            return {}

        if not isinstance(data, dict):
            raise ConfigSourceError(f"Config file {self._path} must contain a mapping")
        return data


# =============================================================================
# Configuration Schema & Validation
# =============================================================================


@dataclass
class ConfigField:
    """Configuration field definition for validation."""

    name: str
    type: type | tuple[type, ...] = str
    choices: list[str] | None = None
    description: str = ""


@dataclass
class ConfigSchema:
    """Configuration schema for validation."""

    fields: list[ConfigField] = field(default_factory=list)

    def add_field(
        self, name: str, type: type | tuple[type, ...] = str, **kwargs: Any
    ) -> "ConfigSchema":
        self.fields.append(ConfigField(name=name, type=type, **kwargs))
        return self


class ConfigValidator:
    """Validate a configuration dictionary against a schema."""

    def __init__(self, schema: ConfigSchema) -> None:
        self._schema = schema

    def validate(self, config: dict[str, Any]) -> list[str]:
        """Validate configuration.

        Returns:
            List of validation errors (empty if valid).
        """
        errors: list[str] = []

        for field_def in self._schema.fields:
            value = _get_nested(config, field_def.name)
            if value is None:
                continue

            if not isinstance(value, field_def.type):
                errors.append(
                    f"Field '{field_def.name}' should be {_type_names(field_def.type)}, "
                    f"got {type(value).__name__}"
                )
                continue

            # Choices are case-insensitive
            if field_def.choices and value.lower() not in field_def.choices:
                errors.append(f"Field '{field_def.name}' must be one of {field_def.choices}")

        return errors


def create_default_schema() -> ConfigSchema:
    schema = ConfigSchema()
    schema.add_field("locale", str, description="Locale identifier")
    schema.add_field("overrides.temperature_unit", str)
    schema.add_field("overrides.measurement_system", str)
    schema.add_field("overrides.first_day_of_week", str)
    schema.add_field(
        "logging.level",
        str,
        choices=["debug", "info", "warning", "error", "critical"],
    )
    schema.add_field("logging.format", str, choices=["console", "json"])
    return schema


def _type_names(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def _get_nested(config: Mapping[str, Any], key: str) -> Any:
    current: Any = config
    for part in key.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


# =============================================================================
# Configuration Profile
# =============================================================================


class ConfigProfile:
    """Typed access to merged configuration.

    Example:
        >>> profile = ConfigProfile({"logging": {"level": "DEBUG"}})
        >>> profile.get_str("logging.level", "INFO")
        'DEBUG'
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config = config

    def get(self, key: str, default: Any = None, *, required: bool = False) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key (dot-separated for nesting).
            default: Default value if not found.
            required: Raise error if not found.
        """
        value = _get_nested(self._config, key)
        if value is None:
            if required:
                raise ConfigError(f"Required configuration '{key}' not found")
            return default
        return value

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key, default)
        return str(value) if value is not None else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1", "on")
        return bool(value)

    def get_dict(self, key: str, default: dict[str, Any] | None = None) -> dict[str, Any]:
        value = self.get(key, default)
        if isinstance(value, dict):
            return value
        return default or {}

    def to_dict(self) -> dict[str, Any]:
        return self._config.copy()

    def __contains__(self, key: str) -> bool:
        return _get_nested(self._config, key) is not None


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Merge configuration sources into a profile.

    Example:
        >>> manager = ConfigManager()
        >>> manager.add_source(FileConfigSource("region_settings.toml"))
        >>> manager.add_source(EnvConfigSource())
        >>> profile = manager.load()
    """

    def __init__(self, schema: ConfigSchema | None = None) -> None:
        self._sources: list[ConfigSource] = []
        self._schema = schema

    def add_source(self, source: ConfigSource) -> "ConfigManager":
        self._sources.append(source)
        self._sources.sort(key=lambda s: s.priority)
        return self

    def load(self, validate: bool = True) -> ConfigProfile:
        """Load configuration from all sources.

        Raises:
            ConfigSourceError: If a required source fails to load.
            ConfigValidationError: If validation is enabled and fails.
        """
        config: dict[str, Any] = {}
        for source in self._sources:
            self._merge_config(config, source.load())

        if validate and self._schema:
            errors = ConfigValidator(self._schema).validate(config)
            if errors:
                raise ConfigValidationError(errors)

        return ConfigProfile(config)

    def _merge_config(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        """Deep merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value


def load_config(
    *,
    config_path: str | Path | None = None,
    env_prefix: str = "REGION_SETTINGS",
    environ: Mapping[str, str] | None = None,
    validate: bool = True,
) -> ConfigProfile:
    """Load configuration.

    Args:
        config_path: Configuration file; it must exist when given.
        env_prefix: Environment variable prefix.
        environ: Environment to read (default: ``os.environ``).
        validate: Validate against the default schema.

    Returns:
        ConfigProfile instance.
    """
    manager = ConfigManager(schema=create_default_schema())
    if config_path:
        manager.add_source(FileConfigSource(config_path, required=True))
    manager.add_source(EnvConfigSource(prefix=env_prefix, environ=environ))
    return manager.load(validate=validate)


def configured_overrides(profile: ConfigProfile) -> dict[PreferenceCategory, PreferenceValue]:
    """Parse the ``overrides`` section into explicit preferences.

    Invalid values are logged and skipped.
    """
    overrides: dict[PreferenceCategory, PreferenceValue] = {}
    for category in PreferenceCategory:
        raw = profile.get(f"overrides.{category.value}")
        if raw is None:
            continue
        try:
            overrides[category] = parse_preference(category, str(raw))
        except InvalidPreferenceError as e:
            logger.warning("Ignoring configured override: %s", e)
    return overrides


def create_reader(
    profile: ConfigProfile,
    locale_id: str | None = None,
) -> LocaleContextReader:
    """Build the locale reader described by a configuration profile.

    Args:
        profile: Loaded configuration.
        locale_id: Locale replacing both the configured and the system
            locale.

    Returns:
        A reader honoring the locale and the configured overrides.
    """
    locale_id = locale_id or profile.get_str("locale")
    if locale_id:
        try:
            reader = StaticLocaleReader(locale_id)
        except ValueError as e:
            raise ConfigError(f"Invalid configured locale {locale_id!r}") from e
    else:
        reader = SystemLocaleReader()

    overrides = configured_overrides(profile)
    if overrides:
        reader = OverrideLocaleReader(reader, overrides)
    return reader
