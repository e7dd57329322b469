"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import structlog
import yaml

from .defaults import (
    LoggingParams,
    OutputParams,
    RetryParams,
    ScheduleParams,
    ServiceConfig,
    SimulationParams,
    TradingParams,
    get_default_config,
)
from .validation import ConfigValidator

logger = structlog.get_logger(__name__)

SECTION_TYPES = {
    "schedule": ScheduleParams,
    "retry": RetryParams,
    "output": OutputParams,
    "trading": TradingParams,
    "logging": LoggingParams,
    "simulation": SimulationParams,
}

# Flat keys accepted at the top level of a config file
LEGACY_KEYS = {
    "OutputDirectory": ("output", "output_directory"),
    "IntervalMinutes": ("schedule", "interval_minutes"),
    "RetryCount": ("retry", "retry_count"),
    "RetryDelaySeconds": ("retry", "retry_delay_seconds"),
}

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


class _Invalid:
    """Marker for a value that could not be coerced."""


_INVALID = _Invalid()


@dataclass(frozen=True)
class ConfigLoader:
    """
    Loads service configuration with 3-tier precedence.

    Priority order:
    1. Explicit overrides, e.g. from the command line (highest priority)
    2. YAML config file
    3. Built-in defaults (lowest priority)

    Bad values never fail startup: they are logged and replaced by the default.
    """

    config_path: Path
    defaults: ServiceConfig

    @classmethod
    def create(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "service.yaml"

        return cls(
            config_path=Path(config_path),
            defaults=get_default_config(),
        )

    def load_file(self) -> dict[str, Any]:
        """Load the YAML config file, returning {} when absent or unreadable."""
        if not self.config_path.exists():
            logger.info("Config file not found, using defaults", config_path=str(self.config_path))
            return {}

        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(
                "Could not read config file, using defaults",
                config_path=str(self.config_path),
                error=str(e)
            )
            return {}

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning(
                "Config file is not a mapping, using defaults",
                config_path=str(self.config_path)
            )
            return {}

        return self._normalize_keys(raw)

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Merge defaults, file values and overrides into a nested dict."""
        # Start with defaults
        config = self._dataclass_to_dict(self.defaults)

        # Apply file values
        config = self._deep_merge(config, self.load_file())

        # Apply explicit overrides
        if overrides:
            config = self._deep_merge(config, self._normalize_keys(overrides))

        return config

    def load(self, overrides: Optional[dict[str, Any]] = None) -> ServiceConfig:
        """Build a ServiceConfig, falling back to defaults for bad values."""
        merged = self.merge_config(overrides)
        default_dict = self._dataclass_to_dict(self.defaults)

        coerced: dict[str, dict[str, Any]] = {}
        for section, section_type in SECTION_TYPES.items():
            raw_section = merged.get(section)
            section_defaults = default_dict[section]
            if not isinstance(raw_section, dict):
                logger.warning("Config section is not a mapping, using defaults", section=section)
                raw_section = {}

            values = {}
            for f in fields(section_type):
                default = section_defaults[f.name]
                value = self._coerce(raw_section.get(f.name, default), default)
                if value is _INVALID:
                    logger.warning(
                        "Unparsable config value, using default",
                        section=section,
                        field=f.name,
                        value=raw_section.get(f.name),
                        default=default
                    )
                    value = default
                values[f.name] = value

            unknown = set(raw_section) - {f.name for f in fields(section_type)}
            for key in sorted(unknown):
                logger.warning("Ignoring unknown config key", section=section, field=key)

            coerced[section] = values

        for error in ConfigValidator.validate_config(coerced):
            default = default_dict[error.section][error.field]
            logger.warning(
                "Invalid config value, using default",
                section=error.section,
                field=error.field,
                value=error.value,
                reason=error.message,
                default=default
            )
            coerced[error.section][error.field] = default

        return ServiceConfig(**{
            section: section_type(**coerced[section])
            for section, section_type in SECTION_TYPES.items()
        })

    def _normalize_keys(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Move legacy flat keys into their nested sections."""
        result: dict[str, Any] = {}
        for key, value in raw.items():
            if key in LEGACY_KEYS:
                section, field_name = LEGACY_KEYS[key]
                result.setdefault(section, {})
                if isinstance(result[section], dict):
                    result[section][field_name] = value
            elif key in SECTION_TYPES and isinstance(value, dict):
                existing = result.get(key, {})
                result[key] = self._deep_merge(existing, value) if isinstance(existing, dict) else value
            elif key in SECTION_TYPES:
                result[key] = value
            else:
                logger.warning("Ignoring unknown config key", field=key)
        return result

    @staticmethod
    def _coerce(value: Any, default: Any) -> Any:
        """Coerce a raw value to the type of its default."""
        if value is None:
            return _INVALID

        if isinstance(default, bool):
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in _TRUE_STRINGS:
                    return True
                if lowered in _FALSE_STRINGS:
                    return False
            return _INVALID

        if isinstance(default, int):
            if isinstance(value, bool):
                return _INVALID
            if isinstance(value, int):
                return value
            if isinstance(value, str):
                try:
                    return int(value.strip())
                except ValueError:
                    return _INVALID
            return _INVALID

        if isinstance(default, float):
            if isinstance(value, bool):
                return _INVALID
            try:
                return float(value)
            except (TypeError, ValueError):
                return _INVALID

        if isinstance(default, str):
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                return str(value)
            return _INVALID

        return value

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(config_path: Optional[Path] = None,
                overrides: Optional[dict[str, Any]] = None) -> ServiceConfig:
    """Load the service configuration from file and overrides."""
    return ConfigLoader.create(config_path).load(overrides)
