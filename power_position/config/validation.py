"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    section: str
    field: str
    message: str
    value: Any


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration sections after type coercion."""

    @staticmethod
    def validate_schedule_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate schedule parameters."""
        errors = []

        if "interval_minutes" in params:
            value = params["interval_minutes"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    section="schedule",
                    field="interval_minutes",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_retry_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate retry parameters."""
        errors = []

        if "retry_count" in params:
            value = params["retry_count"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    section="retry",
                    field="retry_count",
                    message="Must be a positive integer",
                    value=value
                ))

        if "retry_delay_seconds" in params:
            value = params["retry_delay_seconds"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    section="retry",
                    field="retry_delay_seconds",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_output_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate output parameters."""
        errors = []

        if "output_directory" in params:
            value = params["output_directory"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    section="output",
                    field="output_directory",
                    message="Must be a non-empty path",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_trading_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trading calendar parameters."""
        errors = []

        if "timezone" in params:
            value = params["timezone"]
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, TypeError, ValueError):
                errors.append(ValidationError(
                    section="trading",
                    field="timezone",
                    message="Must be a known IANA time zone",
                    value=value
                ))

        if "expected_periods" in params:
            value = params["expected_periods"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    section="trading",
                    field="expected_periods",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in VALID_LOG_LEVELS:
                errors.append(ValidationError(
                    section="logging",
                    field="level",
                    message=f"Must be one of {', '.join(VALID_LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    section="logging",
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_simulation_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate simulated trade source parameters."""
        errors = []

        if "trade_count" in params:
            value = params["trade_count"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    section="simulation",
                    field="trade_count",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "failure_rate" in params:
            value = params["failure_rate"]
            if not _is_number(value) or value < 0 or value > 1:
                errors.append(ValidationError(
                    section="simulation",
                    field="failure_rate",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        if "seed" in params:
            value = params["seed"]
            if not _is_int(value):
                errors.append(ValidationError(
                    section="simulation",
                    field="seed",
                    message="Must be an integer",
                    value=value
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate every known section of a merged configuration."""
        validators = {
            "schedule": cls.validate_schedule_params,
            "retry": cls.validate_retry_params,
            "output": cls.validate_output_params,
            "trading": cls.validate_trading_params,
            "logging": cls.validate_logging_params,
            "simulation": cls.validate_simulation_params,
        }

        errors = []
        for section, validator in validators.items():
            params = config.get(section)
            if isinstance(params, dict):
                errors.extend(validator(params))
        return errors
