"""Default configuration parameters for the power position report service."""

import os
from dataclasses import dataclass, field
from pathlib import Path


def default_output_directory() -> str:
    """Platform-appropriate reports directory."""
    if os.name == "nt":
        return "C:\\PowerPositionReports"
    return str(Path.home() / "PowerPositionReports")


@dataclass(frozen=True)
class ScheduleParams:
    """Extraction schedule parameters."""
    interval_minutes: int = 15                      # Time between cycle starts


@dataclass(frozen=True)
class RetryParams:
    """Trade retrieval retry parameters."""
    retry_count: int = 3                            # Total attempts per cycle
    retry_delay_seconds: int = 2                    # Wait between attempts


@dataclass(frozen=True)
class OutputParams:
    """Snapshot output parameters."""
    output_directory: str = field(default_factory=default_output_directory)


@dataclass(frozen=True)
class TradingParams:
    """Trading calendar parameters."""
    timezone: str = "Europe/London"                 # Zone for local time labels
    expected_periods: int = 24                      # Nominal settlement periods


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class SimulationParams:
    """Simulated trade source parameters."""
    trade_count: int = 2
    failure_rate: float = 0.1                       # Probability of a transient failure
    seed: int = -1                                  # Negative means unseeded


@dataclass(frozen=True)
class ServiceConfig:
    """Complete service configuration."""
    schedule: ScheduleParams
    retry: RetryParams
    output: OutputParams
    trading: TradingParams
    logging: LoggingParams
    simulation: SimulationParams


def get_default_config() -> ServiceConfig:
    """Get the default configuration instance."""
    return ServiceConfig(
        schedule=ScheduleParams(),
        retry=RetryParams(),
        output=OutputParams(),
        trading=TradingParams(),
        logging=LoggingParams(),
        simulation=SimulationParams(),
    )
