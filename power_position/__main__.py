"""
Command-line entry point.

Usage:
    # Run on the configured schedule until Ctrl+C
    python -m power_position

    # Use a specific config file
    python -m power_position --config config/service.yaml

    # Run a single extraction and exit
    python -m power_position --once

    # Override output directory and interval
    python -m power_position --output-dir ./reports --interval 5
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from .config.loader import load_config
from .config.validation import VALID_LOG_LEVELS
from .logging.config import configure_logging
from .service import PowerPositionService

logger = structlog.get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="power-position",
        description="Extract day-ahead power positions to CSV on a schedule",
    )
    parser.add_argument("--config", type=Path, default=None,
                        help="Path to a YAML config file")
    parser.add_argument("--output-dir", default=None,
                        help="Directory snapshots are written to")
    parser.add_argument("--interval", default=None,
                        help="Minutes between extractions")
    parser.add_argument("--retry-count", default=None,
                        help="Trade retrieval attempts per extraction")
    parser.add_argument("--retry-delay", default=None,
                        help="Seconds between retrieval attempts")
    parser.add_argument("--once", action="store_true",
                        help="Run a single extraction and exit")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--json-logs", action="store_true",
                        help="Emit logs as JSON lines")
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map command-line flags onto config sections."""
    overrides: dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    put("output", "output_directory", args.output_dir)
    put("schedule", "interval_minutes", args.interval)
    put("retry", "retry_count", args.retry_count)
    put("retry", "retry_delay_seconds", args.retry_delay)
    put("logging", "level", args.log_level)
    if args.json_logs:
        put("logging", "format_json", True)

    return overrides


async def _run(service: PowerPositionService, once: bool) -> int:
    if once:
        path = await service.run_once()
        return 0 if path is not None else 1

    service.install_signal_handlers(asyncio.get_running_loop())
    await service.run()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # Early logging so config warnings are visible
    early_level = (args.log_level or "INFO").upper()
    if early_level not in VALID_LOG_LEVELS:
        early_level = "INFO"
    configure_logging(level=early_level, format_json=args.json_logs)

    try:
        config = load_config(args.config, build_overrides(args))
        configure_logging(level=config.logging.level, format_json=config.logging.format_json)

        logger.info("Starting up the service")
        service = PowerPositionService(config)
        return asyncio.run(_run(service, args.once))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except Exception:
        logger.critical("The service terminated unexpectedly", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
