"""
Composition root for the power position report service.

Wires configuration, clock, trade source, sink, retry policy, extraction
cycle and scheduler together, and manages shutdown signals.
"""

import asyncio
import signal
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.defaults import ServiceConfig
from .delivery import FileSink, Sink
from .extract import ExtractionCycle
from .retry import RetryPolicy
from .scheduler import Scheduler
from .sources import SimulatedTradeSource, TradeSource
from .utils.time import Clock, SystemClock

logger = structlog.get_logger(__name__)


class PowerPositionService:
    """Runs extraction cycles on a schedule until stopped."""

    def __init__(
        self,
        config: ServiceConfig,
        source: Optional[TradeSource] = None,
        sink: Optional[Sink] = None,
        clock: Optional[Clock] = None
    ) -> None:
        self.config = config
        self.clock = clock or SystemClock(config.trading.timezone)
        self.source = source or self._default_source(config)
        self.sink = sink or FileSink()

        self.retry_policy = RetryPolicy(
            retry_count=config.retry.retry_count,
            retry_delay_seconds=config.retry.retry_delay_seconds
        )
        self.cycle = ExtractionCycle(
            source=self.source,
            sink=self.sink,
            clock=self.clock,
            retry_policy=self.retry_policy,
            output_directory=config.output.output_directory,
            tz_name=config.trading.timezone,
            expected_periods=config.trading.expected_periods
        )
        self.scheduler = Scheduler(
            cycle=self.cycle,
            interval=timedelta(minutes=config.schedule.interval_minutes),
            clock=self.clock
        )
        self._cancel: Optional[asyncio.Event] = None

    @staticmethod
    def _default_source(config: ServiceConfig) -> TradeSource:
        sim = config.simulation
        return SimulatedTradeSource(
            trade_count=sim.trade_count,
            period_count=config.trading.expected_periods,
            failure_rate=sim.failure_rate,
            seed=sim.seed if sim.seed >= 0 else None
        )

    async def run(self, cancel: Optional[asyncio.Event] = None) -> None:
        """Run the scheduler until cancel is set or stop() is called."""
        self._cancel = cancel or asyncio.Event()
        logger.info(
            "Power position service started",
            output_directory=str(self.config.output.output_directory),
            interval_minutes=self.config.schedule.interval_minutes,
            retry_count=self.config.retry.retry_count,
            retry_delay_seconds=self.config.retry.retry_delay_seconds
        )
        await self.scheduler.run(self._cancel)

    async def run_once(self, cancel: Optional[asyncio.Event] = None) -> Optional[Path]:
        """Run a single extraction cycle outside the scheduler."""
        self._cancel = cancel or asyncio.Event()
        return await self.cycle.run(self._cancel)

    def stop(self) -> None:
        """Signal the run loop to finish."""
        logger.info("Stopping power position service")
        if self._cancel is not None:
            self._cancel.set()

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Stop on SIGINT/SIGTERM."""
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._handle_signal, signum)
            except (NotImplementedError, RuntimeError):
                # Windows event loops lack add_signal_handler
                try:
                    signal.signal(signum, lambda s, _frame: loop.call_soon_threadsafe(self._handle_signal, s))
                except ValueError:
                    logger.warning("Cannot install signal handler outside main thread", signal=signum)

    def _handle_signal(self, signum: int) -> None:
        logger.info("Received shutdown signal", signal=signal.Signals(signum).name)
        self.stop()

    def get_status(self) -> dict[str, Any]:
        """Scheduler and sink statistics."""
        return {
            "scheduler": self.scheduler.get_status(),
            "sink": self.sink.get_stats(),
        }
