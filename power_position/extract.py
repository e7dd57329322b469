"""
One extraction cycle: fetch, aggregate, render, write.

Coordinates the pipeline:
Clock → RetryPolicy(TradeSource) → aggregate → snapshot → Sink
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

import structlog

from .delivery.base import Sink
from .logging.config import get_cycle_logger, log_cycle_outcome
from .positions import NOMINAL_PERIOD_COUNT, aggregate_positions, build_snapshot
from .retry import RetryPolicy, RetryStatus
from .sources.base import TradeSource
from .utils.time import DEFAULT_TIMEZONE, Clock, to_local, trading_day_for

logger = structlog.get_logger(__name__)


class ExtractionCycle:
    """
    Produces one power position snapshot per call.

    A cycle that cannot retrieve trades writes nothing; an existing file for
    the same minute is left untouched in that case.
    """

    def __init__(
        self,
        source: TradeSource,
        sink: Sink,
        clock: Clock,
        retry_policy: RetryPolicy,
        output_directory: Union[str, Path],
        tz_name: str = DEFAULT_TIMEZONE,
        expected_periods: int = NOMINAL_PERIOD_COUNT
    ) -> None:
        self.source = source
        self.sink = sink
        self.clock = clock
        self.retry_policy = retry_policy
        self.output_directory = Path(output_directory)
        self.tz_name = tz_name
        self.expected_periods = expected_periods

    async def __call__(self, cancel: Optional[asyncio.Event] = None) -> Optional[Path]:
        return await self.run(cancel)

    async def run(self, cancel: Optional[asyncio.Event] = None) -> Optional[Path]:
        """
        Run a single extraction.

        Args:
            cancel: Event that abandons retry waits and the write when set

        Returns:
            Path of the written snapshot, or None if nothing was written
        """
        # Read the clock once so the trading day and filename agree
        started_utc = self.clock.utc_now()
        local_now = to_local(started_utc, self.tz_name)
        trading_day = trading_day_for(local_now)

        log = get_cycle_logger(__name__, trading_day, local_now)
        log.info("Running extract")

        outcome = await self.retry_policy.execute(
            lambda: self.source.get_trades(trading_day),
            cancel,
            description="get_trades"
        )

        if outcome.status == RetryStatus.CANCELLED:
            log.info("Extraction cancelled during trade retrieval", attempts=outcome.attempts)
            return None

        if outcome.status == RetryStatus.EXHAUSTED:
            log.error(
                "Failed to retrieve trades",
                attempts=outcome.attempts,
                error=str(outcome.last_error),
                error_type=type(outcome.last_error).__name__
            )
            log_cycle_outcome(log, False, self._elapsed(started_utc))
            return None

        trades = list(outcome.value or [])
        period_count = trades[0].period_count if trades else 0

        if not trades:
            log.warning("No trades returned, writing header-only snapshot")
        elif period_count != self.expected_periods:
            log.warning(
                "Unexpected settlement period count",
                expected_periods=self.expected_periods,
                actual_periods=period_count
            )

        position = aggregate_positions(trades)
        snapshot = build_snapshot(position, local_now, trading_day)
        output_path = self.output_directory / snapshot.filename

        self.sink.create_directory(self.output_directory)
        written = await self.sink.write_lines(output_path, snapshot.to_lines(), cancel)

        if written:
            log.info("CSV file written", output_path=str(output_path), rows=len(snapshot.rows))

        log_cycle_outcome(
            log,
            written,
            self._elapsed(started_utc),
            {"trade_count": len(trades), "period_count": period_count}
        )
        return output_path if written else None

    def _elapsed(self, started_utc) -> float:
        return (self.clock.utc_now() - started_utc).total_seconds()
