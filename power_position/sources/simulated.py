"""
Simulated trade source for local runs and demos.

Produces random trades for the requested day and fails transiently with a
configurable probability, standing in for the trading system's API.
"""

import asyncio
import random
import uuid
from datetime import date
from typing import Optional

import structlog

from ..errors import TransientServiceError
from ..models import Trade
from ..positions.periods import NOMINAL_PERIOD_COUNT
from .base import TradeSource

logger = structlog.get_logger(__name__)


class SimulatedTradeSource(TradeSource):
    """Random trade generator with injectable failures."""

    def __init__(
        self,
        trade_count: int = 2,
        period_count: int = NOMINAL_PERIOD_COUNT,
        failure_rate: float = 0.1,
        max_volume: float = 500.0,
        latency_seconds: float = 0.0,
        seed: Optional[int] = None
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError(f"failure_rate must be within 0..1, got {failure_rate}")

        self.trade_count = trade_count
        self.period_count = period_count
        self.failure_rate = failure_rate
        self.max_volume = max_volume
        self.latency_seconds = latency_seconds
        self._rng = random.Random(seed)
        self.call_count = 0

    async def get_trades(self, trading_day: date) -> list[Trade]:
        self.call_count += 1

        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)

        if self._rng.random() < self.failure_rate:
            logger.debug("Simulated trade source failure", trading_day=trading_day.isoformat())
            raise TransientServiceError(
                "Simulated trade service timeout", trading_day=trading_day
            )

        trades = [
            Trade.from_volumes(
                trading_day,
                (self._random_volume() for _ in range(self.period_count)),
                trade_id=str(uuid.UUID(int=self._rng.getrandbits(128), version=4))
            )
            for _ in range(self.trade_count)
        ]

        logger.debug(
            "Simulated trades generated",
            trading_day=trading_day.isoformat(),
            trade_count=len(trades)
        )
        return trades

    def _random_volume(self) -> float:
        # Whole MW volumes, signed
        return float(self._rng.randint(-int(self.max_volume), int(self.max_volume)))
