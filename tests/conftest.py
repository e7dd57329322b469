"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union
from unittest.mock import AsyncMock

import pytest

from power_position.delivery.base import Sink
from power_position.models import Trade
from power_position.sources.base import TradeSource
from power_position.utils.time import FixedClock


class RecordingSink(Sink):
    """Sink that keeps written lines in memory."""

    def __init__(self, succeed: bool = True):
        super().__init__("recording")
        self.succeed = succeed
        self.directories: List[Path] = []
        self.writes: List[tuple] = []

    def create_directory(self, path: Path) -> None:
        self.directories.append(Path(path))

    async def write_lines(self, path: Path, lines: Iterable[str],
                          cancel: Optional[asyncio.Event] = None) -> bool:
        if not self.succeed:
            self._error_count += 1
            return False
        self.writes.append((Path(path), list(lines)))
        self._write_count += 1
        return True

    @property
    def written_path(self) -> Optional[Path]:
        return self.writes[-1][0] if self.writes else None

    @property
    def written_lines(self) -> Optional[List[str]]:
        return self.writes[-1][1] if self.writes else None


class StaticTradeSource(TradeSource):
    """
    Trade source replaying scripted responses.

    Each call consumes the next response; the last one repeats. A response is
    either a list of trades or an exception to raise.
    """

    def __init__(self, *responses: Union[List[Trade], BaseException]):
        self.responses = list(responses) or [[]]
        self.call_count = 0
        self.requested_days: List[date] = []

    async def get_trades(self, trading_day: date) -> List[Trade]:
        self.requested_days.append(trading_day)
        response = self.responses[min(self.call_count, len(self.responses) - 1)]
        self.call_count += 1
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock at 2025-01-15 12:00 UTC (12:00 in London, GMT)."""
    return FixedClock(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def trading_day() -> date:
    """Day-ahead trading day for the fixed clock."""
    return date(2025, 1, 16)


@pytest.fixture
def sample_trades(trading_day: date) -> List[Trade]:
    """Trade A: 100 in every period. Trade B: 50 for periods 1-11, -20 after."""
    trade_a = Trade.from_volumes(trading_day, [100] * 24, trade_id="A")
    trade_b = Trade.from_volumes(
        trading_day,
        [50 if period <= 11 else -20 for period in range(1, 25)],
        trade_id="B"
    )
    return [trade_a, trade_b]


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def no_wait() -> AsyncMock:
    """Retry waiter that returns at once without cancellation."""
    return AsyncMock(return_value=False)


@pytest.fixture
def make_source():
    """Factory for scripted trade sources."""
    return StaticTradeSource


@pytest.fixture
def failing_sink() -> RecordingSink:
    """Sink whose writes report failure."""
    return RecordingSink(succeed=False)
