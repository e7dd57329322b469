"""
Per-period volume aggregation across the trades of one trading day.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Iterator, Sequence

import structlog

from ..models import Trade

logger = structlog.get_logger(__name__)


class AggregatedPosition(Mapping):
    """Read-only mapping of period index (1..N) to total volume."""

    def __init__(self, volumes: dict[int, float]):
        self._volumes = MappingProxyType(dict(volumes))

    def __getitem__(self, period: int) -> float:
        return self._volumes[period]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._volumes))

    def __len__(self) -> int:
        return len(self._volumes)

    def __repr__(self) -> str:
        return f"AggregatedPosition({dict(self._volumes)!r})"

    @property
    def period_count(self) -> int:
        return len(self._volumes)

    def rows(self) -> list[tuple[int, float]]:
        """(period, volume) pairs in ascending period order."""
        return [(period, self._volumes[period]) for period in self]


def aggregate_positions(trades: Sequence[Trade]) -> AggregatedPosition:
    """
    Sum volumes per settlement period across all trades.

    The period count is taken from the first trade. Trades with a different
    period count are reported but still contribute the periods they share.

    Args:
        trades: Trades for a single trading day, possibly empty

    Returns:
        AggregatedPosition for periods 1..period_count (empty if no trades)
    """
    if not trades:
        return AggregatedPosition({})

    period_count = trades[0].period_count

    for position, trade in enumerate(trades[1:], start=1):
        if trade.period_count != period_count:
            logger.warning(
                "Trade period count differs from first trade",
                trade_position=position,
                trade_id=trade.trade_id,
                expected_periods=period_count,
                actual_periods=trade.period_count,
            )

    totals = {period: 0.0 for period in range(1, period_count + 1)}
    for trade in trades:
        for period in trade.periods:
            if period.index in totals:
                totals[period.index] += period.volume

    return AggregatedPosition(totals)
