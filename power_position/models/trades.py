"""
Canonical data models for day-ahead power trades.

Trades are produced by a trade source and are read-only to the rest of the
system. Period index uniqueness and contiguity are the source's concern.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional


@dataclass(frozen=True)
class Period:
    """Volume traded for a single settlement period."""
    index: int         # 1-based settlement period
    volume: float      # Signed volume (MW)


@dataclass(frozen=True)
class Trade:
    """A trade for one trading day, one Period per settlement period."""
    trading_day: date
    periods: tuple[Period, ...]
    trade_id: Optional[str] = None

    @property
    def period_count(self) -> int:
        return len(self.periods)

    @classmethod
    def from_volumes(cls, trading_day: date, volumes: Iterable[float],
                     trade_id: Optional[str] = None) -> "Trade":
        """Create a trade whose i-th volume belongs to period i + 1."""
        periods = tuple(
            Period(index=i, volume=float(v)) for i, v in enumerate(volumes, start=1)
        )
        return cls(trading_day=trading_day, periods=periods, trade_id=trade_id)
