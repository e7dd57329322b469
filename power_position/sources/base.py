"""Base class for day-ahead trade sources."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Sequence

from ..models import Trade


class TradeSource(ABC):
    """Provides the trades booked for a trading day."""

    @abstractmethod
    async def get_trades(self, trading_day: date) -> Sequence[Trade]:
        """
        Retrieve all trades for a trading day.

        Args:
            trading_day: Day the trades settle on

        Returns:
            Trades for the day, possibly empty

        Raises:
            TransientServiceError: Retrieval failed but may succeed on retry
        """
        pass
