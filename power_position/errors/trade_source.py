"""
Trade source error classifications.

Every PowerServiceError is retried. Any other exception escaping a trade
source aborts the cycle on the first occurrence.
"""

from datetime import date
from typing import Any, Dict, Optional

from .recovery import RecoverableError


class PowerServiceError(RecoverableError):
    """Failure reported by a trade source; retried by the retry policy."""

    def __init__(self, message: str, trading_day: Optional[date] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.trading_day = trading_day
        self.context = context or {}


class TransientServiceError(PowerServiceError):
    """Retrieval failure that may succeed on a later attempt (timeouts etc)."""
    pass
