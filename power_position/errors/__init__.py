"""
Error classification for the power position report service.

Errors are split by how a cycle reacts to them: trade source failures that
are worth retrying, failures that end the current cycle, and persistence
failures raised by the sink.
"""

from .trade_source import (
    PowerServiceError,
    TransientServiceError,
)
from .system_failures import (
    SystemFailureError,
    UnsupportedPeriodError,
    PersistenceError,
)
from .recovery import (
    RecoverableError,
)

__all__ = [
    # Trade source errors
    "PowerServiceError",
    "TransientServiceError",
    # System failures
    "SystemFailureError",
    "UnsupportedPeriodError",
    "PersistenceError",
    # Recovery categories
    "RecoverableError",
]
