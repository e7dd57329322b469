"""
System failure error classifications.

These errors end the current extraction cycle. The scheduler logs them and
moves on to the next scheduled run.
"""

from typing import Any, Dict, Optional


class SystemFailureError(Exception):
    """Base class for failures that abort a cycle."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class UnsupportedPeriodError(SystemFailureError, ValueError):
    """Settlement period index has no defined local-time label."""

    def __init__(self, message: str, period: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.period = period


class PersistenceError(SystemFailureError):
    """File system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
