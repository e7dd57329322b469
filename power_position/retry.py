"""
Bounded retry with a fixed delay for trade retrieval.

The policy is a small state machine: each attempt either succeeds, fails
transiently (wait, then try again while attempts remain) or fails with any
other error (propagated untouched). Cancellation during a wait ends the
whole operation with its own status.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import structlog

from .errors import RecoverableError
from .utils.time import wait_or_cancel

logger = structlog.get_logger(__name__)

T = TypeVar("T")

Waiter = Callable[[float, Optional[asyncio.Event]], Awaitable[bool]]


class RetryStatus(Enum):
    """State of a retried operation."""
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass
class RetryOutcome(Generic[T]):
    """Result of running an operation under a RetryPolicy."""
    status: RetryStatus
    attempts: int = 0
    value: Optional[T] = None
    last_error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.status == RetryStatus.SUCCEEDED


def is_transient(error: BaseException) -> bool:
    """Default classification: only RecoverableError subclasses are retried."""
    return isinstance(error, RecoverableError)


class RetryPolicy:
    """Runs an async operation up to retry_count times."""

    def __init__(
        self,
        retry_count: int = 3,
        retry_delay_seconds: float = 2,
        classify: Callable[[BaseException], bool] = is_transient,
        wait: Waiter = wait_or_cancel
    ):
        if retry_count < 1:
            raise ValueError(f"retry_count must be at least 1, got {retry_count}")
        if retry_delay_seconds < 0:
            raise ValueError(f"retry_delay_seconds must not be negative, got {retry_delay_seconds}")

        self.retry_count = retry_count
        self.retry_delay_seconds = retry_delay_seconds
        self._classify = classify
        self._wait = wait

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        cancel: Optional[asyncio.Event] = None,
        description: str = "operation"
    ) -> RetryOutcome[T]:
        """
        Run operation until it succeeds, attempts run out or cancel is set.

        Args:
            operation: Zero-argument coroutine function to call per attempt
            cancel: Event that abandons the operation when set
            description: Name used in log events

        Returns:
            RetryOutcome with SUCCEEDED, EXHAUSTED or CANCELLED status

        Raises:
            Exception: Any error the classifier does not consider transient,
                on the attempt it occurs
        """
        outcome: RetryOutcome[T] = RetryOutcome(status=RetryStatus.PENDING)

        while outcome.status == RetryStatus.PENDING:
            if cancel is not None and cancel.is_set():
                outcome.status = RetryStatus.CANCELLED
                break

            outcome.attempts += 1
            try:
                outcome.value = await operation()
                outcome.status = RetryStatus.SUCCEEDED
                break
            except Exception as e:
                if not self._classify(e):
                    raise
                outcome.last_error = e

            logger.warning(
                "Attempt failed",
                operation=description,
                attempt=outcome.attempts,
                max_attempts=self.retry_count,
                error=str(outcome.last_error)
            )

            if outcome.attempts >= self.retry_count:
                outcome.status = RetryStatus.EXHAUSTED
            elif await self._wait(self.retry_delay_seconds, cancel):
                outcome.status = RetryStatus.CANCELLED

        if outcome.status == RetryStatus.CANCELLED:
            logger.info("Retry cancelled", operation=description, attempts=outcome.attempts)

        return outcome
