"""
Periodic run loop for extraction cycles.

The scheduler owns the next-run anchor and the cancellation event. It knows
nothing about trades: it calls an injected async cycle function at a fixed
interval and keeps going whatever the cycle does, until cancelled.
"""

import asyncio
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import structlog

from .utils.time import Clock, SystemClock, seconds_until, wait_or_cancel

logger = structlog.get_logger(__name__)

CycleFunc = Callable[[asyncio.Event], Awaitable[Any]]
Waiter = Callable[[float, Optional[asyncio.Event]], Awaitable[bool]]


class SchedulerState(Enum):
    """Run loop state."""
    IDLE = "idle"
    WAITING = "waiting"
    EXTRACTING = "extracting"
    STOPPED = "stopped"


class Scheduler:
    """
    Runs a cycle every interval until cancelled.

    The first cycle starts immediately. Each following run is anchored to the
    previous anchor plus the interval; when a cycle overruns, the anchor is
    moved up to the current time so the next cycle starts at once without
    queueing catch-up runs. A failing cycle is logged and never stops the loop.
    """

    def __init__(
        self,
        cycle: CycleFunc,
        interval: timedelta,
        clock: Optional[Clock] = None,
        wait: Waiter = wait_or_cancel,
        name: str = "power-position"
    ):
        if interval <= timedelta(0):
            raise ValueError(f"interval must be positive, got {interval}")

        self.cycle = cycle
        self.interval = interval
        self.clock = clock or SystemClock()
        self.name = name
        self._wait = wait

        self.state = SchedulerState.IDLE
        self.next_run: Optional[datetime] = None
        self.cycle_count = 0
        self.failed_cycles = 0
        self.last_error: Optional[str] = None

    async def run(self, cancel: asyncio.Event) -> None:
        """Run cycles until cancel is set or the task is cancelled."""
        logger.info(
            "Scheduler started",
            scheduler=self.name,
            interval_seconds=self.interval.total_seconds(),
            started_at=self.clock.now().isoformat()
        )

        self.next_run = self.clock.utc_now()

        try:
            while not cancel.is_set():
                delay = seconds_until(self.next_run, self.clock.utc_now())
                self._transition(SchedulerState.WAITING)
                if delay > 0:
                    logger.info(
                        "Waiting before next extraction",
                        scheduler=self.name,
                        delay_seconds=delay,
                        next_run=self.next_run.isoformat()
                    )
                if await self._wait(delay, cancel) or cancel.is_set():
                    break

                self._transition(SchedulerState.EXTRACTING)
                await self._run_cycle(cancel)

                self.next_run = self._advance(self.next_run)

        except asyncio.CancelledError:
            logger.info("Scheduler task cancelled", scheduler=self.name)
        finally:
            self._transition(SchedulerState.STOPPED)
            logger.info(
                "Scheduler stopped",
                scheduler=self.name,
                cycle_count=self.cycle_count,
                failed_cycles=self.failed_cycles
            )

    async def _run_cycle(self, cancel: asyncio.Event) -> None:
        self.cycle_count += 1
        try:
            await self.cycle(cancel)
        except Exception as e:
            self.failed_cycles += 1
            self.last_error = str(e)
            logger.error(
                "Error during extraction",
                scheduler=self.name,
                cycle=self.cycle_count,
                exc_info=True
            )

    def _advance(self, previous: datetime) -> datetime:
        """Next anchor: previous + interval, never earlier than now."""
        next_run = previous + self.interval
        now = self.clock.utc_now()
        if next_run < now:
            logger.warning(
                "Extraction overran its interval, next run starts immediately",
                scheduler=self.name,
                overrun_seconds=(now - next_run).total_seconds()
            )
            return now
        return next_run

    def _transition(self, new_state: SchedulerState) -> None:
        if new_state != self.state:
            logger.debug(
                "Scheduler state transition",
                scheduler=self.name,
                from_state=self.state.value,
                to_state=new_state.value
            )
            self.state = new_state

    def get_status(self) -> dict[str, Any]:
        """Current loop status."""
        return {
            "name": self.name,
            "state": self.state.value,
            "next_run": self.next_run.isoformat() if self.next_run else None,
            "cycle_count": self.cycle_count,
            "failed_cycles": self.failed_cycles,
            "last_error": self.last_error,
        }
