"""Unit tests for the periodic run loop."""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from power_position.scheduler import Scheduler, SchedulerState
from power_position.utils.time import FixedClock

INTERVAL = timedelta(minutes=15)


class FakeWaiter:
    """Advances the fixed clock instead of sleeping."""

    def __init__(self, clock: FixedClock, cancel_on_call: Optional[int] = None):
        self.clock = clock
        self.cancel_on_call = cancel_on_call
        self.delays: List[float] = []

    async def __call__(self, delay: float, cancel: Optional[asyncio.Event]) -> bool:
        self.delays.append(delay)
        if self.cancel_on_call is not None and len(self.delays) == self.cancel_on_call:
            cancel.set()
            return True
        if cancel is not None and cancel.is_set():
            return True
        self.clock.advance(timedelta(seconds=delay))
        return False


class RecordingCycle:
    """Records start times, optionally taking time or failing."""

    def __init__(self, clock: FixedClock, stop_after: int,
                 durations: Optional[List[timedelta]] = None,
                 failures: Optional[List[int]] = None):
        self.clock = clock
        self.stop_after = stop_after
        self.durations = durations or []
        self.failures = failures or []
        self.starts: List[datetime] = []

    async def __call__(self, cancel: asyncio.Event) -> None:
        self.starts.append(self.clock.utc_now())
        index = len(self.starts) - 1
        if index < len(self.durations):
            self.clock.advance(self.durations[index])
        if len(self.starts) >= self.stop_after:
            cancel.set()
        if index + 1 in self.failures:
            raise RuntimeError(f"cycle {index + 1} failed")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc))


class TestSchedulerTiming:
    """Test run anchoring and catch-up behaviour."""

    @pytest.mark.asyncio
    async def test_first_cycle_runs_immediately(self, clock):
        start = clock.utc_now()
        cycle = RecordingCycle(clock, stop_after=1)
        waiter = FakeWaiter(clock)
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=waiter)

        await scheduler.run(asyncio.Event())

        assert cycle.starts == [start]
        assert waiter.delays == [0.0]

    @pytest.mark.asyncio
    async def test_following_cycles_start_on_interval(self, clock):
        start = clock.utc_now()
        cycle = RecordingCycle(clock, stop_after=3, durations=[timedelta(seconds=30)] * 3)
        waiter = FakeWaiter(clock)
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=waiter)

        await scheduler.run(asyncio.Event())

        assert cycle.starts == [start, start + INTERVAL, start + 2 * INTERVAL]
        assert waiter.delays == [0.0, (INTERVAL - timedelta(seconds=30)).total_seconds(),
                                 (INTERVAL - timedelta(seconds=30)).total_seconds()]

    @pytest.mark.asyncio
    async def test_overrun_starts_next_cycle_without_waiting(self, clock):
        start = clock.utc_now()
        overrun = timedelta(minutes=20)
        cycle = RecordingCycle(clock, stop_after=3, durations=[overrun, timedelta(0), timedelta(0)])
        waiter = FakeWaiter(clock)
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=waiter)

        await scheduler.run(asyncio.Event())

        # Anchor moves to the end of the overrun, then resumes the interval
        assert cycle.starts == [start, start + overrun, start + overrun + INTERVAL]
        assert waiter.delays[1] == 0.0

    @pytest.mark.asyncio
    async def test_long_stall_does_not_queue_catch_up_cycles(self, clock):
        start = clock.utc_now()
        stall = timedelta(hours=2)
        cycle = RecordingCycle(clock, stop_after=3, durations=[stall, timedelta(0), timedelta(0)])
        waiter = FakeWaiter(clock)
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=waiter)

        await scheduler.run(asyncio.Event())

        assert cycle.starts[1] == start + stall
        assert cycle.starts[2] == start + stall + INTERVAL
        assert scheduler.next_run == start + stall + 2 * INTERVAL


class TestSchedulerFailures:
    """Test that cycle errors never stop the loop."""

    @pytest.mark.asyncio
    async def test_failed_cycle_is_contained(self, clock):
        cycle = RecordingCycle(clock, stop_after=3, failures=[1, 2])
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=FakeWaiter(clock))

        await scheduler.run(asyncio.Event())

        assert len(cycle.starts) == 3
        assert scheduler.cycle_count == 3
        assert scheduler.failed_cycles == 2
        assert scheduler.last_error == "cycle 2 failed"

    @pytest.mark.asyncio
    async def test_failed_cycle_keeps_schedule(self, clock):
        start = clock.utc_now()
        cycle = RecordingCycle(clock, stop_after=2, failures=[1])
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=FakeWaiter(clock))

        await scheduler.run(asyncio.Event())

        assert cycle.starts == [start, start + INTERVAL]


class TestSchedulerCancellation:
    """Test stopping the loop."""

    @pytest.mark.asyncio
    async def test_cancel_during_wait_stops_without_new_cycle(self, clock):
        cycle = RecordingCycle(clock, stop_after=99)
        waiter = FakeWaiter(clock, cancel_on_call=2)
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=waiter)

        await scheduler.run(asyncio.Event())

        assert len(cycle.starts) == 1
        assert scheduler.state == SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_already_cancelled_runs_nothing(self, clock):
        cycle = RecordingCycle(clock, stop_after=99)
        cancel = asyncio.Event()
        cancel.set()
        scheduler = Scheduler(cycle, INTERVAL, clock=clock, wait=FakeWaiter(clock))

        await scheduler.run(cancel)

        assert cycle.starts == []
        assert scheduler.state == SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_real_wait_ends_promptly_on_cancel(self):
        starts = []

        async def cycle(cancel):
            starts.append(datetime.now(timezone.utc))

        scheduler = Scheduler(cycle, timedelta(hours=1))
        cancel = asyncio.Event()
        task = asyncio.create_task(scheduler.run(cancel))

        for _ in range(100):
            if starts:
                break
            await asyncio.sleep(0.01)
        assert scheduler.state == SchedulerState.WAITING

        cancel.set()
        await asyncio.wait_for(task, timeout=5)

        assert len(starts) == 1
        assert scheduler.state == SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_task_cancellation_stops_cleanly(self):
        async def cycle(cancel):
            return None

        scheduler = Scheduler(cycle, timedelta(hours=1))
        task = asyncio.create_task(scheduler.run(asyncio.Event()))
        await asyncio.sleep(0.05)

        task.cancel()
        await asyncio.wait_for(task, timeout=5)

        assert scheduler.state == SchedulerState.STOPPED
        assert scheduler.cycle_count == 1


class TestSchedulerStatus:
    """Test construction and status reporting."""

    def test_rejects_non_positive_interval(self, clock):
        with pytest.raises(ValueError):
            Scheduler(lambda cancel: None, timedelta(0), clock=clock)

    def test_initial_status(self, clock):
        scheduler = Scheduler(lambda cancel: None, INTERVAL, clock=clock)
        status = scheduler.get_status()

        assert status["state"] == "idle"
        assert status["next_run"] is None
        assert status["cycle_count"] == 0
