"""
Clock abstraction and trading-calendar helpers.

Every component that needs the current time receives a Clock, so tests can
substitute a FixedClock instead of patching the system time.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Europe/London"


class Clock(ABC):
    """Source of the current local and UTC time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current local time."""
        pass

    @abstractmethod
    def utc_now(self) -> datetime:
        """Current UTC time (timezone-aware)."""
        pass


class SystemClock(Clock):
    """Wall-clock time, local time expressed in a fixed IANA zone."""

    def __init__(self, tz_name: str = DEFAULT_TIMEZONE):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def utc_now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Manually driven clock.

    Holds a UTC instant that only moves when advance() or set() is called.
    Local time is derived from it in the given zone.
    """

    def __init__(self, utc_now: datetime, tz_name: str = DEFAULT_TIMEZONE):
        self.tz = ZoneInfo(tz_name)
        self._utc_now = ensure_utc(utc_now)

    def now(self) -> datetime:
        return self._utc_now.astimezone(self.tz)

    def utc_now(self) -> datetime:
        return self._utc_now

    def set(self, utc_now: datetime) -> None:
        self._utc_now = ensure_utc(utc_now)

    def advance(self, delta: timedelta) -> None:
        self._utc_now = self._utc_now + delta


def ensure_utc(ts: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_local(utc_ts: datetime, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """
    Convert a UTC instant to local civil time in the trading zone.

    Args:
        utc_ts: UTC timestamp (naive values are taken as UTC)
        tz_name: IANA zone name

    Returns:
        Timezone-aware local datetime
    """
    return ensure_utc(utc_ts).astimezone(ZoneInfo(tz_name))


def trading_day_for(local_ts: datetime) -> date:
    """Day-ahead trading day: the local calendar date plus one day."""
    return local_ts.date() + timedelta(days=1)


def seconds_until(target: datetime, now: Optional[datetime] = None) -> float:
    """
    Seconds from now until target, never negative.

    Args:
        target: Point in time to wait for
        now: Reference time, defaults to current UTC time

    Returns:
        Non-negative delay in seconds
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return max(0.0, (target - now).total_seconds())


async def wait_or_cancel(delay_seconds: float, cancel: Optional[asyncio.Event] = None) -> bool:
    """
    Sleep for delay_seconds unless cancel is set first.

    Args:
        delay_seconds: Time to wait; zero or negative returns at once
        cancel: Event that ends the wait early when set

    Returns:
        True if the wait ended because of cancellation
    """
    if cancel is None:
        await asyncio.sleep(max(0.0, delay_seconds))
        return False

    if cancel.is_set():
        return True
    if delay_seconds <= 0:
        return False

    try:
        await asyncio.wait_for(cancel.wait(), timeout=delay_seconds)
    except asyncio.TimeoutError:
        return False
    return True
