"""Settlement period to local time mapping."""

from ..errors import UnsupportedPeriodError

NOMINAL_PERIOD_COUNT = 24


def period_to_local_time(period: int) -> str:
    """
    Map a 1-based settlement period to its local start time label.

    The trading day runs from 23:00 on the previous day to 23:00, so period 1
    is "23:00", period 2 is "00:00" and period 24 is "22:00".

    Args:
        period: Settlement period index in 1..24

    Returns:
        Label formatted as HH:MM

    Raises:
        UnsupportedPeriodError: If the index is outside 1..24. Clock-change
            days (23 or 25 periods) have no defined mapping.
    """
    if isinstance(period, bool) or not isinstance(period, int):
        raise UnsupportedPeriodError(
            f"Period index must be an integer, got {period!r}", period=None
        )
    if period < 1 or period > NOMINAL_PERIOD_COUNT:
        raise UnsupportedPeriodError(
            f"Period {period} is outside 1..{NOMINAL_PERIOD_COUNT}", period=period
        )

    if period == 1:
        return "23:00"
    return f"{period - 2:02d}:00"
