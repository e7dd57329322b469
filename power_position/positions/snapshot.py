"""
Snapshot rendering: CSV rows and the output filename.

build_snapshot() is a pure function of the aggregated position and the
local generation time; writing the lines is left to a Sink.
"""

from dataclasses import dataclass
from datetime import date, datetime

from .aggregator import AggregatedPosition
from .periods import period_to_local_time

CSV_HEADER = "Local Time,Volume"
FILENAME_PREFIX = "PowerPosition"


@dataclass(frozen=True)
class Snapshot:
    """Aggregated positions for one trading day, ready to be written."""
    generated_at_local: datetime
    trading_day: date
    rows: tuple[tuple[str, float], ...]    # (local time label, volume)

    @property
    def filename(self) -> str:
        return snapshot_filename(self.generated_at_local)

    def to_lines(self) -> list[str]:
        """CSV lines including the header."""
        lines = [CSV_HEADER]
        lines.extend(f"{label},{format_volume(volume)}" for label, volume in self.rows)
        return lines


def format_volume(volume: float) -> str:
    """
    Render a volume without padding.

    Integral values have no decimal point (150.0 -> "150"); everything else
    uses the shortest representation that round-trips.
    """
    value = float(volume)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def snapshot_filename(generated_at_local: datetime) -> str:
    """PowerPosition_YYYYMMDD_HHMM.csv, truncated to the minute."""
    return f"{FILENAME_PREFIX}_{generated_at_local:%Y%m%d_%H%M}.csv"


def build_snapshot(position: AggregatedPosition, generated_at_local: datetime,
                   trading_day: date) -> Snapshot:
    """
    Build the snapshot for an aggregated position.

    Args:
        position: Per-period totals
        generated_at_local: Local time the extraction ran
        trading_day: Trading day the totals belong to

    Returns:
        Snapshot with one row per period in ascending order
    """
    rows = tuple(
        (period_to_local_time(period), volume) for period, volume in position.rows()
    )
    return Snapshot(
        generated_at_local=generated_at_local,
        trading_day=trading_day,
        rows=rows,
    )
