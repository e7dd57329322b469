"""
Position aggregation and snapshot rendering.

Pure functions only: nothing in this package touches the clock, the trade
source or the file system.
"""

from .aggregator import AggregatedPosition, aggregate_positions
from .periods import NOMINAL_PERIOD_COUNT, period_to_local_time
from .snapshot import CSV_HEADER, Snapshot, build_snapshot, format_volume, snapshot_filename

__all__ = [
    "AggregatedPosition",
    "aggregate_positions",
    "NOMINAL_PERIOD_COUNT",
    "period_to_local_time",
    "CSV_HEADER",
    "Snapshot",
    "build_snapshot",
    "format_volume",
    "snapshot_filename",
]
