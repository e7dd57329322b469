"""Tests for snapshot rendering and file naming."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from power_position.errors import UnsupportedPeriodError
from power_position.positions.aggregator import AggregatedPosition, aggregate_positions
from power_position.positions.snapshot import (
    CSV_HEADER,
    build_snapshot,
    format_volume,
    snapshot_filename,
)

LONDON = ZoneInfo("Europe/London")


class TestFormatVolume:
    """Test volume rendering."""

    @pytest.mark.parametrize("volume,expected", [
        (150.0, "150"),
        (80, "80"),
        (-20.0, "-20"),
        (0.0, "0"),
        (-0.0, "0"),
        (80.5, "80.5"),
        (0.1, "0.1"),
        (-1234.25, "-1234.25"),
    ])
    def test_format(self, volume, expected):
        assert format_volume(volume) == expected


class TestSnapshotFilename:
    """Test deterministic output names."""

    def test_minute_precision(self):
        ts = datetime(2025, 1, 15, 12, 0, 0, tzinfo=LONDON)
        assert snapshot_filename(ts) == "PowerPosition_20250115_1200.csv"

    def test_seconds_are_truncated(self):
        early = datetime(2025, 1, 15, 9, 5, 1, tzinfo=LONDON)
        late = datetime(2025, 1, 15, 9, 5, 59, 999999, tzinfo=LONDON)
        assert snapshot_filename(early) == snapshot_filename(late) == "PowerPosition_20250115_0905.csv"

    def test_uses_local_wall_time(self):
        # 11:30 UTC is 12:30 in London during BST
        utc_ts = datetime(2025, 7, 1, 11, 30, tzinfo=timezone.utc)
        assert snapshot_filename(utc_ts.astimezone(LONDON)) == "PowerPosition_20250701_1230.csv"


class TestBuildSnapshot:
    """Test assembling rows from an aggregated position."""

    def test_two_trade_scenario(self, sample_trades, trading_day):
        generated = datetime(2025, 1, 15, 12, 0, tzinfo=LONDON)
        snapshot = build_snapshot(aggregate_positions(sample_trades), generated, trading_day)
        lines = snapshot.to_lines()

        assert len(lines) == 25
        assert lines[0] == "Local Time,Volume"
        assert lines[1] == "23:00,150"
        assert lines[2] == "00:00,150"
        assert lines[12] == "10:00,80"
        assert lines[24] == "22:00,80"
        assert snapshot.filename == "PowerPosition_20250115_1200.csv"
        assert snapshot.trading_day == trading_day

    def test_empty_position_is_header_only(self):
        generated = datetime(2025, 1, 15, 12, 0, tzinfo=LONDON)
        snapshot = build_snapshot(AggregatedPosition({}), generated, date(2025, 1, 16))

        assert snapshot.rows == ()
        assert snapshot.to_lines() == [CSV_HEADER]

    def test_rows_follow_period_order(self):
        position = AggregatedPosition({2: 5.0, 1: 7.5})
        snapshot = build_snapshot(position, datetime(2025, 1, 15, 12, 0), date(2025, 1, 16))

        assert snapshot.rows == (("23:00", 7.5), ("00:00", 5.0))
        assert snapshot.to_lines()[1:] == ["23:00,7.5", "00:00,5"]

    def test_is_deterministic(self, sample_trades, trading_day):
        generated = datetime(2025, 1, 15, 12, 0, tzinfo=LONDON)
        position = aggregate_positions(sample_trades)

        first = build_snapshot(position, generated, trading_day)
        second = build_snapshot(position, generated, trading_day)

        assert first == second
        assert first.to_lines() == second.to_lines()

    def test_clock_change_day_is_rejected(self):
        position = AggregatedPosition({p: 1.0 for p in range(1, 26)})
        with pytest.raises(UnsupportedPeriodError):
            build_snapshot(position, datetime(2025, 10, 25, 12, 0), date(2025, 10, 26))
