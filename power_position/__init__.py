"""
Power Position Report Service

Periodically extracts day-ahead power trades, aggregates their volumes per
settlement period and writes a timestamped CSV snapshot of the position,
tolerating transient failures of the trading system.
"""

__version__ = "0.1.0"
__author__ = "Power Position Team"
