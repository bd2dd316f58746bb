"""Structured logging utilities."""

from .events import JsonlStatsLogger, StatsEvent, sanitize_metadata, utc_timestamp

__all__ = ["JsonlStatsLogger", "StatsEvent", "sanitize_metadata", "utc_timestamp"]
