"""
Utilities package for the Matchday Sideline Timekeeper.

This package contains constants, configuration and time helpers used
throughout the application.
"""
from .time_utils import fmt_mmss, now_ts, ts_to_iso, parse_timestamp, parse_duration
from .constants import (
    APP_TITLE, DEFAULT_MATCH_DURATION_MIN, DEFAULT_MATCH_DURATION_SECONDS,
    MAX_PLAYERS_ON_FIELD, MIN_PLAYERS_TO_START, MAX_JERSEY_NUMBER, STORAGE_KEY
)
from .config import AppConfig

__all__ = [
    "fmt_mmss", "now_ts", "ts_to_iso", "parse_timestamp", "parse_duration",
    "APP_TITLE", "DEFAULT_MATCH_DURATION_MIN", "DEFAULT_MATCH_DURATION_SECONDS",
    "MAX_PLAYERS_ON_FIELD", "MIN_PLAYERS_TO_START", "MAX_JERSEY_NUMBER",
    "STORAGE_KEY", "AppConfig"
]
