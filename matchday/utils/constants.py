"""
Constants for the Matchday Sideline Timekeeper application.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Matchday Sideline Timekeeper"

# Match timing defaults
DEFAULT_MATCH_DURATION_MIN = 30
DEFAULT_MATCH_DURATION_SECONDS = DEFAULT_MATCH_DURATION_MIN * 60

# U6 format: six players on the field, at least three present to kick off
MAX_PLAYERS_ON_FIELD = 6
MIN_PLAYERS_TO_START = 3

# Jersey numbers are handed out from 1..MAX_JERSEY_NUMBER
MAX_JERSEY_NUMBER = 99

# Key under which the whole match state is stored
STORAGE_KEY = "matchday.matchState"

# Local command API defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_DATA_DIR = "matchday_data"
