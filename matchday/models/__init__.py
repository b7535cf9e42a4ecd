"""
Models package for the Matchday Sideline Timekeeper.

This package contains the core data models used throughout the application.
"""
from .player import Player
from .match_state import MatchState

__all__ = ["Player", "MatchState"]
