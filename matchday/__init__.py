"""
Matchday Sideline Timekeeper

Tracks a youth soccer match in progress: who is present, who is on the field,
the match clock and each player's playing time, with the state saved to a
local key-value store after every change.
"""
from .models import Player, MatchState
from .services import (
    PlayerService, TimerService, FieldService, PersistenceService, ServiceFactory
)
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "MatchState", "PlayerService", "TimerService", "FieldService",
    "PersistenceService", "ServiceFactory", "fmt_mmss", "now_ts", "APP_TITLE"
]
