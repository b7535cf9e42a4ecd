"""
MatchState model for the Matchday Sideline Timekeeper application.

This module contains the MatchState dataclass: the single aggregate holding
the roster and the match clock. It is created once, shared by reference with
every service and mutated in place.
"""
import threading
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .player import Player
from ..utils import DEFAULT_MATCH_DURATION_SECONDS


@dataclass
class MatchState:
    """
    Represents the complete state of a match in progress.

    Attributes:
        all_players: Roster in insertion order
        match_start_ts: When the match clock was started (epoch seconds)
        is_match_active: Whether the match clock is running
        match_duration_seconds: Configured match length
        lock: Re-entrant lock serializing mutations of this aggregate
    """
    all_players: List[Player] = field(default_factory=list)
    match_start_ts: Optional[float] = None
    is_match_active: bool = False
    match_duration_seconds: float = float(DEFAULT_MATCH_DURATION_SECONDS)
    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    @property
    def playing_players(self) -> List[Player]:
        """Players currently on the field."""
        return [p for p in self.all_players if p.is_playing]

    @property
    def bench_players(self) -> List[Player]:
        """Players present but not on the field."""
        return [p for p in self.all_players if p.is_present and not p.is_playing]

    @property
    def present_players(self) -> List[Player]:
        return [p for p in self.all_players if p.is_present]

    @property
    def is_paused(self) -> bool:
        return self.match_start_ts is not None and not self.is_match_active

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.all_players if p.id == player_id), None)

    def get_elapsed_seconds(self, now_ts: float) -> float:
        """
        Seconds since the match clock was started.

        Args:
            now_ts: Current timestamp in epoch seconds

        Returns:
            Elapsed seconds, or 0 if the match hasn't started
        """
        if self.match_start_ts is None:
            return 0.0
        return max(0.0, now_ts - self.match_start_ts)

    def get_remaining_seconds(self, now_ts: float) -> float:
        """Remaining match seconds, never below zero."""
        return max(0.0, self.match_duration_seconds - self.get_elapsed_seconds(now_ts))

    def snapshot(self) -> "MatchState":
        """
        Create a detached copy suitable for saving in the background.

        Players are copied so later mutations of the live aggregate do not
        leak into a save that is still pending.
        """
        with self.lock:
            return MatchState(
                all_players=[replace(p) for p in self.all_players],
                match_start_ts=self.match_start_ts,
                is_match_active=self.is_match_active,
                match_duration_seconds=self.match_duration_seconds,
            )

    def replace_with(self, other: "MatchState") -> None:
        """Overwrite this aggregate in place with the contents of ``other``."""
        with self.lock:
            self.all_players[:] = list(other.all_players)
            self.match_start_ts = other.match_start_ts
            self.is_match_active = other.is_match_active
            self.match_duration_seconds = other.match_duration_seconds

    def reset_to_defaults(
        self, match_duration_seconds: float = float(DEFAULT_MATCH_DURATION_SECONDS)
    ) -> None:
        """Empty the roster and clock in place."""
        with self.lock:
            self.all_players.clear()
            self.match_start_ts = None
            self.is_match_active = False
            self.match_duration_seconds = float(match_duration_seconds)
