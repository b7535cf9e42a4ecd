"""
Player model for the Matchday Sideline Timekeeper application.

This module contains the Player dataclass which represents an individual
player on the roster and their playing-time bookkeeping.
"""
import uuid
from dataclasses import dataclass, field
from typing import Optional


def _new_player_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Player:
    """
    Represents a rostered player with playing time tracking.

    Playing time accumulates in sessions. A session is open while the player
    is on the field and the match clock runs; ``playing_start_ts`` marks its
    start and ``playing_time`` only holds the seconds of closed (flushed)
    sessions.

    Attributes:
        name: Player's display name (trimmed, non-empty)
        number: Jersey number, unique within the roster
        id: Opaque identifier assigned at creation
        is_present: Whether the player showed up for this match
        is_playing: Whether the player currently occupies a field slot
        playing_time: Seconds accumulated over closed sessions
        playing_start_ts: Epoch seconds when the open session started
    """
    name: str
    number: int = 0
    id: str = field(default_factory=_new_player_id)
    is_present: bool = True
    is_playing: bool = False
    playing_time: float = 0.0
    playing_start_ts: Optional[float] = None

    def begin_session(self, now_ts: float) -> None:
        """
        Open a playing session at ``now_ts`` unless one is already open.

        Args:
            now_ts: Current timestamp in epoch seconds
        """
        if self.playing_start_ts is None:
            self.playing_start_ts = now_ts

    def flush_session(self, now_ts: float) -> float:
        """
        Settle the open session into ``playing_time`` and keep it open from now.

        Args:
            now_ts: Current timestamp in epoch seconds

        Returns:
            Seconds added to ``playing_time`` (0 when no session is open)
        """
        if self.playing_start_ts is None:
            return 0.0
        delta = max(0.0, now_ts - self.playing_start_ts)
        self.playing_time += delta
        self.playing_start_ts = now_ts
        return delta

    def end_session(self, now_ts: float) -> float:
        """
        Settle the open session and close it.

        Returns:
            Seconds added to ``playing_time``
        """
        delta = self.flush_session(now_ts)
        self.playing_start_ts = None
        return delta

    def leave_field(self, now_ts: float, clock_running: bool) -> None:
        """
        Take the player off the field, settling time only while the clock runs.

        Args:
            now_ts: Current timestamp in epoch seconds
            clock_running: Whether the match clock is currently running
        """
        if clock_running:
            self.end_session(now_ts)
        self.is_playing = False
        self.playing_start_ts = None

    def reset_time(self) -> None:
        """Clear field and time data for a fresh match."""
        self.is_playing = False
        self.playing_time = 0.0
        self.playing_start_ts = None

    def current_playing_seconds(self, now_ts: float) -> float:
        """
        Calculate total playing seconds including the open session.

        Args:
            now_ts: Current timestamp in epoch seconds

        Returns:
            Closed-session total plus the running session, if any
        """
        if self.playing_start_ts is None:
            return self.playing_time
        return self.playing_time + max(0.0, now_ts - self.playing_start_ts)
