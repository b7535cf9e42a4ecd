"""Timer service for the Matchday Sideline Timekeeper application."""

import logging
from typing import Optional

from ..models import MatchState
from ..utils import now_ts
from .persistence_service import AutoSaver

logger = logging.getLogger(__name__)


class TimerService:
    """
    Service for the match clock and per-player playing time.

    Clock states:
        not started  match_start_ts is None, inactive
        running      match_start_ts set, active
        paused       match_start_ts set, inactive

    While running, every on-field player has an open session. Sessions are
    settled into ``playing_time`` whenever the clock pauses and on each
    ``update_playing_times`` tick.
    """

    def __init__(self, match_state: MatchState, autosaver: AutoSaver):
        self.match_state = match_state
        self.autosaver = autosaver

    # ------------------------------------------------------------------
    # Clock controls
    # ------------------------------------------------------------------
    def start_match(self) -> None:
        """Start the match clock. No-op while it is already running."""
        with self.match_state.lock:
            if self.match_state.is_match_active:
                return
            now = now_ts()
            self.match_state.match_start_ts = now
            self.match_state.is_match_active = True
            for player in self.match_state.playing_players:
                player.begin_session(now)
            logger.info("Match started with %d players on the field",
                        len(self.match_state.playing_players))
            self.autosaver.request_save("starting match")

    def pause_match(self) -> None:
        """Pause the clock and settle every open session. No-op unless running."""
        with self.match_state.lock:
            if not self.match_state.is_match_active:
                return
            now = now_ts()
            for player in self.match_state.playing_players:
                player.end_session(now)
            self.match_state.is_match_active = False
            logger.info("Match paused")
            self.autosaver.request_save("pausing match")

    def resume_match(self) -> None:
        """Resume a paused match, opening fresh sessions. No-op unless paused."""
        with self.match_state.lock:
            if not self.match_state.is_paused:
                return
            now = now_ts()
            self.match_state.is_match_active = True
            for player in self.match_state.playing_players:
                player.playing_start_ts = now
            logger.info("Match resumed")
            self.autosaver.request_save("resuming match")

    def reset_match(self) -> None:
        """Stop the clock and wipe field and time data for every player."""
        with self.match_state.lock:
            self.match_state.is_match_active = False
            self.match_state.match_start_ts = None
            for player in self.match_state.all_players:
                player.reset_time()
            logger.info("Match reset")
            self.autosaver.request_save("resetting match")

    def update_playing_times(self) -> None:
        """
        Roll every open session forward to now without ending it.

        Meant to be called on a display refresh tick; it does not save.
        """
        with self.match_state.lock:
            if not self.match_state.is_match_active:
                return
            now = now_ts()
            for player in self.match_state.playing_players:
                player.flush_session(now)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_elapsed_seconds(self) -> float:
        return self.match_state.get_elapsed_seconds(now_ts())

    def get_remaining_seconds(self) -> float:
        return self.match_state.get_remaining_seconds(now_ts())

    def get_match_phase(self) -> str:
        if self.match_state.match_start_ts is None:
            return "not_started"
        return "running" if self.match_state.is_match_active else "paused"

    def get_player_playing_seconds(self, player_id: str) -> Optional[float]:
        """Live playing seconds for a player, including the open session."""
        player = self.match_state.find_player(player_id)
        if player is None:
            return None
        return player.current_playing_seconds(now_ts())
