"""
Field roster service for the Matchday Sideline Timekeeper application.

This module enforces the field cap, validates substitutions and coordinates
with the match clock when players enter or leave the field.
"""
import logging

from ..models import MatchState
from ..utils import MAX_PLAYERS_ON_FIELD, MIN_PLAYERS_TO_START, now_ts
from .persistence_service import AutoSaver
from .timer_service import TimerService

logger = logging.getLogger(__name__)


class FieldService:
    """Service for moving players between the bench and the field."""

    MAX_PLAYERS_ON_FIELD = MAX_PLAYERS_ON_FIELD

    def __init__(self, match_state: MatchState, timer_service: TimerService, autosaver: AutoSaver):
        self.match_state = match_state
        self.timer_service = timer_service
        self.autosaver = autosaver

    def get_max_players_on_field(self) -> int:
        return self.MAX_PLAYERS_ON_FIELD

    def can_add_player_to_field(self) -> bool:
        return len(self.match_state.playing_players) < self.MAX_PLAYERS_ON_FIELD

    def add_player_to_field(self, player_id: str) -> bool:
        """
        Put a bench player on the field.

        A session opens immediately when the clock is running.

        Returns:
            False if the player is unknown, absent, already playing, or the
            field is full
        """
        with self.match_state.lock:
            player = self.match_state.find_player(player_id)
            if player is None or not player.is_present or player.is_playing:
                return False
            if not self.can_add_player_to_field():
                return False

            player.is_playing = True
            if self.match_state.is_match_active:
                player.playing_start_ts = now_ts()
            self.autosaver.request_save(f"adding {player.name} to the field")
        return True

    def remove_player_from_field(self, player_id: str) -> bool:
        """
        Send a player to the bench, settling their open session.

        Returns:
            False if the player is unknown or not on the field
        """
        with self.match_state.lock:
            player = self.match_state.find_player(player_id)
            if player is None or not player.is_playing:
                return False

            player.leave_field(now_ts(), self.match_state.is_match_active)
            self.autosaver.request_save(f"removing {player.name} from the field")
        return True

    def substitute_player(self, player_in_id: str, player_out_id: str) -> bool:
        """
        Swap a bench player in for a field player.

        All checks run before anything changes, so a failed substitution
        leaves the state untouched.

        Args:
            player_in_id: Id of the present bench player coming on
            player_out_id: Id of the field player coming off

        Returns:
            True if the substitution happened
        """
        with self.match_state.lock:
            player_in = self.match_state.find_player(player_in_id)
            player_out = self.match_state.find_player(player_out_id)
            if player_in is None or player_out is None:
                return False
            if not player_in.is_present or player_in.is_playing:
                return False
            if not player_out.is_playing:
                return False

            with self.autosaver.deferred(f"substituting {player_in.name} for {player_out.name}"):
                self.remove_player_from_field(player_out_id)
                self.add_player_to_field(player_in_id)
            logger.info("Substitution: %s on, %s off", player_in.name, player_out.name)
        return True

    def initialize_match(self, start_with_players: bool = False) -> bool:
        """
        Reset and kick off a new match.

        Args:
            start_with_players: Fill the field with up to six present players,
                in roster order, before starting the clock

        Returns:
            False (nothing changed) if fewer than three players are present
        """
        with self.match_state.lock:
            present = self.match_state.present_players
            if len(present) < MIN_PLAYERS_TO_START:
                logger.info("Cannot initialize match: only %d players present", len(present))
                return False

            with self.autosaver.deferred("initializing match"):
                self.timer_service.reset_match()
                if start_with_players:
                    for player in present[: self.MAX_PLAYERS_ON_FIELD]:
                        self.add_player_to_field(player.id)
                self.timer_service.start_match()
        return True
