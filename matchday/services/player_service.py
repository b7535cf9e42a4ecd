"""
Player service for the Matchday Sideline Timekeeper application.

This module manages the roster: adding and removing players, jersey numbers
and match-day presence.
"""
import logging
from typing import List, Optional

from ..models import MatchState, Player
from ..utils import MAX_JERSEY_NUMBER, now_ts
from .errors import ValidationError
from .persistence_service import AutoSaver

logger = logging.getLogger(__name__)


class PlayerService:
    """
    Service class for managing the roster held by the shared match state.

    Lookups by an unknown id return None/False rather than raising.
    """

    def __init__(self, match_state: MatchState, autosaver: AutoSaver):
        """
        Initialize PlayerService.

        Args:
            match_state: Shared match state whose roster this service manages
            autosaver: Auto-saver notified after each successful change
        """
        self.match_state = match_state
        self.autosaver = autosaver

    def get_all_players(self) -> List[Player]:
        """Return a copy of the roster list in roster order."""
        with self.match_state.lock:
            return list(self.match_state.all_players)

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.match_state.find_player(player_id)

    def get_playing_players(self) -> List[Player]:
        return self.match_state.playing_players

    def get_bench_players(self) -> List[Player]:
        return self.match_state.bench_players

    def add_player(self, name: str) -> Player:
        """
        Add a player with the lowest free jersey number.

        Args:
            name: Player's name; surrounding whitespace is dropped

        Returns:
            The new Player

        Raises:
            ValidationError: If the name is empty or whitespace only
        """
        if name is None or not str(name).strip():
            raise ValidationError("Player name cannot be empty")

        with self.match_state.lock:
            player = Player(name=str(name).strip(), number=self._next_available_number())
            self.match_state.all_players.append(player)
            logger.info("Added player %s (#%d)", player.name, player.number)
            self.autosaver.request_save(f"adding player {player.name}")
        return player

    def remove_player(self, player_id: str) -> bool:
        """
        Remove a player from the roster.

        A player on the field is taken off first so their open session is
        settled before they disappear.

        Returns:
            True if the player was removed, False if not found
        """
        with self.match_state.lock:
            player = self.match_state.find_player(player_id)
            if player is None:
                return False
            if player.is_playing:
                player.leave_field(now_ts(), self.match_state.is_match_active)
            self.match_state.all_players.remove(player)
            logger.info("Removed player %s", player.name)
            self.autosaver.request_save(f"removing player {player.name}")
        return True

    def update_presence(self, player_id: str, is_present: bool) -> bool:
        """
        Mark a player present or absent.

        Marking a playing player absent takes them off the field and settles
        their open session.

        Returns:
            True on success, False if the player was not found
        """
        with self.match_state.lock:
            player = self.match_state.find_player(player_id)
            if player is None:
                return False
            player.is_present = bool(is_present)
            if not player.is_present and player.is_playing:
                player.leave_field(now_ts(), self.match_state.is_match_active)
            self.autosaver.request_save(f"updating presence of {player.name}")
        return True

    def update_number(self, player_id: str, number: int) -> bool:
        """
        Change a player's jersey number.

        Returns:
            False if the number is not positive, the player does not exist or
            another player already wears that number
        """
        try:
            number = int(number)
        except (TypeError, ValueError):
            return False
        if number <= 0:
            return False

        with self.match_state.lock:
            player = self.match_state.find_player(player_id)
            if player is None:
                return False
            if any(p.id != player_id and p.number == number for p in self.match_state.all_players):
                return False
            player.number = number
            self.autosaver.request_save(f"renumbering {player.name}")
        return True

    def _next_available_number(self) -> int:
        used = {p.number for p in self.match_state.all_players}
        for number in range(1, MAX_JERSEY_NUMBER + 1):
            if number not in used:
                return number
        # every jersey is taken; may collide
        return len(self.match_state.all_players) + 1
