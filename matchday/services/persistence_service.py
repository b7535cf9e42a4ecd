"""
Persistence service for the Matchday Sideline Timekeeper application.

This module saves and restores the match state to/from a key-value store
under a single key, and provides the auto-saver that the other services use
to mirror every committed mutation in the background.
"""
import asyncio
import concurrent.futures
import contextlib
import json
import logging
from typing import Any, Dict, Iterator, Optional

from ..models import MatchState, Player
from ..utils import (
    DEFAULT_MATCH_DURATION_SECONDS, STORAGE_KEY,
    parse_duration, parse_timestamp, ts_to_iso
)
from .background import BackgroundTaskRunner
from .errors import PersistenceError
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


def _fold(key: str) -> str:
    return key.replace("_", "").lower()


def _folded(data: Dict[str, Any]) -> Dict[str, Any]:
    """Index a JSON object by case- and underscore-insensitive keys."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return {_fold(k): v for k, v in data.items()}


_TRUE_WORDS = ("true", "1", "yes")
_FALSE_WORDS = ("false", "0", "no")


def _as_bool(value: Any, default: bool) -> bool:
    """
    Read a persisted flag, accepting booleans, 0/1 and "true"/"false" spellings.

    Raises:
        ValueError: If the value is not recognizable as a flag
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"Invalid flag: {value!r}")


def player_to_dict(player: Player) -> Dict[str, Any]:
    return {
        "id": player.id,
        "name": player.name,
        "number": player.number,
        "isPresent": player.is_present,
        "isPlaying": player.is_playing,
        "playingTime": player.playing_time,
        "playingStartTime": ts_to_iso(player.playing_start_ts),
    }


def player_from_dict(data: Dict[str, Any]) -> Player:
    """
    Build a Player from its persisted form.

    Raises:
        ValueError: If a required field is missing or malformed
    """
    d = _folded(data)
    if not d.get("id"):
        raise ValueError("Player record has no id")
    return Player(
        id=str(d["id"]),
        name=str(d.get("name") or ""),
        number=int(d.get("number") or 0),
        is_present=_as_bool(d.get("ispresent"), True),
        is_playing=_as_bool(d.get("isplaying"), False),
        playing_time=max(0.0, parse_duration(d.get("playingtime"))),
        playing_start_ts=parse_timestamp(d.get("playingstarttime")),
    )


def state_to_dict(state: MatchState) -> Dict[str, Any]:
    return {
        "allPlayers": [player_to_dict(p) for p in state.all_players],
        "matchStartTime": ts_to_iso(state.match_start_ts),
        "isMatchActive": state.is_match_active,
        "matchDuration": state.match_duration_seconds,
    }


def state_from_dict(
    data: Dict[str, Any],
    default_duration_seconds: float = float(DEFAULT_MATCH_DURATION_SECONDS),
) -> MatchState:
    """
    Build a MatchState from its persisted form.

    Raises:
        ValueError: If the structure is invalid
    """
    d = _folded(data)
    players = [player_from_dict(p) for p in (d.get("allplayers") or [])]
    duration = d.get("matchduration")
    return MatchState(
        all_players=players,
        match_start_ts=parse_timestamp(d.get("matchstarttime")),
        is_match_active=_as_bool(d.get("ismatchactive"), False),
        match_duration_seconds=(
            parse_duration(duration) if duration is not None else float(default_duration_seconds)
        ),
    )


def serialize(state: MatchState) -> str:
    """Serialize a match state to compact JSON text."""
    return json.dumps(state_to_dict(state), separators=(",", ":"))


def deserialize(
    text: str, default_duration_seconds: float = float(DEFAULT_MATCH_DURATION_SECONDS)
) -> MatchState:
    """
    Parse JSON text produced by :func:`serialize`.

    Raises:
        ValueError: If the text is not valid match state JSON
    """
    return state_from_dict(json.loads(text), default_duration_seconds)


class PersistenceService:
    """
    Gateway between the shared match state and the key-value store.

    Saving is best effort: failures are logged and never reach the command
    that triggered them. Loading falls back to an empty match state.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        match_state: Optional[MatchState] = None,
        key: str = STORAGE_KEY,
        default_duration_seconds: float = float(DEFAULT_MATCH_DURATION_SECONDS),
    ):
        self.storage = storage
        self.match_state = match_state
        self.key = key
        self.default_duration_seconds = float(default_duration_seconds)

    def _fresh_state(self) -> MatchState:
        return MatchState(match_duration_seconds=self.default_duration_seconds)

    async def save(self, state: MatchState) -> None:
        """Write ``state`` under the storage key. Never raises."""
        try:
            text = serialize(state)
            await self.storage.set_item(self.key, text)
        except Exception as e:
            logger.error("Error saving match state: %s", e)
            return
        logger.debug("Saved match state with %d players", len(state.all_players))

    async def load(self) -> MatchState:
        """
        Read the stored match state.

        Returns:
            The stored state, or a fresh MatchState if nothing usable is stored
        """
        try:
            text = await self.storage.get_item(self.key)
        except Exception as e:
            logger.error("Error loading match state: %s", e)
            return self._fresh_state()
        if not text:
            return self._fresh_state()
        try:
            return deserialize(text, self.default_duration_seconds)
        except (ValueError, TypeError) as e:
            logger.warning("Discarding unreadable match state: %s", e)
            return self._fresh_state()

    async def exists(self) -> bool:
        """True if the storage key holds non-empty data."""
        try:
            text = await self.storage.get_item(self.key)
        except Exception as e:
            logger.error("Error checking for saved match state: %s", e)
            return False
        return bool(text)

    async def clear(self) -> None:
        """
        Remove the stored state and empty the shared match state.

        Raises:
            PersistenceError: If the store could not be cleared
        """
        try:
            await self.storage.remove_item(self.key)
        except PersistenceError:
            logger.exception("Error clearing saved match state")
            raise
        except Exception as e:
            logger.exception("Error clearing saved match state")
            raise PersistenceError(str(e)) from e
        if self.match_state is not None:
            self.match_state.reset_to_defaults(self.default_duration_seconds)
        logger.info("Cleared saved match state")

    async def restore(self) -> bool:
        """
        Copy the saved state into the shared match state, if there is one.

        Returns:
            True if a saved state was found and applied
        """
        if self.match_state is None:
            raise RuntimeError("restore() needs a shared match state")
        if not await self.exists():
            logger.info("No saved match state found, starting fresh")
            return False
        saved = await self.load()
        self.match_state.replace_with(saved)
        logger.info("Loaded saved match state with %d players", len(saved.all_players))
        return True


class AutoSaver:
    """
    Mirror the shared match state to storage after each mutation.

    ``request_save`` snapshots the state on the calling thread and hands the
    write to the background runner. Inside ``deferred()`` requests are
    collected and a single save is issued when the outermost block exits.
    """

    def __init__(
        self,
        match_state: MatchState,
        persistence: PersistenceService,
        runner: Optional[BackgroundTaskRunner] = None,
    ):
        self.match_state = match_state
        self.persistence = persistence
        self.runner = runner
        self._defer_depth = 0
        self._deferred_reason: Optional[str] = None
        self.saves_requested = 0
        self._last_save: Optional[concurrent.futures.Future] = None

    def request_save(self, reason: str) -> None:
        with self.match_state.lock:
            if self._defer_depth:
                self._deferred_reason = self._deferred_reason or reason
                return
            self._dispatch(reason)

    def _dispatch(self, reason: str) -> None:
        self.saves_requested += 1
        if self.runner is None:
            return
        logger.debug("Auto-saving match state after %s", reason)
        snapshot = self.match_state.snapshot()
        try:
            self._last_save = self.runner.submit(
                self._save_after(self._last_save, snapshot),
                description=f"auto-save after {reason}",
            )
        except RuntimeError as e:
            logger.error("Error auto-saving match state: %s", e)

    async def _save_after(
        self, previous: Optional[concurrent.futures.Future], snapshot: MatchState
    ) -> None:
        # Writes land in request order so an older snapshot never wins.
        if previous is not None and not previous.done():
            await asyncio.wait([asyncio.wrap_future(previous)])
        await self.persistence.save(snapshot)

    @contextlib.contextmanager
    def deferred(self, reason: str) -> Iterator[None]:
        """Coalesce every save requested inside the block into one."""
        with self.match_state.lock:
            self._defer_depth += 1
            try:
                yield
            finally:
                self._defer_depth -= 1
                if self._defer_depth == 0:
                    pending = self._deferred_reason
                    self._deferred_reason = None
                    if pending is not None:
                        self._dispatch(reason)
