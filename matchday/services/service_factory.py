"""
Service Factory for dependency injection.

This module builds the shared match state and wires every service to the same
instance, along with the persistence gateway and the background runner.
"""
from typing import Optional

from ..models import MatchState
from ..utils import AppConfig
from .background import BackgroundTaskRunner
from .field_service import FieldService
from .persistence_service import AutoSaver, PersistenceService
from .player_service import PlayerService
from .storage import JsonFileStore, KeyValueStore
from .timer_service import TimerService


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    The factory owns the single MatchState; each create_* call returns a
    service bound to it.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        storage: Optional[KeyValueStore] = None,
        runner: Optional[BackgroundTaskRunner] = None,
    ):
        """
        Initialize factory.

        Args:
            config: Application settings (defaults to the environment)
            storage: Key-value store (defaults to a JsonFileStore in config.data_dir)
            runner: Background runner for saves (created lazily when omitted)
        """
        self.config = config or AppConfig.from_env()
        self.match_state = MatchState(match_duration_seconds=self.config.match_duration_seconds)
        self._storage = storage
        self._runner = runner
        self._persistence_service: Optional[PersistenceService] = None
        self._autosaver: Optional[AutoSaver] = None
        self._timer_service: Optional[TimerService] = None

    def get_storage(self) -> KeyValueStore:
        if self._storage is None:
            self._storage = JsonFileStore(self.config.data_dir)
        return self._storage

    def get_runner(self) -> BackgroundTaskRunner:
        if self._runner is None:
            self._runner = BackgroundTaskRunner()
        return self._runner

    def get_persistence_service(self) -> PersistenceService:
        """Get singleton persistence service."""
        if self._persistence_service is None:
            self._persistence_service = PersistenceService(
                self.get_storage(),
                match_state=self.match_state,
                default_duration_seconds=self.config.match_duration_seconds,
            )
        return self._persistence_service

    def get_autosaver(self) -> AutoSaver:
        """Get singleton auto-saver."""
        if self._autosaver is None:
            self._autosaver = AutoSaver(
                self.match_state, self.get_persistence_service(), self.get_runner()
            )
        return self._autosaver

    def create_player_service(self) -> PlayerService:
        return PlayerService(self.match_state, self.get_autosaver())

    def create_timer_service(self) -> TimerService:
        """Get singleton timer service (the field service shares it)."""
        if self._timer_service is None:
            self._timer_service = TimerService(self.match_state, self.get_autosaver())
        return self._timer_service

    def create_field_service(self) -> FieldService:
        return FieldService(self.match_state, self.create_timer_service(), self.get_autosaver())

    def create_complete_service_suite(self) -> dict:
        """
        Create a complete suite of services sharing one match state.

        Returns:
            Dictionary containing all configured services
        """
        return {
            "player": self.create_player_service(),
            "timer": self.create_timer_service(),
            "field": self.create_field_service(),
            "persistence": self.get_persistence_service(),
            "runner": self.get_runner(),
        }

    def restore_saved_state(self, timeout: Optional[float] = 10.0) -> bool:
        """Load any saved state into the shared match state before first use."""
        return self.get_runner().run(self.get_persistence_service().restore(), timeout)

    def shutdown(self) -> None:
        """Flush pending saves and stop the background runner."""
        if self._runner is not None:
            self._runner.close()
