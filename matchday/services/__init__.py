"""
Services package for the Matchday Sideline Timekeeper.

This package contains service classes that handle business logic.
Includes factory for proper dependency injection.
"""
from .errors import MatchdayError, ValidationError, NotFoundError, PersistenceError
from .storage import KeyValueStore, InMemoryStore, JsonFileStore
from .background import BackgroundTaskRunner
from .persistence_service import PersistenceService, AutoSaver, serialize, deserialize
from .player_service import PlayerService
from .timer_service import TimerService
from .field_service import FieldService
from .service_factory import ServiceFactory

__all__ = [
    "MatchdayError", "ValidationError", "NotFoundError", "PersistenceError",
    "KeyValueStore", "InMemoryStore", "JsonFileStore", "BackgroundTaskRunner",
    "PersistenceService", "AutoSaver", "serialize", "deserialize",
    "PlayerService", "TimerService", "FieldService", "ServiceFactory"
]
