"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import (
    DEFAULT_DATA_DIR, DEFAULT_HOST, DEFAULT_MATCH_DURATION_MIN, DEFAULT_PORT,
)


@dataclass(frozen=True)
class AppConfig:
    """
    Application settings.

    Attributes:
        data_dir: Directory used by the file-backed key-value store
        match_minutes: Match length applied to fresh match states
        host: Address the local command API binds to
        port: Port the local command API listens on
        log_level: Name of the root logging level
    """
    data_dir: str = DEFAULT_DATA_DIR
    match_minutes: int = DEFAULT_MATCH_DURATION_MIN
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def match_duration_seconds(self) -> float:
        return float(self.match_minutes * 60)

    @classmethod
    def from_env(cls, environ=None) -> "AppConfig":
        """
        Build a config from MATCHDAY_* environment variables.

        Raises:
            ValueError: If a numeric setting is not a positive integer
        """
        env = os.environ if environ is None else environ
        match_minutes = int(env.get("MATCHDAY_MATCH_MINUTES", DEFAULT_MATCH_DURATION_MIN))
        port = int(env.get("MATCHDAY_PORT", DEFAULT_PORT))
        if match_minutes <= 0:
            raise ValueError("MATCHDAY_MATCH_MINUTES must be positive")
        if port <= 0:
            raise ValueError("MATCHDAY_PORT must be positive")
        return cls(
            data_dir=env.get("MATCHDAY_DATA_DIR", DEFAULT_DATA_DIR),
            match_minutes=match_minutes,
            host=env.get("MATCHDAY_HOST", DEFAULT_HOST),
            port=port,
            log_level=env.get("MATCHDAY_LOG_LEVEL", "INFO").upper(),
        )
