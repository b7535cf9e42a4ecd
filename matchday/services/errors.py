"""
Exception types for the Matchday Sideline Timekeeper services.

Services report most precondition failures as a False/None return value.
These exceptions cover the cases that must not pass silently.
"""


class MatchdayError(Exception):
    """Base class for application errors."""
    pass


class ValidationError(MatchdayError):
    """A user-supplied value breaks a roster rule (e.g. an empty player name)."""
    pass


class NotFoundError(MatchdayError):
    """A referenced player does not exist."""

    def __init__(self, player_id: str):
        super().__init__(f"Player not found: {player_id}")
        self.player_id = player_id


class PersistenceError(MatchdayError):
    """The key-value store could not be read or written."""
    pass
