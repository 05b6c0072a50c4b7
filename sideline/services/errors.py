"""
Error taxonomy for match operations.

Every operation either commits all of its writes or raises one of these
without any partial effect. The core never retries.
"""
from typing import Optional

from ..models import MatchStatus


GENERIC_AUTH_MESSAGE = "Invalid match or PIN"


class MatchError(Exception):
    """Base class for all match operation failures."""
    pass


class MatchNotFoundError(MatchError):
    """The match id does not resolve."""

    def __init__(self, match_id: str):
        super().__init__("Match not found")
        self.match_id = match_id


class PlayerNotInMatchError(MatchError):
    """A player id is not part of the match squad."""

    def __init__(self, player_id: str):
        super().__init__("Player is not in this match")
        self.player_id = player_id


class AuthorizationError(MatchError):
    """The PIN does not grant the requested operation.

    The message never reveals whether the match, the PIN or the privilege
    was wrong.
    """

    def __init__(self):
        super().__init__(GENERIC_AUTH_MESSAGE)


class InvalidTransitionError(MatchError):
    """The operation's status or pause precondition is not met."""

    def __init__(self, message: str, status: Optional[MatchStatus] = None):
        if status is not None:
            message = f"{message} (current status: {status.value})"
        super().__init__(message)
        self.status = status


class MatchValidationError(MatchError):
    """Malformed input such as a bad quarter count or score delta."""
    pass


class StoreError(MatchError):
    """The transactional write did not commit; the match is unchanged."""
    pass
