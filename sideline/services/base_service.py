"""Shared plumbing for services that run match operations."""

from typing import Callable, Optional

from ..models import Match, MatchPlayer
from ..utils import now_ms
from .access_control import AccessControl
from .errors import MatchNotFoundError, PlayerNotInMatchError
from .match_store import InMemoryMatchStore, UnitOfWork
from .playing_time import PlayingTimeLedger


class MatchServiceBase:
    """
    Holds the collaborators every match operation needs.

    Operations read the wall clock once at their entry point and thread that
    single ``now`` through clock math, ledger updates and event timestamps.
    """

    def __init__(
        self,
        store: InMemoryMatchStore,
        access: AccessControl,
        ledger: Optional[PlayingTimeLedger] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.access = access
        self.ledger = ledger or PlayingTimeLedger()
        self.clock = clock

    def _now(self, now: Optional[int]) -> int:
        return self.clock() if now is None else now

    @staticmethod
    def _load_match(uow: UnitOfWork, match_id: str) -> Match:
        match = uow.get_match(match_id)
        if match is None:
            raise MatchNotFoundError(match_id)
        return match

    @staticmethod
    def _load_match_player(uow: UnitOfWork, match_id: str, player_id: str) -> MatchPlayer:
        row = uow.get_match_player(match_id, player_id)
        if row is None:
            raise PlayerNotInMatchError(player_id)
        return row
