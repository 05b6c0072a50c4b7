"""
PIN-based access control for match operations.

Two independent actors may act on a match: the team's coaches and an
optionally assigned referee. A PIN is resolved into a tagged
:data:`AuthResult` and each operation is authorized against an
:class:`AccessPolicy`. Every refusal surfaces the same generic error.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Union

from ..models import Match, Coach, Referee, Player
from .errors import AuthorizationError

log = logging.getLogger(__name__)


class RosterDirectory(ABC):
    """Team/roster collaborator: coach, referee and player lookups."""

    @abstractmethod
    def find_coach_by_pin(self, pin: str) -> Optional[Coach]:
        pass

    @abstractmethod
    def get_referee(self, referee_id: str) -> Optional[Referee]:
        pass

    @abstractmethod
    def get_player(self, player_id: str) -> Optional[Player]:
        pass


class InMemoryRoster(RosterDirectory):
    """Roster directory held in memory, used by tests and the dev server."""

    def __init__(
        self,
        coaches: Iterable[Coach] = (),
        referees: Iterable[Referee] = (),
        players: Iterable[Player] = (),
    ):
        self.coaches: Dict[str, Coach] = {c.id: c for c in coaches}
        self.referees: Dict[str, Referee] = {r.id: r for r in referees}
        self.players: Dict[str, Player] = {p.id: p for p in players}

    def add_coach(self, coach: Coach) -> Coach:
        self.coaches[coach.id] = coach
        return coach

    def add_referee(self, referee: Referee) -> Referee:
        self.referees[referee.id] = referee
        return referee

    def add_player(self, player: Player) -> Player:
        self.players[player.id] = player
        return player

    def find_coach_by_pin(self, pin: str) -> Optional[Coach]:
        return next((c for c in self.coaches.values() if c.pin == pin), None)

    def get_referee(self, referee_id: str) -> Optional[Referee]:
        return self.referees.get(referee_id)

    def get_player(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)


# ---------- Tagged auth result ---------- #

@dataclass(frozen=True)
class CoachActor:
    coach: Coach
    is_lead: bool


@dataclass(frozen=True)
class RefereeActor:
    referee: Referee


@dataclass(frozen=True)
class Unauthorized:
    pass


AuthResult = Union[CoachActor, RefereeActor, Unauthorized]


class AccessPolicy(Enum):
    """How an operation composes coach and referee checks."""
    # Referee unconditional; a coach must hold the match lead
    LEAD_COACH_OR_REFEREE = "lead_coach_or_referee"
    # Any coach of the match's team; referees are not accepted
    TEAM_COACH = "team_coach"
    # Coach tried first (must hold the lead), then referee
    COACH_OR_REFEREE = "coach_or_referee"


class AccessControl:
    """Resolves PIN-bearing callers and applies access policies."""

    def __init__(self, roster: RosterDirectory):
        self.roster = roster

    def resolve_coach(self, match: Match, pin: str) -> Optional[Coach]:
        """Coach with this PIN who is associated with the match's team."""
        if not pin:
            return None
        coach = self.roster.find_coach_by_pin(pin)
        if coach is None or match.team_id not in coach.team_ids:
            return None
        return coach

    def resolve_referee(self, match: Match, pin: str) -> Optional[Referee]:
        """The match's assigned referee, if the PIN is theirs."""
        if not pin or not match.referee_id:
            return None
        referee = self.roster.get_referee(match.referee_id)
        if referee is None or referee.pin != pin:
            return None
        return referee

    @staticmethod
    def is_match_lead(match: Match, coach_id: str) -> bool:
        """True for the lead coach, or for any coach while no lead is claimed."""
        return match.lead_coach_id is None or match.lead_coach_id == coach_id

    def authenticate(self, match: Match, pin: str, referee_first: bool = False) -> AuthResult:
        """Resolve a PIN into a coach, a referee or nobody."""
        if referee_first:
            referee = self.resolve_referee(match, pin)
            if referee is not None:
                return RefereeActor(referee)

        coach = self.resolve_coach(match, pin)
        if coach is not None:
            return CoachActor(coach, self.is_match_lead(match, coach.id))

        if not referee_first:
            referee = self.resolve_referee(match, pin)
            if referee is not None:
                return RefereeActor(referee)

        return Unauthorized()

    def authorize(self, match: Match, pin: str, policy: AccessPolicy) -> AuthResult:
        """
        Check that the PIN may perform an operation under ``policy``.

        Returns:
            The CoachActor or RefereeActor that was granted access

        Raises:
            AuthorizationError: For any refusal, with a generic message
        """
        actor = self.authenticate(
            match, pin, referee_first=policy is AccessPolicy.LEAD_COACH_OR_REFEREE
        )

        if isinstance(actor, RefereeActor):
            granted = policy is not AccessPolicy.TEAM_COACH
        elif isinstance(actor, CoachActor):
            granted = policy is AccessPolicy.TEAM_COACH or actor.is_lead
        else:
            granted = False

        if not granted:
            log.warning("Refused %s access to match %s", policy.value, match.id)
            raise AuthorizationError()
        return actor

    def require_lead(self, match: Match, actor: AuthResult) -> None:
        """Lineup edits during play are reserved for the match lead coach."""
        if not isinstance(actor, CoachActor) or not actor.is_lead:
            log.warning("Refused lineup edit on match %s: caller is not the match lead", match.id)
            raise AuthorizationError()
