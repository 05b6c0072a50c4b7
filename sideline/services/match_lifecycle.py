"""
Match lifecycle state machine.

    scheduled -> lineup -> live <-> halftime -> ... -> finished

This is the only service that changes a match's status, and it drives the
game clock and the playing time ledger together. Each transition runs in one
store transaction: the match fields, every player's ledger update and the
event append commit together or not at all.
"""
import logging
import secrets
from typing import Iterable, List, Optional

from ..models import Match, MatchPlayer, MatchStatus, EventType
from ..utils import SUPPORTED_QUARTER_COUNTS, DEFAULT_QUARTER_COUNT
from ..utils.constants import (
    PUBLIC_CODE_CHARS, PUBLIC_CODE_LENGTH, MAX_CODE_GENERATION_ATTEMPTS
)
from .access_control import AccessPolicy
from .base_service import MatchServiceBase
from .errors import AuthorizationError, InvalidTransitionError, MatchValidationError
from .event_log import EventLog
from .game_clock import effective_event_time, quarter_overrun_seconds

log = logging.getLogger(__name__)

PUBLIC_CODE_LOCK = "public-codes"


def generate_public_code() -> str:
    """Random 6-character join code without ambiguous characters."""
    return "".join(secrets.choice(PUBLIC_CODE_CHARS) for _ in range(PUBLIC_CODE_LENGTH))


class MatchLifecycle(MatchServiceBase):
    """Creates matches and runs the kickoff/pause/quarter transitions."""

    # ---------- Creation ---------- #

    def create_match(
        self,
        team_id: str,
        opponent: str,
        is_home: bool,
        coach_pin: str,
        player_ids: Iterable[str],
        quarter_count: int = DEFAULT_QUARTER_COUNT,
        scheduled_at: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Match:
        """
        Create a scheduled match with its squad.

        Args:
            team_id: Team playing the match
            opponent: Opponent name
            is_home: Whether the team plays at home
            coach_pin: PIN of a coach of ``team_id``
            player_ids: Roster players selected for the match
            quarter_count: 2 halves or 4 quarters
            scheduled_at: Planned kickoff (epoch ms)

        Returns:
            The created match
        """
        now = self._now(now)
        coach = self.access.roster.find_coach_by_pin(coach_pin) if coach_pin else None
        if coach is None or team_id not in coach.team_ids:
            raise AuthorizationError()

        trimmed_opponent = (opponent or "").strip()
        if not trimmed_opponent:
            raise MatchValidationError("Opponent is required")
        if quarter_count not in SUPPORTED_QUARTER_COUNTS:
            raise MatchValidationError(
                f"Quarter count must be one of {SUPPORTED_QUARTER_COUNTS}, got {quarter_count!r}"
            )

        squad: List[str] = list(dict.fromkeys(player_ids))
        if not squad:
            raise MatchValidationError("Select at least one player")
        for player_id in squad:
            player = self.access.roster.get_player(player_id)
            if player is None or player.team_id != team_id:
                raise MatchValidationError(f"Player {player_id} does not belong to this team")

        match = Match(
            id=self.store.new_id(),
            team_id=team_id,
            opponent=trimmed_opponent,
            is_home=is_home,
            coach_pin=coach_pin,
            quarter_count=quarter_count,
            scheduled_at=scheduled_at,
            created_at=now,
        )

        # public codes are unique across matches, not just within one
        with self.store.exclusive(PUBLIC_CODE_LOCK), self.store.transaction(match.id) as uow:
            match.public_code = self._unique_public_code(uow)
            uow.add_match(match)
            for player_id in squad:
                uow.add_match_player(MatchPlayer(
                    id=self.store.new_id(),
                    match_id=match.id,
                    player_id=player_id,
                    created_at=now,
                ))

        log.info("Created match %s vs %s (%d players)", match.id, trimmed_opponent, len(squad))
        return match

    @staticmethod
    def _unique_public_code(uow) -> str:
        for _ in range(MAX_CODE_GENERATION_ATTEMPTS):
            code = generate_public_code()
            if uow.find_match_by_code(code) is None:
                return code
        raise MatchValidationError("Could not generate a unique match code, please try again")

    def open_lineup(self, match_id: str, pin: str) -> Match:
        """Move a scheduled match into squad/position setup."""
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            if match.status != MatchStatus.SCHEDULED:
                raise InvalidTransitionError(
                    "Lineup setup can only be opened for a scheduled match", match.status
                )
            match.status = MatchStatus.LINEUP
            return match

    # ---------- Clock transitions ---------- #

    def start(self, match_id: str, pin: str, now: Optional[int] = None) -> Match:
        """Kick off quarter 1 and start timing the starting lineup."""
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.LEAD_COACH_OR_REFEREE)
            if not match.status.is_pregame:
                raise InvalidTransitionError("Match can only be started before kickoff", match.status)

            match.status = MatchStatus.LIVE
            match.current_quarter = 1
            match.started_at = now
            match.quarter_started_at = now
            match.paused_at = None
            match.accumulated_pause_time = 0
            match.banked_overrun_seconds = 0

            self.ledger.restart_on_field(uow.match_players(match_id), now)
            EventLog.append(uow, match, EventType.QUARTER_START, now, now, quarter=1)

        log.info("Match %s kicked off", match_id)
        return match

    def pause(self, match_id: str, pin: str, now: Optional[int] = None) -> Match:
        """Freeze the clock and close every on-field session at the pause instant."""
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.LEAD_COACH_OR_REFEREE)
            if match.status != MatchStatus.LIVE:
                raise InvalidTransitionError(
                    "Clock can only be paused during a live quarter", match.status
                )
            if match.is_paused:
                raise InvalidTransitionError("Clock is already paused", match.status)

            match.paused_at = now
            self.ledger.freeze_on_field(uow.match_players(match_id), now)

        log.info("Match %s paused in quarter %d", match_id, match.current_quarter)
        return match

    def resume(self, match_id: str, pin: str, now: Optional[int] = None) -> Match:
        """Restart the clock, banking the pause duration."""
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.LEAD_COACH_OR_REFEREE)
            if match.status != MatchStatus.LIVE:
                raise InvalidTransitionError(
                    "Clock can only be resumed during a live quarter", match.status
                )
            if not match.is_paused:
                raise InvalidTransitionError("Clock is not paused", match.status)

            pause_duration = max(0, now - match.paused_at)
            match.accumulated_pause_time = (match.accumulated_pause_time or 0) + pause_duration
            match.paused_at = None
            self.ledger.restart_on_field(uow.match_players(match_id), now)

        log.info("Match %s resumed after %d ms pause", match_id, pause_duration)
        return match

    def next_quarter(self, match_id: str, pin: str, now: Optional[int] = None) -> Match:
        """
        End the current quarter.

        Stoppage time beyond the nominal quarter length is banked for the
        final quarter's display. After the last quarter the match finishes;
        otherwise it enters the break with the quarter counter advanced.
        """
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.LEAD_COACH_OR_REFEREE)
            if match.status != MatchStatus.LIVE:
                raise InvalidTransitionError("Only a live quarter can be ended", match.status)

            snapshot = match.clock_snapshot()
            effective_end = effective_event_time(snapshot, now)
            overrun = quarter_overrun_seconds(snapshot, effective_end)
            ended_quarter = match.current_quarter

            self.ledger.freeze_on_field(uow.match_players(match_id), effective_end)
            EventLog.append(
                uow, match, EventType.QUARTER_END, effective_end, now, quarter=ended_quarter
            )

            match.banked_overrun_seconds = (match.banked_overrun_seconds or 0) + overrun
            match.quarter_started_at = None
            match.paused_at = None
            match.accumulated_pause_time = 0

            if ended_quarter + 1 > match.quarter_count:
                match.status = MatchStatus.FINISHED
                match.finished_at = now
            else:
                match.status = MatchStatus.HALFTIME
                match.current_quarter = ended_quarter + 1

        log.info(
            "Match %s ended quarter %d (+%ds overrun, %ds banked), now %s",
            match_id, ended_quarter, overrun, match.banked_overrun_seconds, match.status.value,
        )
        return match

    def resume_from_halftime(self, match_id: str, pin: str, now: Optional[int] = None) -> Match:
        """Start the clock of the next quarter after a break."""
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.LEAD_COACH_OR_REFEREE)
            if match.status != MatchStatus.HALFTIME:
                raise InvalidTransitionError(
                    "Play can only resume from a break", match.status
                )

            match.status = MatchStatus.LIVE
            match.quarter_started_at = now
            match.paused_at = None
            match.accumulated_pause_time = 0

            self.ledger.restart_on_field(uow.match_players(match_id), now)
            EventLog.append(uow, match, EventType.QUARTER_START, now, now)

        log.info("Match %s started quarter %d", match_id, match.current_quarter)
        return match
