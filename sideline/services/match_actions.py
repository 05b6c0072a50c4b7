"""
In-play match actions: substitutions, goals and score corrections.

Each action runs as one store transaction and stamps its events with the
effective clock time, so anything recorded during a pause lands on the
pause instant.
"""
import logging
from typing import Optional

from ..models import Match, MatchEvent, MatchStatus, EventType
from .access_control import AccessPolicy
from .base_service import MatchServiceBase
from .errors import InvalidTransitionError, MatchValidationError
from .event_log import EventLog
from .game_clock import effective_event_time

log = logging.getLogger(__name__)

SCORE_TEAMS = ("home", "away")
SCORE_DELTAS = (1, -1)


def _scores_for_home(match: Match, is_opponent_goal: bool) -> bool:
    """Whether a goal counts for the home side."""
    ours = not is_opponent_goal
    return ours == match.is_home


class MatchActions(MatchServiceBase):
    """Substitutions and goal/score bookkeeping for a running match."""

    # ---------- Substitutions ---------- #

    def substitute(
        self,
        match_id: str,
        pin: str,
        player_out_id: str,
        player_in_id: str,
        now: Optional[int] = None,
    ) -> Match:
        """
        Swap an on-field player for a bench player.

        Before kickoff this only flips the lineup flags. During play the
        outgoing player's session closes, the incoming player's opens while
        the clock runs, the formation slot transfers and sub_out/sub_in
        events are logged.
        """
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            actor = self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            if match.status == MatchStatus.FINISHED:
                raise InvalidTransitionError(
                    "Substitutions are not possible after the final whistle", match.status
                )
            if match.status.is_in_play:
                self.access.require_lead(match, actor)

            if player_out_id == player_in_id:
                raise MatchValidationError("A player cannot be substituted for themselves")
            player_out = self._load_match_player(uow, match_id, player_out_id)
            player_in = self._load_match_player(uow, match_id, player_in_id)
            if not player_out.on_field:
                raise InvalidTransitionError("Player going off must be on the field")
            if player_in.on_field:
                raise InvalidTransitionError("Player coming on must be on the bench")
            if player_in.absent:
                raise InvalidTransitionError("An absent player cannot be substituted in")

            effective = effective_event_time(match.clock_snapshot(), now)
            slot = player_out.field_slot_index

            self.ledger.substitute(
                player_out, player_in, effective, clock_running=match.is_clock_running
            )
            player_out.field_slot_index = None
            if slot is not None:
                player_in.field_slot_index = slot

            if match.status.is_in_play:
                EventLog.append(
                    uow, match, EventType.SUB_OUT, effective, now,
                    player_id=player_out_id, related_player_id=player_in_id,
                )
                EventLog.append(
                    uow, match, EventType.SUB_IN, effective, now,
                    player_id=player_in_id, related_player_id=player_out_id,
                )

        log.info("Match %s: %s off, %s on", match_id, player_out_id, player_in_id)
        return match

    # ---------- Goals ---------- #

    def add_goal(
        self,
        match_id: str,
        pin: str,
        player_id: Optional[str] = None,
        assist_player_id: Optional[str] = None,
        is_own_goal: bool = False,
        is_opponent_goal: bool = False,
        now: Optional[int] = None,
    ) -> MatchEvent:
        """
        Record a goal, update the score and log the assist if any.

        Args:
            match_id: Match to score in
            pin: Coach (lead) or referee PIN
            player_id: Scorer from our squad, if known
            assist_player_id: Assisting player from our squad
            is_own_goal: Own goal by the opponent, credited to us
            is_opponent_goal: Goal for the opponent

        Returns:
            The goal event
        """
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.COACH_OR_REFEREE)
            self._require_in_play(match, "Goals can only be recorded during a match")

            for pid in (player_id, assist_player_id):
                if pid is not None:
                    self._load_match_player(uow, match_id, pid)
            if player_id is not None and player_id == assist_player_id:
                raise MatchValidationError("A player cannot assist their own goal")

            if _scores_for_home(match, is_opponent_goal):
                match.home_score += 1
            else:
                match.away_score += 1

            effective = effective_event_time(match.clock_snapshot(), now)
            goal = EventLog.append(
                uow, match, EventType.GOAL, effective, now,
                player_id=player_id,
                related_player_id=assist_player_id,
                is_own_goal=is_own_goal,
                is_opponent_goal=is_opponent_goal,
            )
            if assist_player_id and not is_opponent_goal and not is_own_goal:
                EventLog.append(
                    uow, match, EventType.ASSIST, effective, now,
                    player_id=assist_player_id, related_player_id=player_id,
                )

        log.info("Match %s goal: %d-%d", match_id, match.home_score, match.away_score)
        return goal

    def undo_last_goal(self, match_id: str, pin: str) -> MatchEvent:
        """
        Remove the most recent goal and reverse its score change.

        The assist logged with it (same assister, within one second) is
        removed too.

        Returns:
            The removed goal event
        """
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.COACH_OR_REFEREE)
            self._require_in_play(match, "Goals can only be undone during a match")

            goal = EventLog.latest_goal(uow, match_id)
            if goal is None:
                raise InvalidTransitionError("There is no goal to undo", match.status)

            if _scores_for_home(match, goal.is_opponent_goal):
                match.home_score = max(0, match.home_score - 1)
            else:
                match.away_score = max(0, match.away_score - 1)

            assist = EventLog.linked_assist(uow, goal)
            if assist is not None:
                uow.delete_event(assist.id)
            uow.delete_event(goal.id)

        log.info("Match %s undid goal %s: %d-%d", match_id, goal.id, match.home_score, match.away_score)
        return goal

    def adjust_score(
        self,
        match_id: str,
        pin: str,
        team: str,
        delta: int,
        scorer_number: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Match:
        """
        Referee-style score correction by +1 or -1 for one side.

        Scores never drop below zero. An increment with a shirt number logs
        a lightweight goal event the coach can attribute later.
        """
        if team not in SCORE_TEAMS:
            raise MatchValidationError(f"Team must be 'home' or 'away', got {team!r}")
        if isinstance(delta, bool) or not isinstance(delta, int) or delta not in SCORE_DELTAS:
            raise MatchValidationError(f"Score delta must be +1 or -1, got {delta!r}")

        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.COACH_OR_REFEREE)
            self._require_in_play(match, "Score can only be adjusted during a match")

            if team == "home":
                match.home_score = max(0, match.home_score + delta)
            else:
                match.away_score = max(0, match.away_score + delta)

            if delta == 1 and scorer_number is not None:
                is_opponent_goal = (team == "home") != match.is_home
                effective = effective_event_time(match.clock_snapshot(), now)
                EventLog.append(
                    uow, match, EventType.GOAL, effective, now,
                    is_opponent_goal=is_opponent_goal,
                    note=f"Shirt number: {scorer_number}",
                )

        log.info("Match %s score adjusted (%s %+d): %d-%d",
                 match_id, team, delta, match.home_score, match.away_score)
        return match

    @staticmethod
    def _require_in_play(match: Match, message: str) -> None:
        if not match.status.is_in_play:
            raise InvalidTransitionError(message, match.status)
