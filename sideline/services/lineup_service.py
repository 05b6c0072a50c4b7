"""
Lineup and match-role operations.

Covers the lineup edits that touch the playing time ledger (on-field and
keeper toggles), pregame squad changes, the match lead claim, and referee
assignment. Formation geometry is not handled here; only the slot index
travels with the players.
"""
import logging
from typing import Optional

from ..models import Coach, Match, MatchPlayer, MatchStatus
from .access_control import AccessPolicy, CoachActor
from .base_service import MatchServiceBase
from .errors import AuthorizationError, InvalidTransitionError, MatchValidationError
from .game_clock import effective_event_time

log = logging.getLogger(__name__)


class LineupService(MatchServiceBase):
    """Lineup edits, squad changes, match lead and referee assignment."""

    # ---------- Lineup edits ---------- #

    def toggle_on_field(
        self, match_id: str, pin: str, player_id: str, now: Optional[int] = None
    ) -> MatchPlayer:
        """Move a player between bench and field, keeping their ledger in sync."""
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._authorize_lineup_edit(uow, match_id, pin)
            row = self._load_match_player(uow, match_id, player_id)

            if row.on_field:
                effective = effective_event_time(match.clock_snapshot(), now)
                self.ledger.end_session(row, effective)
                row.on_field = False
                row.field_slot_index = None
            else:
                if row.absent:
                    raise InvalidTransitionError("An absent player cannot be put on the field")
                if match.is_clock_running:
                    self.ledger.start_session(row, now)
                else:
                    row.on_field = True
            return row

    def toggle_keeper(self, match_id: str, pin: str, player_id: str) -> MatchPlayer:
        """Mark a player as goalkeeper; at most one keeper per squad."""
        with self.store.transaction(match_id) as uow:
            self._authorize_lineup_edit(uow, match_id, pin)
            row = self._load_match_player(uow, match_id, player_id)

            if row.is_keeper:
                row.is_keeper = False
            else:
                for other in uow.match_players(match_id):
                    other.is_keeper = False
                row.is_keeper = True
            return row

    def _authorize_lineup_edit(self, uow, match_id: str, pin: str) -> Match:
        match = self._load_match(uow, match_id)
        actor = self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
        if match.status == MatchStatus.FINISHED:
            raise InvalidTransitionError("The lineup is closed after the final whistle", match.status)
        if match.status.is_in_play:
            self.access.require_lead(match, actor)
        return match

    # ---------- Pregame squad ---------- #

    def toggle_absent(self, match_id: str, pin: str, player_id: str) -> MatchPlayer:
        """Mark a squad player absent (or present again) before kickoff."""
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            if not match.status.is_pregame:
                raise InvalidTransitionError("Absence can only be changed before kickoff", match.status)
            row = self._load_match_player(uow, match_id, player_id)

            row.absent = not row.absent
            if row.absent and row.on_field:
                row.on_field = False
                row.field_slot_index = None
            return row

    def add_player_to_match(
        self, match_id: str, pin: str, player_id: str, now: Optional[int] = None
    ) -> MatchPlayer:
        """Add an existing team player to the squad before kickoff."""
        now = self._now(now)
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            if not match.status.is_pregame:
                raise InvalidTransitionError("Players can only be added before kickoff", match.status)

            player = self.access.roster.get_player(player_id)
            if player is None or player.team_id != match.team_id:
                raise MatchValidationError("Player not found or not part of this team")
            if uow.get_match_player(match_id, player_id) is not None:
                raise MatchValidationError("Player is already in this match")

            row = MatchPlayer(
                id=self.store.new_id(),
                match_id=match_id,
                player_id=player_id,
                created_at=now,
            )
            uow.add_match_player(row)
            return row

    # ---------- Match lead ---------- #

    def claim_match_lead(self, match_id: str, pin: str) -> Coach:
        """Claim the lead role; the first coach to claim it keeps it."""
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            actor = self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            if not isinstance(actor, CoachActor):
                raise AuthorizationError()
            coach = actor.coach
            if match.status == MatchStatus.FINISHED:
                raise InvalidTransitionError("The match has finished", match.status)
            if match.lead_coach_id and match.lead_coach_id != coach.id:
                raise InvalidTransitionError("Another coach already leads this match")
            match.lead_coach_id = coach.id

        log.info("Coach %s leads match %s", coach.id, match_id)
        return coach

    def release_match_lead(self, match_id: str, pin: str) -> None:
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            actor = self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            if not isinstance(actor, CoachActor):
                raise AuthorizationError()
            if match.lead_coach_id != actor.coach.id:
                raise InvalidTransitionError("You are not the match lead")
            match.lead_coach_id = None

        log.info("Coach %s released the lead of match %s", actor.coach.id, match_id)

    # ---------- Referee ---------- #

    def assign_referee(self, match_id: str, pin: str, referee_id: Optional[str]) -> Match:
        """Assign (or with ``None`` unassign) the match referee."""
        with self.store.transaction(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)

            if referee_id:
                referee = self.access.roster.get_referee(referee_id)
                if referee is None:
                    raise MatchValidationError("Referee not found")
                if not referee.active:
                    raise MatchValidationError("Referee is not active")
            match.referee_id = referee_id or None
            return match
