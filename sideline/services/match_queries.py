"""
Read-only match queries: playing time, substitution advice, clock and timeline.

Queries never write. Playing time is projected to ``now`` for players whose
session is still open.
"""
from typing import Any, Dict, List, Optional

from ..models import (
    Match, MatchEvent, MatchStatus, PlayerTimeSummary, PlayingTimeReport, SuggestionReport
)
from ..utils import fmt_mmss
from ..utils.constants import PERIOD_LABELS
from .access_control import AccessControl, AccessPolicy
from .base_service import MatchServiceBase
from .errors import MatchNotFoundError
from .event_log import EventLog
from .game_clock import (
    effective_event_time, elapsed_quarter_seconds, game_time_stamp, format_game_minute
)
from .match_store import InMemoryMatchStore
from .substitution_advisor import SubstitutionAdvisor


class MatchQueries(MatchServiceBase):
    """Projections over the current match snapshot."""

    def __init__(
        self,
        store: InMemoryMatchStore,
        access: AccessControl,
        advisor: Optional[SubstitutionAdvisor] = None,
        **kwargs,
    ):
        super().__init__(store, access, **kwargs)
        self.advisor = advisor or SubstitutionAdvisor()

    def _player_summaries(self, uow, match: Match, now: int) -> List[PlayerTimeSummary]:
        match_live = match.status == MatchStatus.LIVE
        summaries = []
        for row in uow.match_players(match.id):
            player = self.access.roster.get_player(row.player_id)
            summaries.append(PlayerTimeSummary(
                player_id=row.player_id,
                match_player_id=row.id,
                name=player.name if player else None,
                number=player.number if player else None,
                minutes_played=self.ledger.projected_minutes(row, now, match_live),
                on_field=row.on_field,
                is_keeper=row.is_keeper,
                absent=row.absent,
            ))
        return summaries

    def get_playing_time(self, match_id: str, pin: str, now: Optional[int] = None) -> PlayingTimeReport:
        """Minutes per squad player, least-played first."""
        now = self._now(now)
        with self.store.read(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            players = self._player_summaries(uow, match, now)

        players.sort(key=lambda p: p.minutes_played)
        return PlayingTimeReport(
            match_id=match_id,
            status=match.status.value,
            current_quarter=match.current_quarter,
            players=players,
        )

    def get_suggested_substitutions(
        self, match_id: str, pin: str, now: Optional[int] = None
    ) -> SuggestionReport:
        """Up to three fairness-driven swaps plus lineup counts."""
        now = self._now(now)
        with self.store.read(match_id) as uow:
            match = self._load_match(uow, match_id)
            self.access.authorize(match, pin, AccessPolicy.TEAM_COACH)
            players = self._player_summaries(uow, match, now)

        on_field, bench = self.advisor.split_lineup(players)
        keeper_on_field = any(p.on_field and p.is_keeper for p in players)
        return SuggestionReport(
            match_id=match_id,
            suggestions=self.advisor.suggest(players),
            on_field_count=len(on_field) + (1 if keeper_on_field else 0),
            bench_count=len(bench),
        )

    def get_match_clock(self, match_id: str, now: Optional[int] = None) -> Dict[str, Any]:
        """Public clock state for synchronized scoreboards."""
        now = self._now(now)
        with self.store.read(match_id) as uow:
            match = self._load_match(uow, match_id)
        return self._clock_payload(match, now)

    def get_match_clock_by_code(self, public_code: str, now: Optional[int] = None) -> Dict[str, Any]:
        now = self._now(now)
        with self.store.read() as uow:
            match = uow.find_match_by_code(public_code.strip().upper())
        if match is None:
            raise MatchNotFoundError(public_code)
        return self._clock_payload(match, now)

    def get_timeline(self, match_id: str) -> List[MatchEvent]:
        with self.store.read(match_id) as uow:
            self._load_match(uow, match_id)
            return EventLog.timeline(uow, match_id)

    @staticmethod
    def _clock_payload(match: Match, now: int) -> Dict[str, Any]:
        stamp = None
        quarter_clock = None
        if match.status == MatchStatus.LIVE:
            snapshot = match.clock_snapshot()
            effective = effective_event_time(snapshot, now)
            stamp = game_time_stamp(snapshot, effective)
            quarter_clock = fmt_mmss(elapsed_quarter_seconds(snapshot, effective))
        return {
            "match_id": match.id,
            "public_code": match.public_code,
            "opponent": match.opponent,
            "is_home": match.is_home,
            "status": match.status.value,
            "current_quarter": match.current_quarter,
            "quarter_count": match.quarter_count,
            "period_label": PERIOD_LABELS.get(match.quarter_count, "Period"),
            "paused": match.is_paused,
            "home_score": match.home_score,
            "away_score": match.away_score,
            "game_time": stamp.to_json() if stamp else None,
            "display": format_game_minute(stamp) if stamp else None,
            "quarter_clock": quarter_clock,
        }
