"""
Match model for the Sideline match clock.

This module contains the Match dataclass which represents one live fixture:
its clock fields, score, authorization fields and lifecycle timestamps.
"""
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional

from .clock import ClockSnapshot
from ..utils import DEFAULT_QUARTER_COUNT


class MatchStatus(Enum):
    """Lifecycle states of a match."""
    SCHEDULED = "scheduled"
    LINEUP = "lineup"
    LIVE = "live"
    HALFTIME = "halftime"
    FINISHED = "finished"

    @property
    def is_pregame(self) -> bool:
        return self in (MatchStatus.SCHEDULED, MatchStatus.LINEUP)

    @property
    def is_in_play(self) -> bool:
        return self in (MatchStatus.LIVE, MatchStatus.HALFTIME)


@dataclass
class Match:
    """
    Represents one fixture tracked by the clock.

    Attributes:
        id: Opaque match identifier
        team_id: Team this match belongs to
        opponent: Opponent name
        is_home: Whether the team plays at home
        public_code: Public join code for spectators
        coach_pin: PIN the match was created with
        quarter_count: Number of quarters (2 or 4)
        current_quarter: Active quarter (1..quarter_count)
        status: Lifecycle state
        home_score: Goals for the home side
        away_score: Goals for the away side
        quarter_started_at: Epoch ms the current quarter's clock started
        paused_at: Epoch ms of an in-progress pause
        accumulated_pause_time: Paused milliseconds within the current quarter
        banked_overrun_seconds: Stoppage seconds carried into the final quarter
        referee_id: Assigned referee, if any
        lead_coach_id: Coach holding the match lead, if claimed
    """
    id: str
    team_id: str
    opponent: str
    is_home: bool = True
    public_code: str = ""
    coach_pin: str = ""
    quarter_count: int = DEFAULT_QUARTER_COUNT
    current_quarter: int = 1
    status: MatchStatus = MatchStatus.SCHEDULED
    home_score: int = 0
    away_score: int = 0
    # clock
    quarter_started_at: Optional[int] = None
    paused_at: Optional[int] = None
    accumulated_pause_time: int = 0
    banked_overrun_seconds: int = 0
    # authorization
    referee_id: Optional[str] = None
    lead_coach_id: Optional[str] = None
    # lifecycle timestamps
    scheduled_at: Optional[int] = None
    started_at: Optional[int] = None
    finished_at: Optional[int] = None
    created_at: Optional[int] = None

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None

    @property
    def is_clock_running(self) -> bool:
        """True while a live quarter is ticking (not paused)."""
        return self.status == MatchStatus.LIVE and self.paused_at is None

    def clock_snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            current_quarter=self.current_quarter,
            quarter_count=self.quarter_count,
            quarter_started_at=self.quarter_started_at,
            paused_at=self.paused_at,
            accumulated_pause_time=self.accumulated_pause_time or 0,
            banked_overrun_seconds=self.banked_overrun_seconds or 0,
        )

    def copy(self) -> "Match":
        return replace(self)

    def to_json(self) -> Dict[str, Any]:
        """Convert Match to a JSON-serializable dictionary."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["status"] = self.status.value
        return data

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "Match":
        """Create a Match from its JSON dictionary."""
        known = {f.name for f in fields(Match)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["status"] = MatchStatus(data.get("status", MatchStatus.SCHEDULED.value))
        kwargs["accumulated_pause_time"] = int(data.get("accumulated_pause_time") or 0)
        kwargs["banked_overrun_seconds"] = int(data.get("banked_overrun_seconds") or 0)
        return Match(**kwargs)
