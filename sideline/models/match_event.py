"""Append-only match event records (goals, substitutions, quarter boundaries)."""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional


class EventType(Enum):
    GOAL = "goal"
    ASSIST = "assist"
    SUB_IN = "sub_in"
    SUB_OUT = "sub_out"
    QUARTER_START = "quarter_start"
    QUARTER_END = "quarter_end"


@dataclass
class MatchEvent:
    """
    One entry in a match timeline.

    The game-time fields are computed when the event is written so historical
    events render the same way even if clock configuration later changes.
    """
    id: str
    match_id: str
    type: EventType
    quarter: int
    timestamp: int
    game_second: Optional[int] = None
    display_minute: Optional[int] = None
    display_extra_minute: Optional[int] = None
    player_id: Optional[str] = None
    related_player_id: Optional[str] = None
    is_own_goal: bool = False
    is_opponent_goal: bool = False
    note: Optional[str] = None
    created_at: Optional[int] = None

    def copy(self) -> "MatchEvent":
        return replace(self)

    def to_json(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["type"] = self.type.value
        return data

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "MatchEvent":
        known = {f.name for f in fields(MatchEvent)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["type"] = EventType(data["type"])
        return MatchEvent(**kwargs)
