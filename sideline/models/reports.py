"""Dataclasses representing read-only playing time reports."""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


@dataclass
class PlayerTimeSummary:
    """Projected playing time for a single match player."""

    player_id: str
    match_player_id: str
    name: Optional[str]
    number: Optional[int]
    minutes_played: float
    on_field: bool
    is_keeper: bool
    absent: bool = False


@dataclass
class SubstitutionSuggestion:
    """One recommended swap that reduces playing-time inequality."""

    player_out: PlayerTimeSummary
    player_in: PlayerTimeSummary
    time_difference: float
    reason: str


@dataclass
class PlayingTimeReport:
    """Snapshot of playing time distribution for a match."""

    match_id: str
    status: str
    current_quarter: int
    players: List[PlayerTimeSummary] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SuggestionReport:
    """Substitution advice plus the lineup counts it was derived from."""

    match_id: str
    suggestions: List[SubstitutionSuggestion] = field(default_factory=list)
    on_field_count: int = 0
    bench_count: int = 0

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)
