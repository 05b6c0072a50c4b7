"""
MatchPlayer model: one roster player's participation in one match.
"""
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional


@dataclass
class MatchPlayer:
    """
    Represents a player's lineup state and playing-time ledger for a match.

    Attributes:
        id: Row identifier
        match_id: Match this row belongs to
        player_id: Roster player (stable across matches)
        on_field: Whether the player is currently on the field
        is_keeper: Whether the player is the goalkeeper
        absent: In the squad but not present (cannot be subbed on)
        last_subbed_in_at: Epoch ms the open on-field session began
        minutes_played: Minutes from completed sessions, one decimal
        field_slot_index: Display slot in the formation, if any
    """
    id: str
    match_id: str
    player_id: str
    on_field: bool = False
    is_keeper: bool = False
    absent: bool = False
    last_subbed_in_at: Optional[int] = None
    minutes_played: float = 0.0
    field_slot_index: Optional[int] = None
    created_at: Optional[int] = None

    @property
    def has_open_session(self) -> bool:
        return self.last_subbed_in_at is not None

    def copy(self) -> "MatchPlayer":
        return replace(self)

    def to_json(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "MatchPlayer":
        known = {f.name for f in fields(MatchPlayer)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["minutes_played"] = float(data.get("minutes_played") or 0.0)
        return MatchPlayer(**kwargs)
