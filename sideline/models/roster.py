"""
Roster records owned by the team/roster collaborator.

The match clock only reads these: coaches and referees to authorize PIN
actions, players to label playing-time reports.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Coach:
    id: str
    name: str
    pin: str
    team_ids: List[str] = field(default_factory=list)


@dataclass
class Referee:
    id: str
    name: str
    pin: str
    active: bool = True


@dataclass
class Player:
    """A roster player of a team."""
    id: str
    team_id: str
    name: str
    number: Optional[int] = None
    active: bool = True
