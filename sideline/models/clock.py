"""Value types exchanged with the game clock functions."""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class ClockSnapshot:
    """
    The clock-relevant fields of a match at one point in time.

    Attributes:
        current_quarter: Active quarter, 1-based
        quarter_count: Number of quarters in the match (2 or 4)
        quarter_started_at: Epoch ms the current quarter's clock started
        paused_at: Epoch ms of an in-progress pause
        accumulated_pause_time: Paused milliseconds within the current quarter
        banked_overrun_seconds: Stoppage seconds carried from earlier quarters
    """
    current_quarter: int
    quarter_count: int
    quarter_started_at: Optional[int] = None
    paused_at: Optional[int] = None
    accumulated_pause_time: int = 0
    banked_overrun_seconds: int = 0


@dataclass(frozen=True)
class GameTimeStamp:
    """Football-style game time for an event (zero-based minutes)."""
    game_second: int
    display_minute: int
    display_extra_minute: Optional[int] = None

    def to_json(self) -> Dict[str, Optional[int]]:
        return {
            "game_second": self.game_second,
            "display_minute": self.display_minute,
            "display_extra_minute": self.display_extra_minute,
        }
