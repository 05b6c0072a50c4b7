"""
Game clock calculations for the Sideline match clock.

Pure functions that turn wall-clock instants into match-relative game time.
Paused intervals are excluded, every quarter is anchored at its nominal
offset, and stoppage time is reported separately using the football
``60+X`` notation in the final quarter.
"""
import math
from typing import Optional

from ..models import ClockSnapshot, GameTimeStamp
from ..utils import REGULATION_SECONDS
from .errors import MatchValidationError


def quarter_duration_seconds(quarter_count: int) -> int:
    """Nominal length of one quarter; regulation time split evenly."""
    if quarter_count is None or quarter_count < 1:
        raise MatchValidationError(f"Quarter count must be a positive integer, got {quarter_count!r}")
    return max(1, REGULATION_SECONDS // quarter_count)


def effective_event_time(snapshot: ClockSnapshot, now: int) -> int:
    """
    Instant to use for game-time math.

    While paused, events are stamped at the pause instant so elapsed time
    stays consistent with the frozen clock.
    """
    if snapshot.paused_at is not None:
        return snapshot.paused_at
    return now


def elapsed_quarter_seconds(snapshot: ClockSnapshot, effective_time: int) -> int:
    """Whole seconds played in the current quarter, excluding pauses."""
    if not snapshot.quarter_started_at:
        return 0

    elapsed_ms = (
        effective_time
        - snapshot.quarter_started_at
        - (snapshot.accumulated_pause_time or 0)
    )
    return int(max(0, elapsed_ms // 1000))


def quarter_overrun_seconds(snapshot: ClockSnapshot, effective_time: int) -> int:
    """Stoppage time accrued in the current quarter."""
    elapsed = elapsed_quarter_seconds(snapshot, effective_time)
    return max(0, elapsed - quarter_duration_seconds(snapshot.quarter_count))


def game_time_stamp(snapshot: ClockSnapshot, effective_time: int) -> GameTimeStamp:
    """
    Build football-style timing fields for an event.

    ``display_minute`` is zero-based (0 means 0'). Banked overrun from earlier
    quarters only shows once regulation time is reached in the final quarter.

    Args:
        snapshot: Clock fields of the match
        effective_time: Result of :func:`effective_event_time`

    Returns:
        GameTimeStamp with game second, display minute and optional extra minute
    """
    duration = quarter_duration_seconds(snapshot.quarter_count)
    quarter_offset = max(0, snapshot.current_quarter - 1) * duration
    elapsed = elapsed_quarter_seconds(snapshot, effective_time)
    clamped = min(elapsed, duration)
    overrun = max(0, elapsed - duration)

    game_second = quarter_offset + clamped
    is_final_quarter = snapshot.current_quarter >= snapshot.quarter_count
    has_reached_regulation = game_second >= REGULATION_SECONDS
    carried = (
        snapshot.banked_overrun_seconds or 0
        if is_final_quarter and has_reached_regulation
        else 0
    )
    total_extra = overrun + carried

    extra_minute: Optional[int] = None
    if total_extra > 0:
        extra_minute = math.ceil(total_extra / 60)

    return GameTimeStamp(
        game_second=game_second,
        display_minute=game_second // 60,
        display_extra_minute=extra_minute,
    )


def format_game_minute(stamp: GameTimeStamp) -> str:
    """
    Format a stamp for timelines.

    Example:
        >>> format_game_minute(GameTimeStamp(1020, 17))
        "17'"
        >>> format_game_minute(GameTimeStamp(3600, 60, 5))
        "60+5'"
    """
    if stamp.display_extra_minute:
        return f"{stamp.display_minute}+{stamp.display_extra_minute}'"
    return f"{stamp.display_minute}'"
