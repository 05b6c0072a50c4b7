"""
Utility functions for the Sideline match clock.

This module contains common time helpers used throughout the application.
All instants are integer epoch milliseconds.
"""
import math
import time


def fmt_mmss(seconds: int) -> str:
    """
    Format seconds as MM:SS string.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(3661)
        '61:01'
    """
    m = seconds // 60
    s = seconds % 60
    return f"{m:02d}:{s:02d}"


def now_ms() -> int:
    """
    Get current timestamp in epoch milliseconds.

    Returns:
        Current time as integer epoch milliseconds
    """
    return int(time.time() * 1000)


def round_minutes(minutes: float) -> float:
    """Round minutes to one decimal place, halves rounding up."""
    return math.floor(minutes * 10 + 0.5) / 10


def ms_to_minutes(duration_ms: float) -> float:
    return duration_ms / 60000
