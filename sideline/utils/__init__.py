"""
Utilities package for the Sideline match clock.

This package contains utility functions and configuration used throughout the application.
"""
from .time_utils import fmt_mmss, now_ms, round_minutes, ms_to_minutes
from .config import AppConfig
from .constants import (
    APP_TITLE, REGULATION_MINUTES, REGULATION_SECONDS, DEFAULT_QUARTER_COUNT,
    SUPPORTED_QUARTER_COUNTS, FAIRNESS_THRESHOLD_MINUTES, MAX_SUGGESTIONS,
    ASSIST_LINK_WINDOW_MS
)

__all__ = [
    "fmt_mmss", "now_ms", "round_minutes", "ms_to_minutes", "AppConfig",
    "APP_TITLE", "REGULATION_MINUTES", "REGULATION_SECONDS", "DEFAULT_QUARTER_COUNT",
    "SUPPORTED_QUARTER_COUNTS", "FAIRNESS_THRESHOLD_MINUTES", "MAX_SUGGESTIONS",
    "ASSIST_LINK_WINDOW_MS"
]
