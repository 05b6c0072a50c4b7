"""
Models package for the Sideline match clock.

This package contains the core data models used throughout the application.
"""
from .clock import ClockSnapshot, GameTimeStamp
from .match import Match, MatchStatus
from .match_player import MatchPlayer
from .match_event import MatchEvent, EventType
from .roster import Coach, Referee, Player
from .reports import (
    PlayerTimeSummary, SubstitutionSuggestion, PlayingTimeReport, SuggestionReport
)

__all__ = [
    "ClockSnapshot", "GameTimeStamp", "Match", "MatchStatus", "MatchPlayer",
    "MatchEvent", "EventType", "Coach", "Referee", "Player",
    "PlayerTimeSummary", "SubstitutionSuggestion", "PlayingTimeReport", "SuggestionReport"
]
