"""
Sideline Match Clock

Live match tracking for youth football: a pausable multi-quarter game clock,
PIN-based coach and referee access, per-player playing time and fair
substitution suggestions.

This package provides the match services and a Flask JSON API over them.
"""
from .models import Match, MatchPlayer, MatchEvent, MatchStatus, EventType
from .services import ServiceFactory, MatchError, InMemoryMatchStore, JsonFileMatchStore
from .ui import create_app, run_web_app
from .utils import AppConfig, fmt_mmss, now_ms, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Match", "MatchPlayer", "MatchEvent", "MatchStatus", "EventType",
    "ServiceFactory", "MatchError", "InMemoryMatchStore", "JsonFileMatchStore",
    "create_app", "run_web_app", "AppConfig", "fmt_mmss", "now_ms", "APP_TITLE"
]
