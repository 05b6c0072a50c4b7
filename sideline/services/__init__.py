"""
Services package for the Sideline match clock.

This package contains the game clock, access control, playing time ledger,
lifecycle state machine, event log and the read-only advisor and queries.
"""
from .errors import (
    MatchError, MatchNotFoundError, PlayerNotInMatchError, AuthorizationError,
    InvalidTransitionError, MatchValidationError, StoreError
)
from .game_clock import (
    effective_event_time, quarter_duration_seconds, elapsed_quarter_seconds,
    quarter_overrun_seconds, game_time_stamp, format_game_minute
)
from .access_control import (
    AccessControl, AccessPolicy, AuthResult, CoachActor, RefereeActor, Unauthorized,
    RosterDirectory, InMemoryRoster
)
from .match_store import InMemoryMatchStore, UnitOfWork, StoreTables
from .persistence_service import PersistenceService, JsonFileMatchStore
from .playing_time import PlayingTimeLedger
from .event_log import EventLog
from .match_lifecycle import MatchLifecycle
from .match_actions import MatchActions
from .lineup_service import LineupService
from .substitution_advisor import SubstitutionAdvisor
from .match_queries import MatchQueries
from .service_factory import ServiceFactory

__all__ = [
    "MatchError", "MatchNotFoundError", "PlayerNotInMatchError", "AuthorizationError",
    "InvalidTransitionError", "MatchValidationError", "StoreError",
    "effective_event_time", "quarter_duration_seconds", "elapsed_quarter_seconds",
    "quarter_overrun_seconds", "game_time_stamp", "format_game_minute",
    "AccessControl", "AccessPolicy", "AuthResult", "CoachActor", "RefereeActor",
    "Unauthorized", "RosterDirectory", "InMemoryRoster",
    "InMemoryMatchStore", "UnitOfWork", "StoreTables", "PersistenceService",
    "JsonFileMatchStore", "PlayingTimeLedger", "EventLog", "MatchLifecycle",
    "MatchActions", "LineupService", "SubstitutionAdvisor", "MatchQueries",
    "ServiceFactory"
]
