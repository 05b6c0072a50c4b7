"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service
instances that share one store, one roster directory and one wall clock.
"""
from typing import Callable, Optional

from ..utils import AppConfig, now_ms
from .access_control import AccessControl, InMemoryRoster, RosterDirectory
from .lineup_service import LineupService
from .match_actions import MatchActions
from .match_lifecycle import MatchLifecycle
from .match_queries import MatchQueries
from .match_store import InMemoryMatchStore
from .persistence_service import JsonFileMatchStore
from .playing_time import PlayingTimeLedger
from .substitution_advisor import SubstitutionAdvisor


class ServiceFactory:
    """
    Factory for creating match services with shared collaborators.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        store: Optional[InMemoryMatchStore] = None,
        roster: Optional[RosterDirectory] = None,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize factory.

        Args:
            config: Application configuration; selects the store backend
            store: Explicit store, overriding the configured backend
            roster: Roster collaborator; an empty in-memory roster by default
            clock: Wall clock returning epoch milliseconds
        """
        self.config = config or AppConfig()
        self._store = store
        self._roster = roster
        self.clock = clock
        self._ledger = PlayingTimeLedger()

    def get_store(self) -> InMemoryMatchStore:
        """Get singleton match store."""
        if self._store is None:
            if self.config.data_file:
                self._store = JsonFileMatchStore(self.config.data_file)
            else:
                self._store = InMemoryMatchStore()
        return self._store

    def get_roster(self) -> RosterDirectory:
        """Get singleton roster directory."""
        if self._roster is None:
            self._roster = InMemoryRoster()
        return self._roster

    def create_access_control(self) -> AccessControl:
        return AccessControl(self.get_roster())

    def create_complete_service_suite(self) -> dict:
        """
        Create the full suite of match services.

        Returns:
            Dictionary containing all configured services
        """
        store = self.get_store()
        access = self.create_access_control()
        shared = dict(ledger=self._ledger, clock=self.clock)

        return {
            'lifecycle': MatchLifecycle(store, access, **shared),
            'actions': MatchActions(store, access, **shared),
            'lineup': LineupService(store, access, **shared),
            'queries': MatchQueries(store, access, advisor=SubstitutionAdvisor(), **shared),
            'store': store,
            'roster': self.get_roster(),
        }
