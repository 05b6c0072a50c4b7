"""
Transactional match store.

Every match operation reads one Match plus its MatchPlayer rows, computes new
values and commits all resulting writes as one unit. The store hands out a
:class:`UnitOfWork` per operation: reads go through an identity map so the
operation sees its own writes, and nothing reaches the committed tables until
the ``with`` block exits cleanly. One lock per match id serializes operations
on the same match.
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from ..models import Match, MatchPlayer, MatchEvent

log = logging.getLogger(__name__)


@dataclass
class StoreTables:
    """Committed state of the store."""
    matches: Dict[str, Match] = field(default_factory=dict)
    match_players: Dict[str, MatchPlayer] = field(default_factory=dict)
    events: Dict[str, MatchEvent] = field(default_factory=dict)


class UnitOfWork:
    """Read-your-writes view of the store for the duration of one operation."""

    def __init__(self, committed: StoreTables):
        self._committed = committed
        self._matches: Dict[str, Match] = {}
        self._players: Dict[str, MatchPlayer] = {}
        self._new_events: Dict[str, MatchEvent] = {}
        self._deleted_events: Set[str] = set()

    # ---------- Matches ---------- #

    def get_match(self, match_id: str) -> Optional[Match]:
        if match_id not in self._matches:
            committed = self._committed.matches.get(match_id)
            if committed is None:
                return None
            self._matches[match_id] = committed.copy()
        return self._matches[match_id]

    def find_match_by_code(self, public_code: str) -> Optional[Match]:
        for match in self._matches.values():
            if match.public_code == public_code:
                return match
        for match_id, match in self._committed.matches.items():
            if match.public_code == public_code:
                return self.get_match(match_id)
        return None

    def add_match(self, match: Match) -> None:
        self._matches[match.id] = match

    # ---------- Match players ---------- #

    def match_players(self, match_id: str) -> List[MatchPlayer]:
        """All squad rows of a match, in insertion order."""
        for row_id, row in self._committed.match_players.items():
            if row.match_id == match_id and row_id not in self._players:
                self._players[row_id] = row.copy()
        return [row for row in self._players.values() if row.match_id == match_id]

    def get_match_player(self, match_id: str, player_id: str) -> Optional[MatchPlayer]:
        for row in self.match_players(match_id):
            if row.player_id == player_id:
                return row
        return None

    def add_match_player(self, row: MatchPlayer) -> None:
        self._players[row.id] = row

    # ---------- Events ---------- #

    def events(self, match_id: str) -> List[MatchEvent]:
        """Events of a match ordered by timestamp, ties in insertion order."""
        rows = [
            ev.copy()
            for ev in self._committed.events.values()
            if ev.match_id == match_id and ev.id not in self._deleted_events
        ]
        rows.extend(ev for ev in self._new_events.values() if ev.match_id == match_id)
        return sorted(rows, key=lambda ev: ev.timestamp)

    def add_event(self, event: MatchEvent) -> None:
        self._new_events[event.id] = event

    def delete_event(self, event_id: str) -> None:
        if event_id in self._new_events:
            del self._new_events[event_id]
        else:
            self._deleted_events.add(event_id)

    # ---------- Commit ---------- #

    def apply_to(self, committed: StoreTables) -> StoreTables:
        """Return new tables with every staged change applied."""
        matches = dict(committed.matches)
        matches.update({k: m.copy() for k, m in self._matches.items()})
        players = dict(committed.match_players)
        players.update({k: row.copy() for k, row in self._players.items()})
        events = {
            ev_id: ev for ev_id, ev in committed.events.items()
            if ev_id not in self._deleted_events
        }
        events.update({k: ev.copy() for k, ev in self._new_events.items()})
        return StoreTables(matches=matches, match_players=players, events=events)


class InMemoryMatchStore:
    """
    Store keeping all tables in process memory.

    Subclasses persist the tables by overriding :meth:`_persist`; a failure
    there aborts the commit and leaves the in-memory tables untouched.
    """

    def __init__(self, tables: Optional[StoreTables] = None):
        self._tables = tables or StoreTables()
        self._commit_lock = threading.Lock()
        self._locks_guard = threading.Lock()
        self._match_locks: Dict[str, threading.RLock] = {}

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @contextmanager
    def transaction(self, match_id: str) -> Iterator[UnitOfWork]:
        """
        Open an all-or-nothing unit of work for one match.

        Any exception raised inside the block discards every staged change.
        """
        with self._lock_for(match_id):
            uow = UnitOfWork(self._tables)
            yield uow
            self._commit(uow)

    @contextmanager
    def exclusive(self, key: str) -> Iterator[None]:
        """Hold the named lock; serializes work spanning several matches."""
        with self._lock_for(key):
            yield

    @contextmanager
    def read(self, match_id: Optional[str] = None) -> Iterator[UnitOfWork]:
        """Read-only view; staged changes are never committed."""
        yield UnitOfWork(self._tables)

    def snapshot(self) -> StoreTables:
        return self._tables

    def _lock_for(self, match_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._match_locks.get(match_id)
            if lock is None:
                lock = threading.RLock()
                self._match_locks[match_id] = lock
            return lock

    def _commit(self, uow: UnitOfWork) -> None:
        with self._commit_lock:
            new_tables = uow.apply_to(self._tables)
            self._persist(new_tables)
            self._tables = new_tables

    def _persist(self, tables: StoreTables) -> None:
        """Hook for durable stores; the in-memory store keeps nothing else."""
        pass
