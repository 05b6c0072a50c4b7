"""
Append-only match event log.

Events carry the effective timestamp and the game-time fields computed at
write time. The only deletion path is undoing the most recent goal.
"""
from typing import List, Optional

from ..models import Match, MatchEvent, EventType
from ..utils import ASSIST_LINK_WINDOW_MS
from .game_clock import game_time_stamp
from .match_store import InMemoryMatchStore, UnitOfWork


class EventLog:
    """Writes and reads timeline entries inside a unit of work."""

    @staticmethod
    def append(
        uow: UnitOfWork,
        match: Match,
        event_type: EventType,
        effective_time: int,
        now: int,
        quarter: Optional[int] = None,
        **fields,
    ) -> MatchEvent:
        """
        Record an event stamped with game time.

        Args:
            uow: Unit of work of the current operation
            match: Match the event belongs to
            event_type: Kind of event
            effective_time: Instant the event happened on the game clock
            now: Wall-clock time of the operation (``created_at``)
            quarter: Quarter to record; defaults to the match's current quarter
            **fields: Extra MatchEvent fields (player ids, flags, note)
        """
        stamp = game_time_stamp(match.clock_snapshot(), effective_time)
        event = MatchEvent(
            id=InMemoryMatchStore.new_id(),
            match_id=match.id,
            type=event_type,
            quarter=quarter if quarter is not None else match.current_quarter,
            timestamp=effective_time,
            game_second=stamp.game_second,
            display_minute=stamp.display_minute,
            display_extra_minute=stamp.display_extra_minute,
            created_at=now,
            **fields,
        )
        uow.add_event(event)
        return event

    @staticmethod
    def timeline(uow: UnitOfWork, match_id: str) -> List[MatchEvent]:
        return uow.events(match_id)

    @staticmethod
    def latest_goal(uow: UnitOfWork, match_id: str) -> Optional[MatchEvent]:
        goals = [ev for ev in uow.events(match_id) if ev.type == EventType.GOAL]
        return goals[-1] if goals else None

    @staticmethod
    def linked_assist(uow: UnitOfWork, goal: MatchEvent) -> Optional[MatchEvent]:
        """
        Assist recorded together with ``goal``.

        Linked by the assister, the scorer and timestamps at most one second
        apart; the most recent match wins.
        """
        if not goal.related_player_id:
            return None
        for event in reversed(uow.events(goal.match_id)):
            if (
                event.type == EventType.ASSIST
                and event.player_id == goal.related_player_id
                and event.related_player_id == goal.player_id
                and abs(event.timestamp - goal.timestamp) <= ASSIST_LINK_WINDOW_MS
            ):
                return event
        return None
