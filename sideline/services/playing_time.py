"""
Playing time ledger for the Sideline match clock.

Keeps every MatchPlayer's on-field minutes in lockstep with the game clock.
A session opens when a player takes the field while the clock runs and closes
on substitution, pause, quarter end or match end. Minutes are rounded to one
decimal every time a session closes.
"""
from typing import Iterable

from ..models import MatchPlayer
from ..utils import round_minutes, ms_to_minutes
from .errors import InvalidTransitionError


class PlayingTimeLedger:
    """Start/stop of on-field sessions and accumulation of minutes."""

    @staticmethod
    def start_session(player: MatchPlayer, start_time: int) -> None:
        """
        Put a player on the field and start timing them.

        Raises:
            InvalidTransitionError: If the player already has an open session
        """
        if player.has_open_session:
            raise InvalidTransitionError(
                f"Player {player.player_id} already has an open playing session"
            )
        player.on_field = True
        player.last_subbed_in_at = start_time

    @staticmethod
    def end_session(player: MatchPlayer, end_time: int) -> float:
        """
        Close the open session and add its minutes to the player's total.

        Args:
            player: Player whose session ends
            end_time: Epoch ms the session ends

        Returns:
            Minutes credited for this session (0 when no session was open)
        """
        if not player.has_open_session:
            return 0.0

        session_minutes = ms_to_minutes(max(0, end_time - player.last_subbed_in_at))
        player.minutes_played = round_minutes((player.minutes_played or 0.0) + session_minutes)
        player.last_subbed_in_at = None
        return session_minutes

    def freeze_on_field(self, players: Iterable[MatchPlayer], at: int) -> None:
        """End the sessions of every on-field player (pause, quarter end)."""
        for player in players:
            if player.on_field and player.has_open_session:
                self.end_session(player, at)

    def restart_on_field(self, players: Iterable[MatchPlayer], at: int) -> None:
        """Start sessions for every on-field player (kickoff, resume)."""
        for player in players:
            if player.on_field and not player.has_open_session:
                self.start_session(player, at)

    def substitute(
        self,
        player_out: MatchPlayer,
        player_in: MatchPlayer,
        at: int,
        clock_running: bool,
    ) -> None:
        """
        Swap two players and keep their ledgers consistent.

        The incoming player only starts a session while the clock runs;
        otherwise the flag flips and the session starts at the next kickoff
        or resume.
        """
        self.end_session(player_out, at)
        player_out.on_field = False
        player_out.last_subbed_in_at = None

        if clock_running and not player_in.on_field:
            self.start_session(player_in, at)
        else:
            player_in.on_field = True

    @staticmethod
    def projected_minutes(player: MatchPlayer, now: int, match_live: bool) -> float:
        """Stored minutes plus the open session's live time, one decimal."""
        total = player.minutes_played or 0.0
        if match_live and player.on_field and player.has_open_session:
            total += ms_to_minutes(max(0, now - player.last_subbed_in_at))
        return round_minutes(total)

