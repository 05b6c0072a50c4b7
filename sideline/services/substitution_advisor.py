"""Substitution advisor: recommends swaps that even out playing time."""

from typing import List, Sequence

from ..models import PlayerTimeSummary, SubstitutionSuggestion
from ..utils import FAIRNESS_THRESHOLD_MINUTES, MAX_SUGGESTIONS, round_minutes


class SubstitutionAdvisor:
    """
    Read-only ranking over a point-in-time playing time snapshot.

    The i-th most-played outfield player is paired with the i-th least-played
    bench player. A pair is only suggested when the gap exceeds the fairness
    threshold; executing a suggestion is an ordinary substitution.
    """

    def __init__(
        self,
        threshold_minutes: float = FAIRNESS_THRESHOLD_MINUTES,
        max_suggestions: int = MAX_SUGGESTIONS,
    ):
        self.threshold_minutes = threshold_minutes
        self.max_suggestions = max_suggestions

    @staticmethod
    def split_lineup(players: Sequence[PlayerTimeSummary]):
        """Return (outfield sorted most-played first, bench sorted least-played first)."""
        on_field = sorted(
            (p for p in players if p.on_field and not p.is_keeper),
            key=lambda p: p.minutes_played,
            reverse=True,
        )
        bench = sorted(
            (p for p in players if not p.on_field and not p.absent),
            key=lambda p: p.minutes_played,
        )
        return on_field, bench

    def suggest(
        self,
        players: Sequence[PlayerTimeSummary],
    ) -> List[SubstitutionSuggestion]:
        on_field, bench = self.split_lineup(players)
        suggestions: List[SubstitutionSuggestion] = []

        for player_out, player_in in list(zip(on_field, bench))[: self.max_suggestions]:
            difference = player_out.minutes_played - player_in.minutes_played
            if difference <= self.threshold_minutes:
                continue
            label = player_in.name or player_in.player_id
            suggestions.append(SubstitutionSuggestion(
                player_out=player_out,
                player_in=player_in,
                time_difference=round_minutes(difference),
                reason=f"{label} has played {round(difference)} min less",
            ))

        return suggestions
