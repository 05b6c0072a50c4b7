import unittest

from sideline.models import PlayerTimeSummary
from sideline.services import AuthorizationError, SubstitutionAdvisor
from tests.factories import (
    LEAD_PIN, MINUTE, REFEREE_PIN, T0, build_services, kick_off
)


def summary(player_id: str, minutes: float, on_field: bool = False, keeper: bool = False,
            absent: bool = False) -> PlayerTimeSummary:
    return PlayerTimeSummary(
        player_id=player_id,
        match_player_id=f"row-{player_id}",
        name=player_id.upper(),
        number=None,
        minutes_played=minutes,
        on_field=on_field,
        is_keeper=keeper,
        absent=absent,
    )


class SubstitutionAdvisorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.advisor = SubstitutionAdvisor()

    def test_pairs_most_played_with_least_played(self) -> None:
        players = [
            summary("a", 20, on_field=True),
            summary("b", 12, on_field=True),
            summary("c", 30, on_field=True, keeper=True),
            summary("x", 0),
            summary("y", 5),
        ]
        suggestions = self.advisor.suggest(players)

        pairs = [(s.player_out.player_id, s.player_in.player_id) for s in suggestions]
        self.assertEqual(pairs, [("a", "x"), ("b", "y")])
        self.assertEqual(suggestions[0].time_difference, 20.0)
        self.assertEqual(suggestions[0].reason, "X has played 20 min less")

    def test_gap_must_exceed_threshold(self) -> None:
        players = [summary("a", 6, on_field=True), summary("x", 4)]
        self.assertEqual(self.advisor.suggest(players), [])
        players = [summary("a", 6.1, on_field=True), summary("x", 4)]
        self.assertEqual(len(self.advisor.suggest(players)), 1)

    def test_skipped_pair_does_not_shift_ranks(self) -> None:
        players = [
            summary("a", 10, on_field=True),
            summary("b", 3, on_field=True),
            summary("x", 9),
            summary("y", 0),
        ]
        pairs = [(s.player_out.player_id, s.player_in.player_id) for s in self.advisor.suggest(players)]
        self.assertEqual(pairs, [("a", "y")])

    def test_at_most_three_disjoint_suggestions(self) -> None:
        players = [summary(f"on{i}", 30 + i, on_field=True) for i in range(5)]
        players += [summary(f"bench{i}", i) for i in range(5)]
        suggestions = self.advisor.suggest(players)

        self.assertEqual(len(suggestions), 3)
        ids = [s.player_out.player_id for s in suggestions] + [s.player_in.player_id for s in suggestions]
        self.assertEqual(len(ids), len(set(ids)))

    def test_absent_and_keeper_never_suggested(self) -> None:
        players = [
            summary("keeper", 40, on_field=True, keeper=True),
            summary("away", 0, absent=True),
        ]
        self.assertEqual(self.advisor.suggest(players), [])


class SuggestionQueryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.services = build_services()
        self.queries = self.services["queries"]
        self.match = kick_off(self.services)

    def test_live_projection_drives_suggestions(self) -> None:
        report = self.queries.get_suggested_substitutions(self.match.id, LEAD_PIN, now=T0 + 10 * MINUTE)

        self.assertEqual(report.on_field_count, 5)
        self.assertEqual(report.bench_count, 3)
        self.assertEqual(len(report.suggestions), 3)
        for suggestion in report.suggestions:
            self.assertEqual(suggestion.player_out.minutes_played, 10.0)
            self.assertEqual(suggestion.player_in.minutes_played, 0.0)
            self.assertNotEqual(suggestion.player_out.player_id, "p1")

    def test_no_suggestions_right_after_kickoff(self) -> None:
        report = self.queries.get_suggested_substitutions(self.match.id, LEAD_PIN, now=T0 + MINUTE)
        self.assertEqual(report.suggestions, [])

    def test_playing_time_sorted_least_first(self) -> None:
        self.services["actions"].substitute(self.match.id, LEAD_PIN, "p2", "p6", now=T0 + 4 * MINUTE)
        report = self.queries.get_playing_time(self.match.id, LEAD_PIN, now=T0 + 6 * MINUTE)

        minutes = [p.minutes_played for p in report.players]
        self.assertEqual(minutes, sorted(minutes))
        by_id = {p.player_id: p for p in report.players}
        self.assertEqual(by_id["p2"].minutes_played, 4.0)
        self.assertEqual(by_id["p6"].minutes_played, 2.0)
        self.assertEqual(by_id["p3"].minutes_played, 6.0)
        self.assertEqual(by_id["p3"].name, "Player 3")
        self.assertEqual(report.status, "live")
        self.assertEqual(report.current_quarter, 1)

    def test_reports_require_team_coach(self) -> None:
        self.services["lineup"].assign_referee(self.match.id, LEAD_PIN, "ref-1")
        with self.assertRaises(AuthorizationError):
            self.queries.get_playing_time(self.match.id, REFEREE_PIN, now=T0)


class MatchClockQueryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.services = build_services()
        self.queries = self.services["queries"]
        self.match = kick_off(self.services)

    def test_clock_by_public_code(self) -> None:
        clock = self.queries.get_match_clock_by_code(self.match.public_code.lower(), now=T0 + 75_000)
        self.assertEqual(clock["match_id"], self.match.id)
        self.assertEqual(clock["status"], "live")
        self.assertEqual(clock["display"], "1'")
        self.assertEqual(clock["quarter_clock"], "01:15")
        self.assertEqual(clock["period_label"], "Quarter")
        self.assertNotIn("coach_pin", clock)

    def test_clock_frozen_while_paused(self) -> None:
        self.services["lifecycle"].pause(self.match.id, LEAD_PIN, now=T0 + 2 * MINUTE)
        clock = self.queries.get_match_clock(self.match.id, now=T0 + 9 * MINUTE)
        self.assertTrue(clock["paused"])
        self.assertEqual(clock["game_time"]["game_second"], 120)


if __name__ == "__main__":
    unittest.main()
