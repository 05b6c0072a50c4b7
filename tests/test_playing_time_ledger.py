import unittest

from sideline.models import MatchPlayer
from sideline.services import InvalidTransitionError, PlayingTimeLedger

MINUTE = 60_000


def make_player(player_id: str = "p1", **kwargs) -> MatchPlayer:
    return MatchPlayer(id=f"row-{player_id}", match_id="m1", player_id=player_id, **kwargs)


class PlayingTimeLedgerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.ledger = PlayingTimeLedger()

    def test_start_session_puts_player_on_field(self) -> None:
        player = make_player()
        self.ledger.start_session(player, 1_000)
        self.assertTrue(player.on_field)
        self.assertEqual(player.last_subbed_in_at, 1_000)

    def test_start_session_twice_is_rejected(self) -> None:
        player = make_player()
        self.ledger.start_session(player, 1_000)
        with self.assertRaises(InvalidTransitionError):
            self.ledger.start_session(player, 2_000)
        self.assertEqual(player.last_subbed_in_at, 1_000)

    def test_end_session_credits_minutes(self) -> None:
        player = make_player(minutes_played=2.0)
        self.ledger.start_session(player, 0)
        credited = self.ledger.end_session(player, 90_000)
        self.assertAlmostEqual(credited, 1.5)
        self.assertEqual(player.minutes_played, 3.5)
        self.assertIsNone(player.last_subbed_in_at)

    def test_end_session_without_open_session_is_noop(self) -> None:
        player = make_player(on_field=True, minutes_played=4.2)
        self.assertEqual(self.ledger.end_session(player, 10 * MINUTE), 0.0)
        self.assertEqual(player.minutes_played, 4.2)

    def test_every_session_end_rounds_half_up(self) -> None:
        player = make_player()
        self.ledger.start_session(player, 0)
        self.ledger.end_session(player, 15_000)
        self.assertEqual(player.minutes_played, 0.3)

    def test_minutes_equal_sum_of_sessions_and_never_decrease(self) -> None:
        player = make_player()
        history = []
        for start, end in ((0, 5 * MINUTE), (6 * MINUTE, 9 * MINUTE), (20 * MINUTE, 20 * MINUTE)):
            self.ledger.start_session(player, start)
            self.ledger.end_session(player, end)
            history.append(player.minutes_played)
        self.assertEqual(history, sorted(history))
        self.assertEqual(player.minutes_played, 8.0)

    def test_freeze_and_restart_only_touch_on_field_players(self) -> None:
        on = make_player("p1")
        bench = make_player("p2")
        self.ledger.start_session(on, 0)

        self.ledger.freeze_on_field([on, bench], 2 * MINUTE)
        self.assertEqual(on.minutes_played, 2.0)
        self.assertTrue(on.on_field)
        self.assertIsNone(on.last_subbed_in_at)

        self.ledger.restart_on_field([on, bench], 3 * MINUTE)
        self.assertEqual(on.last_subbed_in_at, 3 * MINUTE)
        self.assertFalse(bench.on_field)
        self.assertIsNone(bench.last_subbed_in_at)

    def test_substitute_while_clock_runs(self) -> None:
        out = make_player("p1")
        incoming = make_player("p2")
        self.ledger.start_session(out, 0)

        self.ledger.substitute(out, incoming, 4 * MINUTE, clock_running=True)

        self.assertFalse(out.on_field)
        self.assertEqual(out.minutes_played, 4.0)
        self.assertTrue(incoming.on_field)
        self.assertEqual(incoming.last_subbed_in_at, 4 * MINUTE)

    def test_substitute_while_clock_stopped_flips_flags_only(self) -> None:
        out = make_player("p1", on_field=True)
        incoming = make_player("p2")

        self.ledger.substitute(out, incoming, 4 * MINUTE, clock_running=False)

        self.assertFalse(out.on_field)
        self.assertEqual(out.minutes_played, 0.0)
        self.assertTrue(incoming.on_field)
        self.assertIsNone(incoming.last_subbed_in_at)

    def test_projected_minutes_include_open_session_only_when_live(self) -> None:
        player = make_player(minutes_played=2.0)
        self.ledger.start_session(player, 0)
        self.assertEqual(self.ledger.projected_minutes(player, MINUTE, match_live=True), 3.0)
        self.assertEqual(self.ledger.projected_minutes(player, MINUTE, match_live=False), 2.0)


if __name__ == "__main__":
    unittest.main()
