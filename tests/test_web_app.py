"""Flask API tests using the test client."""

import unittest
from unittest.mock import patch

from sideline.services import StoreError
from sideline.ui import create_app
from tests.factories import (
    ASSISTANT_PIN, LEAD_PIN, MINUTE, REFEREE_PIN, STARTERS, TEAM_ID, FixedClock, build_services
)


class WebAppTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FixedClock()
        self.services = build_services(clock=self.clock)
        self.app = create_app(self.services)
        self.client = self.app.test_client()

    def post(self, url: str, pin: str = LEAD_PIN, **body):
        return self.client.post(url, json={"pin": pin, **body})

    def create_match(self) -> dict:
        response = self.post("/api/matches", team_id=TEAM_ID, opponent="Rovers",
                             is_home=True, player_ids=["p1", "p2", "p3", "p4", "p5", "p6"])
        self.assertEqual(response.status_code, 201)
        return response.get_json()["match"]

    def start_match(self) -> dict:
        match = self.create_match()
        for player_id in STARTERS:
            self.post(f"/api/matches/{match['id']}/players/{player_id}/on-field")
        response = self.post(f"/api/matches/{match['id']}/start")
        self.assertEqual(response.status_code, 200)
        return response.get_json()["match"]

    def test_health(self) -> None:
        response = self.client.get("/api/health")
        self.assertEqual(response.get_json(), {"success": True, "app": "Sideline Match Clock"})

    def test_create_match_hides_pin(self) -> None:
        match = self.create_match()
        self.assertEqual(match["status"], "scheduled")
        self.assertNotIn("coach_pin", match)

    def test_bad_pin_is_forbidden_with_generic_message(self) -> None:
        match = self.create_match()
        response = self.post(f"/api/matches/{match['id']}/start", pin="0000")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json(), {"success": False, "error": "Invalid match or PIN"})

    def test_pin_accepted_from_header(self) -> None:
        match = self.create_match()
        response = self.client.post(f"/api/matches/{match['id']}/lineup", headers={"X-Match-Pin": LEAD_PIN})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["match"]["status"], "lineup")

    def test_invalid_transition_reports_current_status(self) -> None:
        match = self.start_match()
        self.assertEqual(self.post(f"/api/matches/{match['id']}/pause").status_code, 200)
        response = self.post(f"/api/matches/{match['id']}/pause")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["status"], "live")

    def test_unknown_match_is_not_found(self) -> None:
        response = self.post("/api/matches/nope/pause")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["error"], "Match not found")

    def test_validation_error_is_bad_request(self) -> None:
        match = self.start_match()
        response = self.post(f"/api/matches/{match['id']}/score", team="home", delta=5)
        self.assertEqual(response.status_code, 400)
        response = self.post(f"/api/matches/{match['id']}/score", team="home", delta=1.0)
        self.assertEqual(response.status_code, 400)
        response = self.post("/api/matches", team_id=TEAM_ID, opponent="Rovers",
                             player_ids=["p1"], quarter_count="four")
        self.assertEqual(response.status_code, 400)

    def test_store_failure_is_service_unavailable(self) -> None:
        match = self.start_match()
        with patch.object(self.services["store"], "_persist", side_effect=StoreError("disk full")):
            response = self.post(f"/api/matches/{match['id']}/pause")
        self.assertEqual(response.status_code, 503)
        self.assertFalse(response.get_json()["success"])

    def test_live_match_flow(self) -> None:
        match = self.start_match()
        match_id = match["id"]

        self.clock.advance(10 * MINUTE)
        response = self.post(f"/api/matches/{match_id}/goals", player_id="p3", assist_player_id="p4")
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["goal"]["display_minute"], 10)

        response = self.post(f"/api/matches/{match_id}/substitute", player_out_id="p2", player_in_id="p6")
        self.assertEqual(response.get_json()["match"]["home_score"], 1)

        response = self.client.get(f"/api/matches/{match_id}/playing-time", headers={"X-Match-Pin": LEAD_PIN})
        players = {p["player_id"]: p for p in response.get_json()["players"]}
        self.assertEqual(players["p2"]["minutes_played"], 10.0)
        self.assertFalse(players["p2"]["on_field"])

        response = self.client.get(f"/api/matches/{match_id}/suggestions", headers={"X-Match-Pin": LEAD_PIN})
        body = response.get_json()
        self.assertEqual(body["on_field_count"], 5)
        self.assertEqual(body["bench_count"], 1)

        response = self.client.get(f"/api/live/{match['public_code']}")
        clock = response.get_json()["clock"]
        self.assertEqual(clock["display"], "10'")
        self.assertEqual(clock["home_score"], 1)

        response = self.client.delete(f"/api/matches/{match_id}/goals/last", json={"pin": LEAD_PIN})
        self.assertEqual(response.get_json()["removed_goal"]["player_id"], "p3")

        events = self.client.get(f"/api/matches/{match_id}/events").get_json()["events"]
        self.assertEqual([e["type"] for e in events], ["quarter_start", "sub_out", "sub_in"])

    def test_lead_and_referee_roles(self) -> None:
        match = self.start_match()
        match_id = match["id"]

        response = self.post(f"/api/matches/{match_id}/lead")
        self.assertEqual(response.get_json()["coach_name"], "Sam Lead")
        self.post(f"/api/matches/{match_id}/referee", referee_id="ref-1")

        self.assertEqual(self.post(f"/api/matches/{match_id}/pause", pin=ASSISTANT_PIN).status_code, 403)
        self.assertEqual(self.post(f"/api/matches/{match_id}/pause", pin=REFEREE_PIN).status_code, 200)
        response = self.post(f"/api/matches/{match_id}/score", pin=REFEREE_PIN, team="away", delta=1)
        self.assertEqual(response.get_json()["match"]["away_score"], 1)

        self.assertEqual(self.client.delete(f"/api/matches/{match_id}/lead", json={"pin": LEAD_PIN}).status_code, 200)
        self.assertEqual(self.post(f"/api/matches/{match_id}/resume", pin=ASSISTANT_PIN).status_code, 200)

    def test_pregame_squad_endpoints(self) -> None:
        match = self.create_match()
        match_id = match["id"]
        response = self.post(f"/api/matches/{match_id}/players", player_id="p7")
        self.assertEqual(response.status_code, 201)
        response = self.post(f"/api/matches/{match_id}/players/p7/absent")
        self.assertTrue(response.get_json()["player"]["absent"])
        response = self.post(f"/api/matches/{match_id}/players/p1/keeper")
        self.assertTrue(response.get_json()["player"]["is_keeper"])


if __name__ == "__main__":
    unittest.main()
