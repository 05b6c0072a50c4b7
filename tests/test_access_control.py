import unittest

from sideline.models import Match
from sideline.services import (
    AccessControl, AccessPolicy, AuthorizationError, CoachActor, RefereeActor, Unauthorized
)
from sideline.services.errors import GENERIC_AUTH_MESSAGE
from tests.factories import (
    ASSISTANT_PIN, INACTIVE_REFEREE_PIN, LEAD_PIN, OTHER_TEAM_PIN, REFEREE_PIN, TEAM_ID,
    build_roster
)


class AccessControlTests(unittest.TestCase):
    def setUp(self) -> None:
        self.access = AccessControl(build_roster())
        self.match = Match(id="m1", team_id=TEAM_ID, opponent="Rovers", referee_id="ref-1")

    def test_coach_must_belong_to_team(self) -> None:
        self.assertIsNotNone(self.access.resolve_coach(self.match, LEAD_PIN))
        self.assertIsNone(self.access.resolve_coach(self.match, OTHER_TEAM_PIN))
        self.assertIsNone(self.access.resolve_coach(self.match, ""))

    def test_referee_must_be_assigned_to_match(self) -> None:
        self.assertIsNotNone(self.access.resolve_referee(self.match, REFEREE_PIN))
        self.match.referee_id = None
        self.assertIsNone(self.access.resolve_referee(self.match, REFEREE_PIN))

    def test_every_coach_leads_while_unclaimed(self) -> None:
        self.assertTrue(self.access.is_match_lead(self.match, "coach-assistant"))
        self.match.lead_coach_id = "coach-lead"
        self.assertTrue(self.access.is_match_lead(self.match, "coach-lead"))
        self.assertFalse(self.access.is_match_lead(self.match, "coach-assistant"))

    def test_authenticate_returns_tagged_result(self) -> None:
        self.match.lead_coach_id = "coach-lead"
        self.assertEqual(self.access.authenticate(self.match, ASSISTANT_PIN).is_lead, False)
        self.assertIsInstance(self.access.authenticate(self.match, REFEREE_PIN), RefereeActor)
        self.assertIsInstance(self.access.authenticate(self.match, "0000"), Unauthorized)

    def test_clock_policy_accepts_referee_without_lead(self) -> None:
        self.match.lead_coach_id = "coach-lead"
        actor = self.access.authorize(self.match, REFEREE_PIN, AccessPolicy.LEAD_COACH_OR_REFEREE)
        self.assertIsInstance(actor, RefereeActor)
        actor = self.access.authorize(self.match, LEAD_PIN, AccessPolicy.LEAD_COACH_OR_REFEREE)
        self.assertIsInstance(actor, CoachActor)

    def test_non_lead_coach_refused_for_clock_and_score(self) -> None:
        self.match.lead_coach_id = "coach-lead"
        for policy in (AccessPolicy.LEAD_COACH_OR_REFEREE, AccessPolicy.COACH_OR_REFEREE):
            with self.assertRaises(AuthorizationError):
                self.access.authorize(self.match, ASSISTANT_PIN, policy)

    def test_team_coach_policy_refuses_referee(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.access.authorize(self.match, REFEREE_PIN, AccessPolicy.TEAM_COACH)
        actor = self.access.authorize(self.match, ASSISTANT_PIN, AccessPolicy.TEAM_COACH)
        self.assertIsInstance(actor, CoachActor)

    def test_inactive_or_unassigned_referee_refused(self) -> None:
        with self.assertRaises(AuthorizationError):
            self.access.authorize(self.match, INACTIVE_REFEREE_PIN, AccessPolicy.COACH_OR_REFEREE)

    def test_refusals_share_one_generic_message(self) -> None:
        self.match.lead_coach_id = "coach-lead"
        cases = (
            ("0000", AccessPolicy.TEAM_COACH),
            (OTHER_TEAM_PIN, AccessPolicy.COACH_OR_REFEREE),
            (ASSISTANT_PIN, AccessPolicy.LEAD_COACH_OR_REFEREE),
            (REFEREE_PIN, AccessPolicy.TEAM_COACH),
        )
        for pin, policy in cases:
            with self.assertRaises(AuthorizationError) as ctx:
                self.access.authorize(self.match, pin, policy)
            self.assertEqual(str(ctx.exception), GENERIC_AUTH_MESSAGE)

    def test_require_lead_refuses_referee_and_non_lead(self) -> None:
        self.match.lead_coach_id = "coach-lead"
        lead = self.access.authenticate(self.match, LEAD_PIN)
        self.access.require_lead(self.match, lead)
        for pin in (ASSISTANT_PIN, REFEREE_PIN):
            with self.assertRaises(AuthorizationError):
                self.access.require_lead(self.match, self.access.authenticate(self.match, pin))


if __name__ == "__main__":
    unittest.main()
