from datetime import timedelta

from django.test import SimpleTestCase, TestCase

from apps.accounts.models import Specialization
from apps.productions.matching import build_roster, over_capacity_roles, remaining_capacity
from apps.productions.reconciler import PendingCreate, PendingDelete, Persisted
from apps.productions.tests.factories import make_assignment, make_operator, make_production

CAMERA = Specialization.CAMERA.value
SOUND = Specialization.SOUND.value


class BuildRosterTests(TestCase):
    def setUp(self):
        self.production = make_production(requirements={CAMERA: 2, SOUND: 1})
        self.cam1 = make_operator(last_name="Adams")
        self.cam2 = make_operator(last_name="Baker")
        self.sound = make_operator(specialization=Specialization.SOUND, last_name="Clark")

    def test_available_operators_match_specialization(self):
        roster = build_roster(self.production, with_conflicts=False)
        self.assertEqual(list(roster), [CAMERA, SOUND])
        self.assertEqual(roster[CAMERA].available, [self.cam1, self.cam2])
        self.assertEqual(roster[SOUND].available, [self.sound])
        self.assertEqual(roster[CAMERA].required, 2)

    def test_assigned_operators_are_not_available(self):
        make_assignment(self.production, self.cam1)
        roster = build_roster(self.production, with_conflicts=False)
        self.assertEqual(roster[CAMERA].available, [self.cam2])
        self.assertEqual([a.user for a in roster[CAMERA].assigned], [self.cam1])
        self.assertFalse(roster[CAMERA].is_filled)

    def test_inactive_operators_are_excluded(self):
        self.cam2.is_active = False
        self.cam2.save()
        roster = build_roster(self.production, with_conflicts=False)
        self.assertEqual(roster[CAMERA].available, [self.cam1])

    def test_conflicts_are_flagged_per_operator(self):
        other = make_production(day=self.production.date, start_hour=18)
        make_assignment(other, self.cam2)
        roster = build_roster(self.production)
        self.assertIn(self.cam2.pk, roster[CAMERA].conflicts)
        self.assertNotIn(self.cam1.pk, roster[CAMERA].conflicts)

    def test_next_day_booking_is_not_flagged(self):
        other = make_production(day=self.production.date + timedelta(days=1))
        make_assignment(other, self.cam2)
        roster = build_roster(self.production)
        self.assertEqual(roster[CAMERA].conflicts, {})


class CapacityTests(SimpleTestCase):
    def test_pending_deletions_do_not_count(self):
        desired = [Persisted(1, 7, CAMERA), PendingDelete(2, 8, CAMERA)]
        self.assertEqual(remaining_capacity(desired, CAMERA, 2), 1)

    def test_capacity_never_negative(self):
        desired = [PendingCreate(7, CAMERA), PendingCreate(8, CAMERA), PendingCreate(9, CAMERA)]
        self.assertEqual(remaining_capacity(desired, CAMERA, 2), 0)

    def test_over_capacity_roles(self):
        desired = [PendingCreate(7, CAMERA), PendingCreate(8, CAMERA), PendingCreate(9, SOUND)]
        self.assertEqual(over_capacity_roles(desired, {CAMERA: 1, SOUND: 1}), {CAMERA: 1})

    def test_within_capacity(self):
        desired = [PendingCreate(7, CAMERA), PendingDelete(1, 8, CAMERA)]
        self.assertEqual(over_capacity_roles(desired, {CAMERA: 1}), {})
