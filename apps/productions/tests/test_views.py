from datetime import date, timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse

from apps.accounts.models import Specialization
from apps.notifications.models import Notification
from apps.productions.models import Assignment, Production
from apps.productions.tests.factories import (
    make_assignment,
    make_officer,
    make_operator,
    make_producer,
    make_production,
)


class DashboardViewTests(TestCase):
    def test_requires_login(self):
        response = self.client.get(reverse("productions:dashboard"))
        self.assertEqual(response.status_code, 302)
        self.assertIn("/accounts/login/", response["Location"])

    def test_producer_sees_own_requests_in_buckets(self):
        producer = make_producer()
        make_production(requested_by=producer, name="My Show")
        make_production(name="Someone Else's Show")
        self.client.force_login(producer)

        response = self.client.get(reverse("productions:dashboard"))

        self.assertContains(response, "My Show")
        self.assertNotContains(response, "Someone Else")
        self.assertContains(response, "Upcoming")


class CreateProductionViewTests(TestCase):
    def setUp(self):
        self.producer = make_producer()
        self.client.force_login(self.producer)

    def test_creates_request(self):
        day = (date.today() + timedelta(days=14)).isoformat()
        response = self.client.post(reverse("productions:create"), {
            "name": "Derby Day", "date": day, "call_time": "10:00", "start_time": "11:00",
            "end_time": "15:00", "venue": "Racecourse", "req_camera": "3", "req_director": "1",
        })
        production = Production.objects.get(name="Derby Day")
        self.assertRedirects(response, reverse("productions:detail", args=[production.pk]))
        self.assertEqual(production.requirement_map(), {"camera": 3, "director": 1})

    def test_invalid_request_rerenders(self):
        response = self.client.post(reverse("productions:create"), {"name": "No details"})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Production.objects.exists())

    def test_operators_cannot_request(self):
        self.client.force_login(make_operator())
        response = self.client.get(reverse("productions:create"))
        self.assertEqual(response.status_code, 403)


class ProductionDetailViewTests(TestCase):
    def test_missing_production_redirects_to_dashboard(self):
        self.client.force_login(make_officer())
        response = self.client.get(reverse("productions:detail", args=[9999]), follow=True)
        self.assertRedirects(response, reverse("productions:dashboard"))
        self.assertContains(response, "Production not found.")

    def test_unrelated_operator_is_turned_away(self):
        production = make_production()
        self.client.force_login(make_operator())
        response = self.client.get(reverse("productions:detail", args=[production.pk]))
        self.assertRedirects(response, reverse("productions:dashboard"))

    def test_confirm_button_hidden_until_crew_assigned(self):
        production = make_production()
        self.client.force_login(make_officer())
        response = self.client.get(reverse("productions:detail", args=[production.pk]))
        self.assertNotContains(response, "Confirm Production")
        make_assignment(production, make_operator())
        response = self.client.get(reverse("productions:detail", args=[production.pk]))
        self.assertContains(response, "Confirm Production")


class TransitionViewTests(TestCase):
    def setUp(self):
        self.officer = make_officer()
        self.production = make_production()
        self.client.force_login(self.officer)
        self.url = reverse("productions:transition", args=[self.production.pk])

    def test_confirm_without_crew_shows_error(self):
        response = self.client.post(self.url, {"action": "confirm"}, follow=True)
        self.assertContains(response, "assign at least one operator")
        self.production.refresh_from_db()
        self.assertEqual(self.production.status, Production.Status.REQUESTED)

    def test_confirm_with_crew(self):
        make_assignment(self.production, make_operator())
        self.client.post(self.url, {"action": "confirm"})
        self.production.refresh_from_db()
        self.assertEqual(self.production.status, Production.Status.CONFIRMED)
        self.assertEqual(self.production.confirmed_by, self.officer)

    def test_backend_failure_is_reported(self):
        make_assignment(self.production, make_operator())
        with mock.patch("apps.productions.services.apply_transition", side_effect=DatabaseError("down")):
            response = self.client.post(self.url, {"action": "confirm"}, follow=True)
        self.assertContains(response, "Failed to confirm production.")


class AssignCrewViewTests(TestCase):
    def setUp(self):
        self.officer = make_officer()
        self.production = make_production(requirements={"camera": 2})
        self.op1 = make_operator(first_name="Ann")
        self.op2 = make_operator(first_name="Ben")
        self.client.force_login(self.officer)
        self.url = reverse("productions:assign_crew", args=[self.production.pk])

    def test_roster_lists_available_operators(self):
        response = self.client.get(self.url)
        self.assertContains(response, "Ann")
        self.assertContains(response, "Ben")

    def test_conflict_warning_shown(self):
        other = make_production(day=self.production.date, name="Clashing Show", start_hour=18)
        make_assignment(other, self.op2)
        response = self.client.get(self.url)
        self.assertContains(response, "Clashing Show")

    def test_save_creates_and_deletes(self):
        existing = make_assignment(self.production, self.op1)
        response = self.client.post(self.url, {
            "existing": [f"{existing.pk}:{self.op1.pk}:camera"],
            "crew": [f"{self.op2.pk}:camera"],
        })
        self.assertRedirects(response, reverse("productions:detail", args=[self.production.pk]))
        self.assertEqual(
            list(Assignment.objects.filter(production=self.production).values_list("user_id", flat=True)),
            [self.op2.pk],
        )
        self.assertTrue(
            Notification.objects.filter(recipient=self.op2, notification_type=Notification.Type.ASSIGNMENT).exists()
        )

    def test_conflict_does_not_block_save(self):
        other = make_production(day=self.production.date, name="Clashing Show", start_hour=18)
        make_assignment(other, self.op1)
        response = self.client.post(self.url, {"crew": [f"{self.op1.pk}:camera"]}, follow=True)
        self.assertContains(response, "Already assigned to")
        self.assertTrue(Assignment.objects.filter(production=self.production, user=self.op1).exists())

    def test_over_capacity_refused(self):
        op3 = make_operator()
        response = self.client.post(self.url, {
            "crew": [f"{self.op1.pk}:camera", f"{self.op2.pk}:camera", f"{op3.pk}:camera"],
        })
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Assignment.objects.exists())

    def test_refuses_users_who_cannot_fill_the_role(self):
        producer = make_producer()
        sound_op = make_operator(specialization=Specialization.SOUND)
        for value in (f"{producer.pk}:camera", f"{sound_op.pk}:camera", "999999:camera"):
            response = self.client.post(self.url, {"crew": [value]})
            self.assertEqual(response.status_code, 400)
            self.assertContains(response, "Operator not available", status_code=400)
        self.assertFalse(Assignment.objects.exists())

    def test_producers_cannot_assign(self):
        self.client.force_login(make_producer())
        self.assertEqual(self.client.get(self.url).status_code, 403)


class RespondAssignmentViewTests(TestCase):
    def test_operator_accepts(self):
        operator = make_operator()
        assignment = make_assignment(make_production(), operator)
        self.client.force_login(operator)
        self.client.post(reverse("productions:respond", args=[assignment.pk]), {"response": "accept"})
        assignment.refresh_from_db()
        self.assertEqual(assignment.status, Assignment.Status.ACCEPTED)


class MessageViewTests(TestCase):
    def test_producer_messages_booking_officers(self):
        producer = make_producer()
        officer = make_officer()
        production = make_production(requested_by=producer)
        self.client.force_login(producer)
        response = self.client.post(
            reverse("productions:message", args=[production.pk]),
            {"kind": "message", "text": "Please add a steadicam"},
        )
        self.assertRedirects(response, reverse("productions:detail", args=[production.pk]))
        self.assertTrue(Notification.objects.filter(recipient=officer, notification_type="message").exists())

    def test_outsider_cannot_open_message_form(self):
        production = make_production(name="Private Rehearsal")
        self.client.force_login(make_operator())
        response = self.client.get(reverse("productions:message", args=[production.pk]), follow=True)
        self.assertRedirects(response, reverse("productions:dashboard"))
        self.assertContains(response, "You are not part of this production.")
        self.assertNotContains(response, "Private Rehearsal")


class PrintScheduleViewTests(TestCase):
    def setUp(self):
        self.client.force_login(make_officer())
        self.url = reverse("productions:print_schedule")

    def test_form_rendered_without_range(self):
        self.assertEqual(self.client.get(self.url).status_code, 200)

    def test_exports_html(self):
        production = make_production(name="Gala Night")
        response = self.client.get(self.url, {
            "start_date": production.date.isoformat(), "end_date": production.date.isoformat(),
        })
        self.assertContains(response, "Gala Night")

    def test_invalid_range(self):
        response = self.client.get(self.url, {"start_date": "2030-02-02", "end_date": "2030-02-01"})
        self.assertEqual(response.status_code, 400)

