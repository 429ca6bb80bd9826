from django.test import SimpleTestCase, TestCase

from apps.accounts.models import Specialization
from apps.productions.forms import CrewSelectionForm, MessageForm, ProductionRequestForm, ScheduleRangeForm
from apps.productions.reconciler import PendingCreate, PendingDelete, Persisted
from apps.productions.tests.factories import make_operator, make_producer


def request_data(**overrides):
    data = {
        "name": "Morning Show",
        "date": "2030-01-15",
        "call_time": "05:00",
        "start_time": "06:00",
        "end_time": "09:00",
        "venue": "Studio A",
        "req_camera": "2",
        "req_sound": "0",
    }
    data.update(overrides)
    return data


class ProductionRequestFormTests(SimpleTestCase):
    def test_valid_request_drops_zero_counts(self):
        form = ProductionRequestForm(request_data())
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.requirements(), {"camera": 2})
        data = form.production_data()
        self.assertEqual(data["start_time"].hour, 6)
        self.assertEqual(data["start_time"].date().isoformat(), "2030-01-15")

    def test_end_must_follow_start(self):
        form = ProductionRequestForm(request_data(end_time="06:00"))
        self.assertFalse(form.is_valid())
        self.assertIn("end_time", form.errors)

    def test_start_not_before_call(self):
        form = ProductionRequestForm(request_data(call_time="07:00"))
        self.assertFalse(form.is_valid())
        self.assertIn("start_time", form.errors)

    def test_at_least_one_requirement(self):
        form = ProductionRequestForm(request_data(req_camera="0"))
        self.assertFalse(form.is_valid())
        self.assertIn("at least one crew requirement", str(form.non_field_errors()))

    def test_name_and_venue_required(self):
        form = ProductionRequestForm(request_data(name="", venue=""))
        self.assertFalse(form.is_valid())
        self.assertIn("name", form.errors)
        self.assertIn("venue", form.errors)


class CrewSelectionFormTests(TestCase):
    def test_builds_tagged_desired_set(self):
        new = make_operator()
        form = CrewSelectionForm(
            {"existing": ["1:7:camera", "2:8:camera"], "crew": ["7:camera", f"{new.pk}:camera"]},
            requirements={"camera": 2},
        )
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["desired"], [
            Persisted(1, 7, "camera"),
            PendingDelete(2, 8, "camera"),
            PendingCreate(new.pk, "camera"),
        ])

    def test_refuses_more_than_required(self):
        form = CrewSelectionForm(
            {"existing": [], "crew": ["7:camera", "8:camera", "9:camera"]},
            requirements={"camera": 2},
        )
        self.assertFalse(form.is_valid())
        self.assertIn("Maximum 2 Camera Operators allowed", str(form.non_field_errors()))

    def test_rejects_role_not_required(self):
        form = CrewSelectionForm({"crew": ["7:sound"]}, requirements={"camera": 1})
        self.assertFalse(form.is_valid())

    def test_rejects_malformed_values(self):
        form = CrewSelectionForm({"crew": ["seven:camera"]}, requirements={"camera": 1})
        self.assertFalse(form.is_valid())

    def test_empty_selection_is_valid(self):
        form = CrewSelectionForm({"existing": ["1:7:camera"]}, requirements={"camera": 1})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data["desired"], [PendingDelete(1, 7, "camera")])

    def test_rejects_non_operator(self):
        producer = make_producer()
        form = CrewSelectionForm({"crew": [f"{producer.pk}:camera"]}, requirements={"camera": 1})
        self.assertFalse(form.is_valid())
        self.assertIn("Operator not available", str(form.non_field_errors()))

    def test_rejects_operator_with_other_specialization(self):
        sound = make_operator(specialization=Specialization.SOUND)
        form = CrewSelectionForm({"crew": [f"{sound.pk}:camera"]}, requirements={"camera": 1})
        self.assertFalse(form.is_valid())

    def test_rejects_unknown_user(self):
        form = CrewSelectionForm({"crew": ["999999:camera"]}, requirements={"camera": 1})
        self.assertFalse(form.is_valid())

    def test_stored_assignments_are_not_rechecked(self):
        form = CrewSelectionForm({"existing": ["1:7:camera"], "crew": ["7:camera"]}, requirements={"camera": 1})
        self.assertTrue(form.is_valid(), form.errors)


class MessageFormTests(SimpleTestCase):
    def test_message_needs_text(self):
        self.assertFalse(MessageForm({"kind": "message", "text": "  "}).is_valid())

    def test_overtime_falls_back_to_reason_label(self):
        form = MessageForm({"kind": "overtime", "overtime_reason": "talent-delays", "text": ""})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.overtime_text(), "Talent Delays")


class ScheduleRangeFormTests(SimpleTestCase):
    def test_inverted_range(self):
        form = ScheduleRangeForm({"start_date": "2030-02-02", "end_date": "2030-02-01"})
        self.assertFalse(form.is_valid())
