from datetime import date, timedelta

from django.test import TestCase

from apps.productions.exports import build_schedule_html, schedule_title
from apps.productions.models import Assignment, Production
from apps.productions.selectors import (
    PAST,
    TODAY,
    UPCOMING,
    group_by_date_bucket,
    operator_schedule,
    productions_for_user,
    schedule_between,
)
from apps.productions.tests.factories import (
    make_assignment,
    make_officer,
    make_operator,
    make_producer,
    make_production,
)


class ProductionsForUserTests(TestCase):
    def setUp(self):
        self.producer = make_producer()
        self.operator = make_operator()
        self.mine = make_production(requested_by=self.producer)
        self.theirs = make_production()
        make_assignment(self.theirs, self.operator)

    def test_producer_sees_own_requests(self):
        self.assertEqual(list(productions_for_user(self.producer)), [self.mine])

    def test_operator_sees_staffed_productions(self):
        self.assertEqual(list(productions_for_user(self.operator)), [self.theirs])

    def test_booking_officer_sees_everything(self):
        self.assertEqual(productions_for_user(make_officer()).count(), 2)


class DateBucketTests(TestCase):
    def test_grouping(self):
        today = date(2030, 5, 10)
        past = make_production(day=today - timedelta(days=2))
        older = make_production(day=today - timedelta(days=5))
        now = make_production(day=today)
        later = make_production(day=today + timedelta(days=1))

        buckets = group_by_date_bucket(Production.objects.all(), today=today)

        self.assertEqual(buckets[TODAY], [now])
        self.assertEqual(buckets[UPCOMING], [later])
        self.assertEqual(buckets[PAST], [past, older])


class OperatorScheduleTests(TestCase):
    def test_only_accepted_assignments_in_date_order(self):
        operator = make_operator()
        later = make_production(day=date.today() + timedelta(days=9))
        sooner = make_production(day=date.today() + timedelta(days=2))
        pending = make_production(day=date.today() + timedelta(days=1))
        make_assignment(later, operator, status=Assignment.Status.ACCEPTED)
        make_assignment(sooner, operator, status=Assignment.Status.ACCEPTED)
        make_assignment(pending, operator)

        schedule = [a.production for a in operator_schedule(operator)]

        self.assertEqual(schedule, [sooner, later])


class ScheduleExportTests(TestCase):
    def setUp(self):
        self.day = date.today() + timedelta(days=3)
        self.late = make_production(day=self.day, name="Late Show", start_hour=20)
        self.early = make_production(day=self.day, name="Breakfast TV", start_hour=6)
        self.outside = make_production(day=self.day + timedelta(days=5), name="Outside Range")
        self.accepted = make_operator(first_name="Ada", last_name="Accepted")
        self.waiting = make_operator(first_name="Pete", last_name="Pending")
        make_assignment(self.early, self.accepted, status=Assignment.Status.ACCEPTED)
        make_assignment(self.early, self.waiting)

    def test_range_ordered_by_date_then_start(self):
        entries = schedule_between(self.day, self.day)
        self.assertEqual([e.production for e in entries], [self.early, self.late])

    def test_only_accepted_crew_listed(self):
        entry = schedule_between(self.day, self.day)[0]
        self.assertEqual([a.user for a in entry.crew], [self.accepted])

    def test_inverted_range_rejected(self):
        with self.assertRaises(ValueError):
            schedule_between(self.day, self.day - timedelta(days=1))

    def test_export_of_inverted_range_rejected(self):
        with self.assertRaises(ValueError):
            build_schedule_html(self.day, self.day - timedelta(days=1))

    def test_html_contains_productions_and_accepted_crew(self):
        html = build_schedule_html(self.day, self.day)
        self.assertIn("Breakfast TV", html)
        self.assertIn("Late Show", html)
        self.assertNotIn("Outside Range", html)
        self.assertIn("Ada Accepted", html)
        self.assertNotIn("Pete Pending", html)
        self.assertLess(html.index("Breakfast TV"), html.index("Late Show"))

    def test_title(self):
        self.assertTrue(schedule_title(self.day, self.day).startswith("Schedule for"))
