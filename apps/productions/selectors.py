"""
Read-side queries for dashboards, schedules and the schedule export.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date

from django.conf import settings
from django.db.models import Prefetch, QuerySet
from django.utils import timezone

from apps.productions.models import Assignment, Production

TODAY = "today"
UPCOMING = "upcoming"
PAST = "past"


def productions_for_user(user) -> QuerySet:
    """
    Productions visible on the user's dashboard.

    Producers see their own requests, operators see productions they are
    staffed on, booking officers see everything.
    """
    qs = Production.objects.select_related("requested_by", "confirmed_by")
    if user.is_producer:
        return qs.requested_by(user)
    if user.is_operator:
        return qs.staffed_with(user)
    return qs.all()


def group_by_date_bucket(productions, today: date = None) -> "OrderedDict[str, list]":
    """
    Split productions into today / upcoming / past lists.

    Today and upcoming are ascending by date; past is most recent first.
    Each bucket is capped at CREWBOOK["DASHBOARD_LIMIT"].
    """
    today = today or timezone.localdate()
    limit = settings.CREWBOOK["DASHBOARD_LIMIT"]
    buckets = OrderedDict([(TODAY, []), (UPCOMING, []), (PAST, [])])

    for production in sorted(productions, key=lambda p: (p.date, p.start_time)):
        if production.date == today:
            buckets[TODAY].append(production)
        elif production.date > today:
            buckets[UPCOMING].append(production)
        else:
            buckets[PAST].append(production)

    buckets[PAST].reverse()
    return OrderedDict((name, items[:limit]) for name, items in buckets.items())


def operator_schedule(user, include_past: bool = False) -> QuerySet:
    """The operator's accepted assignments in production date order."""
    qs = (
        Assignment.objects.filter(user=user, status=Assignment.Status.ACCEPTED)
        .exclude(production__status=Production.Status.CANCELLED)
        .select_related("production")
        .order_by("production__date", "production__start_time")
    )
    if not include_past:
        qs = qs.filter(production__date__gte=timezone.localdate())
    return qs


def pending_assignments(user) -> QuerySet:
    """Assignments still waiting for the operator's answer."""
    return (
        Assignment.objects.filter(user=user, status=Assignment.Status.PENDING)
        .exclude(production__status=Production.Status.CANCELLED)
        .select_related("production")
        .order_by("production__date", "production__start_time")
    )


@dataclass
class ScheduleEntry:
    production: Production
    crew: list[Assignment] = field(default_factory=list)


def schedule_between(start_date: date, end_date: date) -> list[ScheduleEntry]:
    """
    Productions dated in [start_date, end_date] with their accepted crew.

    Raises:
        ValueError: If the range is inverted.
    """
    if start_date > end_date:
        raise ValueError("Start date must be on or before end date.")

    accepted = Prefetch(
        "assignments",
        queryset=Assignment.objects.filter(status=Assignment.Status.ACCEPTED)
        .select_related("user")
        .order_by("role", "user__last_name"),
        to_attr="accepted_crew",
    )
    productions = (
        Production.objects.between(start_date, end_date)
        .select_related("requested_by")
        .prefetch_related(accepted)
    )
    return [ScheduleEntry(production=p, crew=p.accepted_crew) for p in productions]
