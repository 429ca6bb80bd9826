"""
Lightweight test factories (no factory_boy dependency).

Shared by the productions, accounts and notifications test suites.
"""

import itertools
from datetime import date, datetime, time, timedelta, timezone as dt_timezone

from apps.accounts.models import Specialization, User
from apps.productions.models import Assignment, Production, Requirement

_seq = itertools.count(1)


def make_user(role=User.Role.OPERATOR, **kwargs) -> User:
    """Create a test user with sensible defaults."""
    n = next(_seq)
    if role == User.Role.OPERATOR:
        kwargs.setdefault("specialization", Specialization.CAMERA)
    return User.objects.create_user(
        email=kwargs.pop("email", f"user{n}@test.com"),
        password=kwargs.pop("password", "testpass"),
        first_name=kwargs.pop("first_name", "Test"),
        last_name=kwargs.pop("last_name", f"User{n:04d}"),
        role=role,
        **kwargs,
    )


def make_producer(**kwargs) -> User:
    return make_user(role=User.Role.PRODUCER, **kwargs)


def make_officer(**kwargs) -> User:
    return make_user(role=User.Role.BOOKING_OFFICER, **kwargs)


def make_operator(specialization=Specialization.CAMERA, **kwargs) -> User:
    return make_user(role=User.Role.OPERATOR, specialization=specialization, **kwargs)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    """UTC datetime on a given day."""
    return datetime.combine(day, time(hour, minute), tzinfo=dt_timezone.utc)


def make_production(requested_by=None, day=None, start_hour=10, hours=4, requirements=None, **kwargs) -> Production:
    """
    Create a production with its requirements.

    Args:
        requested_by: Producer; one is created if omitted.
        day: Production date; defaults to a week from today.
        start_hour: UTC start hour (call time is one hour earlier).
        hours: Scheduled length.
        requirements: role → count; defaults to {"camera": 2}.
    """
    day = day or date.today() + timedelta(days=7)
    production = Production.objects.create(
        name=kwargs.pop("name", f"Production {next(_seq)}"),
        date=day,
        call_time=at(day, start_hour - 1),
        start_time=at(day, start_hour),
        end_time=at(day, start_hour) + timedelta(hours=hours),
        venue=kwargs.pop("venue", "Studio A"),
        requested_by=requested_by or make_producer(),
        **kwargs,
    )
    for role, count in (requirements or {Specialization.CAMERA.value: 2}).items():
        Requirement.objects.create(production=production, role=role, count=count)
    return production


def make_assignment(production, user, role=Specialization.CAMERA, status=Assignment.Status.PENDING,
                    assigned_by=None) -> Assignment:
    return Assignment.objects.create(
        production=production,
        user=user,
        role=role,
        status=status,
        assigned_by=assigned_by,
    )
