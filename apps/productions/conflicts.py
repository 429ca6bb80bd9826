"""
Crew conflict checker for CrewBook.

Detects when an operator being staffed on a production is already booked on
another production the same day. Conflicts are warnings only: the booking
officer may always assign anyway.

Usage:
    from apps.productions.conflicts import check_conflict

    conflict = check_conflict(operator.pk, production.pk, production.date)
    if conflict:
        msg.warning(request, conflict.reason)

Design notes:
  - Every one of the operator's assignments is considered, whatever its role
    or status, except those on the production being staffed.
  - Each referenced production is fetched individually and compared; the first
    match in assignment id order wins.
  - The comparison is by calendar date unless CREWBOOK["CONFLICT_MODE"] is
    "overlap", in which case only intersecting [start, end) windows conflict.
  - Database failures are logged and reported as "no conflict".
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from django.conf import settings
from django.db import DatabaseError, transaction

from apps.productions.models import Assignment, Production

logger = logging.getLogger(__name__)

DATE_MODE = "date"
OVERLAP_MODE = "overlap"


@dataclass
class Conflict:
    """Another production already claiming the operator on the same day."""

    operator_id: int
    production_id: int
    production_name: str
    date: date
    role: str
    reason: str


def _same_day(other: Production, production_date: date, **_) -> bool:
    return other.date == production_date


def _windows_overlap(other: Production, production_date: date,
                     start_time: Optional[datetime] = None,
                     end_time: Optional[datetime] = None) -> bool:
    if start_time is None or end_time is None:
        return _same_day(other, production_date)
    return other.start_time < end_time and other.end_time > start_time


COMPARATORS = {
    DATE_MODE: _same_day,
    OVERLAP_MODE: _windows_overlap,
}


def check_conflict(
    operator_id: int,
    production_id: int,
    production_date: date,
    start_time: Optional[datetime] = None,
    end_time: Optional[datetime] = None,
    mode: Optional[str] = None,
) -> Optional[Conflict]:
    """
    Return the first production that already claims the operator on that day.

    Args:
        operator_id: The operator being considered.
        production_id: The production being staffed (its own assignments are ignored).
        production_date: Calendar day of the production being staffed.
        start_time: Start of the production being staffed (overlap mode only).
        end_time: End of the production being staffed (overlap mode only).
        mode: "date" or "overlap"; defaults to CREWBOOK["CONFLICT_MODE"].

    Returns:
        A Conflict describing the clashing production, or None.
    """
    mode = mode or settings.CREWBOOK["CONFLICT_MODE"]
    clashes = COMPARATORS[mode]

    try:
        # Savepoint so a failed lookup cannot poison the request transaction
        with transaction.atomic():
            existing = (
                Assignment.objects.filter(user_id=operator_id)
                .exclude(production_id=production_id)
                .order_by("pk")
            )
            for assignment in existing:
                other = Production.objects.filter(pk=assignment.production_id).first()
                if other is None:
                    continue
                if clashes(other, production_date, start_time=start_time, end_time=end_time):
                    return Conflict(
                        operator_id=operator_id,
                        production_id=other.pk,
                        production_name=other.name,
                        date=other.date,
                        role=assignment.role,
                        reason=(
                            f"Already assigned to \"{other.name}\" on {other.date:%A, %B %d, %Y} "
                            f"({other.start_time:%H:%M} to {other.end_time:%H:%M} UTC)."
                        ),
                    )
    except DatabaseError:
        logger.exception(
            "Conflict check failed for operator=%s production=%s; treating as no conflict",
            operator_id,
            production_id,
        )
        return None

    return None


def check_conflict_for(operator, production: Production, mode: Optional[str] = None) -> Optional[Conflict]:
    """Convenience wrapper taking model instances."""
    return check_conflict(
        operator.pk,
        production.pk,
        production.date,
        start_time=production.start_time,
        end_time=production.end_time,
        mode=mode,
    )
