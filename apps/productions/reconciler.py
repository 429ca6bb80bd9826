"""
Crew assignment reconciler for CrewBook.

The crew screen lets a booking officer toggle operators on and off a
production; nothing is written until "save". At save time the desired set
is diffed against the assignments currently stored for the production and
only the difference is written.

Desired entries are tagged:
  Persisted(assignment_id, user_id, role)      already stored, keep it
  PendingCreate(user_id, role)                 added in this session
  PendingDelete(assignment_id, user_id, role)  stored, marked for removal

Diff rules (keyed by (user_id, role)):
  1. Persisted assignments are looked up by key.
  2. A desired entry whose key is stored is kept. A Persisted entry whose key
     is no longer stored is a stale no-op. Anything else is created with
     status "pending" and the operator is notified.
  3. Stored assignments whose key is not desired are deleted. Duplicate rows
     for one key beyond the first are deleted too.

`plan_reconciliation` is pure; `save_assignments` applies a plan in a single
transaction with the production row locked, so two booking officers saving
the same production are serialized.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from django.db import transaction

from apps.notifications.models import Notification
from apps.notifications.services import notify
from apps.productions.display import role_label
from apps.productions.models import Assignment, Production

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Desired-set entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Persisted:
    assignment_id: int
    user_id: int
    role: str

    @property
    def key(self) -> tuple[int, str]:
        return (self.user_id, self.role)


@dataclass(frozen=True)
class PendingCreate:
    user_id: int
    role: str

    @property
    def key(self) -> tuple[int, str]:
        return (self.user_id, self.role)


@dataclass(frozen=True)
class PendingDelete:
    assignment_id: int
    user_id: int
    role: str

    @property
    def key(self) -> tuple[int, str]:
        return (self.user_id, self.role)


DesiredEntry = Union[Persisted, PendingCreate, PendingDelete]


def entries_from_assignments(assignments: Iterable[Assignment]) -> list[Persisted]:
    """Seed a desired set from stored assignments (the state before any toggles)."""
    return [Persisted(a.pk, a.user_id, a.role) for a in assignments]


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


@dataclass
class ReconciliationPlan:
    """Writes needed to make stored assignments match the desired set."""

    creates: list[PendingCreate] = field(default_factory=list)
    keeps: list[int] = field(default_factory=list)
    deletes: list[int] = field(default_factory=list)
    stale: list[Persisted] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.creates and not self.deletes


def plan_reconciliation(desired: Iterable[DesiredEntry], persisted: Iterable) -> ReconciliationPlan:
    """
    Diff a desired assignment set against the stored one.

    Args:
        desired: Tagged entries built from the crew screen.
        persisted: Stored assignments (anything with pk, user_id and role).

    Returns:
        ReconciliationPlan listing the creates, keeps and deletes.
    """
    plan = ReconciliationPlan()

    stored_by_key = {}
    for assignment in persisted:
        key = (assignment.user_id, assignment.role)
        if key in stored_by_key:
            plan.deletes.append(assignment.pk)
        else:
            stored_by_key[key] = assignment

    wanted_keys = set()
    for entry in desired:
        if isinstance(entry, PendingDelete):
            continue
        if entry.key in wanted_keys:
            continue
        wanted_keys.add(entry.key)

        stored = stored_by_key.get(entry.key)
        if stored is not None:
            plan.keeps.append(stored.pk)
        elif isinstance(entry, Persisted):
            plan.stale.append(entry)
        else:
            plan.creates.append(entry)

    plan.deletes.extend(a.pk for key, a in stored_by_key.items() if key not in wanted_keys)
    return plan


# ---------------------------------------------------------------------------
# Applying
# ---------------------------------------------------------------------------


@dataclass
class ReconciliationResult:
    plan: ReconciliationPlan
    created: list[Assignment]
    deleted_count: int
    notifications: list[Notification]


@transaction.atomic
def save_assignments(production: Production, desired: Iterable[DesiredEntry], actor) -> ReconciliationResult:
    """
    Make the production's stored assignments match the desired set.

    The production row is locked and its assignments re-read inside the
    transaction, so the diff always runs against fresh data. Either every
    write lands or none does.

    Args:
        production: The production being staffed.
        desired: Tagged desired entries.
        actor: The booking officer saving the crew.

    Returns:
        ReconciliationResult with the plan and the rows written.
    """
    locked = Production.objects.select_for_update().get(pk=production.pk)
    persisted = list(Assignment.objects.filter(production=locked).order_by("pk"))
    plan = plan_reconciliation(list(desired), persisted)

    for entry in plan.stale:
        logger.info(
            "Ignoring stale assignment %d (user=%d role=%s) on production %d",
            entry.assignment_id, entry.user_id, entry.role, locked.pk,
        )

    deleted_count = 0
    if plan.deletes:
        deleted_count, _ = Assignment.objects.filter(production=locked, pk__in=plan.deletes).delete()

    created = []
    notifications = []
    for entry in plan.creates:
        assignment = Assignment.objects.create(
            production=locked,
            user_id=entry.user_id,
            role=entry.role,
            status=Assignment.Status.PENDING,
            assigned_by=actor,
        )
        created.append(assignment)
        notifications.append(
            notify(
                assignment.user,
                Notification.Type.ASSIGNMENT,
                title="New Crew Assignment",
                body=(
                    f"You have been assigned as {role_label(entry.role)} for "
                    f"\"{locked.name}\" on {locked.date:%A, %B %d, %Y}"
                ),
                production=locked,
                data={"assignment_id": assignment.pk},
            )
        )

    logger.info(
        "User %d saved crew for production %d: %d created, %d kept, %d deleted",
        actor.pk, locked.pk, len(created), len(plan.keeps), deleted_count,
    )
    return ReconciliationResult(
        plan=plan,
        created=created,
        deleted_count=deleted_count,
        notifications=notifications,
    )
