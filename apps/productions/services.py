"""
Production workflow services for CrewBook.

Every state-changing action on a production goes through this module. Views
parse input and check the session; services check the workflow rules, write
the change in one transaction and record the notifications it causes.

Production transitions (all manual, booking officer unless noted):
  confirm   REQUESTED   → CONFIRMED    needs at least one assignment
  start     CONFIRMED   → IN_PROGRESS
  complete  IN_PROGRESS → COMPLETED
  cancel    REQUESTED / CONFIRMED → CANCELLED  (booking officer or requesting producer)

Assignment responses (operator, own assignment only):
  PENDING → ACCEPTED | DECLINED
"""

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.notifications.models import Notification
from apps.notifications.services import notify, notify_many
from apps.productions.display import role_label
from apps.productions.models import Assignment, Message, Production, Requirement

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """Raised when an action is not allowed in the production's current state."""


@dataclass(frozen=True)
class Transition:
    action: str
    label: str
    sources: tuple[str, ...]
    target: str


CONFIRM = "confirm"
START = "start"
COMPLETE = "complete"
CANCEL = "cancel"

TRANSITIONS = {
    CONFIRM: Transition(CONFIRM, "Confirm Production", (Production.Status.REQUESTED.value,),
                        Production.Status.CONFIRMED.value),
    START: Transition(START, "Start Production", (Production.Status.CONFIRMED.value,),
                      Production.Status.IN_PROGRESS.value),
    COMPLETE: Transition(COMPLETE, "Complete Production", (Production.Status.IN_PROGRESS.value,),
                         Production.Status.COMPLETED.value),
    CANCEL: Transition(CANCEL, "Cancel Production",
                       (Production.Status.REQUESTED.value, Production.Status.CONFIRMED.value),
                       Production.Status.CANCELLED.value),
}


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


def _may_perform(action: str, production: Production, user) -> bool:
    if user.is_booking_officer:
        return True
    return action == CANCEL and user.is_producer and production.requested_by_id == user.pk


def available_actions(production: Production, user) -> list[Transition]:
    """
    Transitions the user may trigger on the production right now.

    Confirm is only offered once at least one operator is assigned.
    """
    actions = []
    for transition in TRANSITIONS.values():
        if production.status not in transition.sources:
            continue
        if not _may_perform(transition.action, production, user):
            continue
        if transition.action == CONFIRM and not production.assignments.exists():
            continue
        actions.append(transition)
    return actions


def is_participant(production: Production, user) -> bool:
    """The requesting producer, any booking officer, or an operator assigned to it."""
    if user.is_booking_officer:
        return True
    if user.is_producer:
        return production.requested_by_id == user.pk
    return production.assignments.filter(user=user).exists()


# ---------------------------------------------------------------------------
# Production requests
# ---------------------------------------------------------------------------


@transaction.atomic
def create_production_request(producer, data: dict, requirements: dict[str, int]) -> Production:
    """
    Create a production in REQUESTED state together with its requirements.

    Args:
        producer: The requesting producer.
        data: Cleaned production fields (name, date, call/start/end times, venue,
              location_details, notes).
        requirements: role → count; zero counts are skipped.

    Returns:
        The new Production.
    """
    if not producer.is_producer:
        raise WorkflowError("Only producers can request productions.")
    requirements = {role: count for role, count in requirements.items() if count > 0}
    if not requirements:
        raise WorkflowError("Please specify at least one crew requirement.")

    production = Production.objects.create(requested_by=producer, status=Production.Status.REQUESTED, **data)
    Requirement.objects.bulk_create(
        Requirement(production=production, role=role, count=count)
        for role, count in requirements.items()
    )
    logger.info("Producer %d requested production %d (%s)", producer.pk, production.pk, production.name)
    return production


@transaction.atomic
def delete_request(production: Production, actor) -> None:
    """Delete a production request; only its producer may, and only while REQUESTED."""
    locked = Production.objects.select_for_update().get(pk=production.pk)
    if not (actor.is_producer and locked.requested_by_id == actor.pk):
        raise WorkflowError("Only the requesting producer can delete this request.")
    if locked.status != Production.Status.REQUESTED:
        raise WorkflowError("Only pending requests can be deleted.")
    pk = locked.pk
    locked.delete()
    logger.info("Producer %d deleted production request %d", actor.pk, pk)


def save_notes(production: Production, actor, notes: str) -> Production:
    if not actor.is_booking_officer:
        raise WorkflowError("Only booking officers can edit production notes.")
    production.notes = notes.strip()
    production.save(update_fields=["notes", "updated_at"])
    logger.info("User %d saved notes on production %d", actor.pk, production.pk)
    return production


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


@transaction.atomic
def apply_transition(production: Production, action: str, actor, notes: Optional[str] = None) -> Production:
    """
    Move a production through the status machine.

    Args:
        production: The production to transition.
        action: One of "confirm", "start", "complete", "cancel".
        actor: The user performing the action.
        notes: Optional notes saved with a confirmation.

    Returns:
        The updated Production.

    Raises:
        WorkflowError: Unknown action, wrong source state, confirm with no
            crew assigned, or actor not allowed.
    """
    transition = TRANSITIONS.get(action)
    if transition is None:
        raise WorkflowError(f"Unknown action: {action}")

    locked = Production.objects.select_for_update().get(pk=production.pk)
    if not _may_perform(action, locked, actor):
        raise WorkflowError("You don't have permission to perform this action.")
    if locked.status not in transition.sources:
        raise WorkflowError(
            f"Cannot {action} a production that is {locked.get_status_display().lower()}."
        )

    assignments = list(locked.assignments.select_related("user").order_by("pk"))
    if action == CONFIRM and not assignments:
        raise WorkflowError("Please assign at least one operator before confirming.")

    now = timezone.now()
    locked.status = transition.target
    update_fields = ["status", "updated_at"]
    if action == CONFIRM:
        locked.confirmed_by = actor
        locked.confirmed_at = now
        update_fields += ["confirmed_by", "confirmed_at"]
        if notes is not None:
            locked.notes = notes.strip()
            update_fields.append("notes")
    elif action == START:
        locked.started_at = now
        update_fields.append("started_at")
    elif action == COMPLETE:
        locked.completed_at = now
        update_fields.append("completed_at")
    elif action == CANCEL:
        locked.cancelled_by = actor
        locked.cancelled_at = now
        update_fields += ["cancelled_by", "cancelled_at"]
    locked.save(update_fields=update_fields)

    _notify_transition(locked, action, assignments)
    logger.info(
        "User %d moved production %d to %s", actor.pk, locked.pk, locked.status,
    )
    return locked


def _notify_transition(production: Production, action: str, assignments: list[Assignment]) -> None:
    when = f"{production.date:%A, %B %d, %Y}"
    producer = production.requested_by

    if action == CONFIRM:
        notify(
            producer, Notification.Type.CONFIRMATION,
            title="Production Confirmed",
            body=f"Your production request \"{production.name}\" has been confirmed.",
            production=production,
        )
        for assignment in assignments:
            notify(
                assignment.user, Notification.Type.CONFIRMATION,
                title="Production Confirmed",
                body=(
                    f"\"{production.name}\" on {when} is confirmed. "
                    f"You are booked as {role_label(assignment.role)}."
                ),
                production=production,
                data={"assignment_id": assignment.pk},
            )
    elif action == CANCEL:
        notify(
            producer, Notification.Type.CANCELLATION,
            title="Production Cancelled",
            body=f"Your production request \"{production.name}\" has been cancelled.",
            production=production,
        )
        for assignment in assignments:
            notify(
                assignment.user, Notification.Type.CANCELLATION,
                title="Production Cancelled",
                body=f"\"{production.name}\" on {when} has been cancelled.",
                production=production,
                data={"assignment_id": assignment.pk},
            )
    else:
        state = "started" if action == START else "been completed"
        notify(
            producer, Notification.Type.CHANGE,
            title="Production Update",
            body=f"Your production \"{production.name}\" has {state}.",
            production=production,
        )


def confirm(production, actor, notes=None):
    return apply_transition(production, CONFIRM, actor, notes=notes)


def start(production, actor):
    return apply_transition(production, START, actor)


def complete(production, actor):
    return apply_transition(production, COMPLETE, actor)


def cancel(production, actor):
    return apply_transition(production, CANCEL, actor)


# ---------------------------------------------------------------------------
# Assignment responses
# ---------------------------------------------------------------------------


@transaction.atomic
def respond_to_assignment(assignment: Assignment, actor, accept: bool) -> Assignment:
    """
    Accept or decline a pending assignment on behalf of its operator.

    Raises:
        WorkflowError: Not the operator's assignment, already answered, or the
            production was cancelled.
    """
    locked = Assignment.objects.select_for_update().select_related("production").get(pk=assignment.pk)
    if locked.user_id != actor.pk:
        raise WorkflowError("You can only respond to your own assignments.")
    if locked.status != Assignment.Status.PENDING:
        raise WorkflowError("This assignment has already been answered.")
    if locked.production.status == Production.Status.CANCELLED:
        raise WorkflowError("This production has been cancelled.")

    locked.status = Assignment.Status.ACCEPTED if accept else Assignment.Status.DECLINED
    locked.save(update_fields=["status", "updated_at"])

    if not accept and locked.assigned_by_id:
        notify(
            locked.assigned_by, Notification.Type.CHANGE,
            title="Assignment Declined",
            body=(
                f"{actor.get_full_name()} declined the {role_label(locked.role)} "
                f"assignment for \"{locked.production.name}\"."
            ),
            production=locked.production,
            data={"assignment_id": locked.pk},
        )

    logger.info("Operator %d %s assignment %d", actor.pk, locked.status, locked.pk)
    return locked


# ---------------------------------------------------------------------------
# Messages & overtime
# ---------------------------------------------------------------------------


def message_recipients(production: Production) -> list:
    """The confirming booking officer, or every booking officer while unconfirmed."""
    if production.confirmed_by_id:
        return [production.confirmed_by]
    return list(User.objects.booking_officers())


def preview(text: str, limit: Optional[int] = None) -> str:
    limit = limit or settings.CREWBOOK["MESSAGE_PREVIEW_CHARS"]
    return text[:limit] + ("..." if len(text) > limit else "")


@transaction.atomic
def send_message(production: Production, sender, text: str) -> Message:
    """Store a message about a production and notify the responsible booking officer(s)."""
    text = text.strip()
    if not text:
        raise WorkflowError("Please enter a message.")
    if not is_participant(production, sender):
        raise WorkflowError("You are not part of this production.")

    message = Message.objects.create(production=production, sender=sender, text=text)
    notify_many(
        message_recipients(production),
        Notification.Type.MESSAGE,
        title="New Message",
        body=f"{sender.get_full_name() or 'Someone'} sent a message about \"{production.name}\": {preview(text)}",
        production=production,
    )
    logger.info("User %d sent message %d on production %d", sender.pk, message.pk, production.pk)
    return message


@transaction.atomic
def report_overtime(production: Production, reporter, reason: str) -> Production:
    """Flag a production as running over and notify the responsible booking officer(s)."""
    reason = reason.strip()
    if not reason:
        raise WorkflowError("Please give a reason for the overtime.")
    if not is_participant(production, reporter):
        raise WorkflowError("You are not part of this production.")
    if production.status != Production.Status.IN_PROGRESS:
        raise WorkflowError("Overtime can only be reported while a production is in progress.")

    production.overtime = True
    production.overtime_reason = reason
    production.save(update_fields=["overtime", "overtime_reason", "updated_at"])
    notify_many(
        message_recipients(production),
        Notification.Type.OVERTIME,
        title="Production Overtime",
        body=f"{production.name} is going overtime. Reason: {reason}",
        production=production,
    )
    logger.info("User %d reported overtime on production %d", reporter.pk, production.pk)
    return production
