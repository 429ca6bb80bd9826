"""
Production views for CrewBook.

View inventory:
  DashboardView          → role-aware production list in today/upcoming/past buckets (GET)
  OperatorScheduleView   → operator's accepted assignments in date order (GET)
  CreateProductionView   → producer requests a production (GET, POST)
  ProductionDetailView   → production, requirements, crew, messages and actions (GET)
  TransitionView         → confirm / start / complete / cancel (POST)
  DeleteRequestView      → producer deletes own pending request (POST)
  SaveNotesView          → booking officer saves notes (POST)
  AssignCrewView         → crew screen: roster and conflicts (GET), reconcile (POST)
  RespondAssignmentView  → operator accepts or declines an assignment (POST)
  MessageView            → participant sends a message or overtime report (GET, POST)
  PrintScheduleView      → booking officer exports a printable schedule (GET)
"""

import logging

from django.contrib import messages as msg
from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views import View

from apps.productions import services
from apps.productions.conflicts import check_conflict_for
from apps.productions.display import role_label
from apps.productions.exports import build_schedule_html
from apps.productions.forms import (
    CrewSelectionForm,
    MessageForm,
    NotesForm,
    ProductionRequestForm,
    ScheduleRangeForm,
)
from apps.productions.matching import build_roster, remaining_capacity
from apps.productions.models import Assignment, Production
from apps.productions.reconciler import entries_from_assignments, save_assignments
from apps.productions.selectors import (
    group_by_date_bucket,
    operator_schedule,
    pending_assignments,
    productions_for_user,
)
from core.permissions import (
    BookingOfficerRequiredMixin,
    OperatorRequiredMixin,
    ParticipantRequiredMixin,
    ProducerRequiredMixin,
)

logger = logging.getLogger(__name__)


def _get_production(request: HttpRequest, pk: int):
    """Fetch a production or flash an error; callers redirect on None."""
    production = Production.objects.select_related("requested_by", "confirmed_by").filter(pk=pk).first()
    if production is None:
        msg.error(request, "Production not found.")
    return production


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------

class DashboardView(ParticipantRequiredMixin, View):
    """One dashboard for every role; the production list is scoped by role."""

    def get(self, request: HttpRequest) -> HttpResponse:
        user = request.user
        buckets = group_by_date_bucket(productions_for_user(user))
        context = {
            "buckets": buckets,
            "pending_assignments": pending_assignments(user) if user.is_operator else [],
        }
        return render(request, "productions/dashboard.html", context)


class OperatorScheduleView(OperatorRequiredMixin, View):
    def get(self, request: HttpRequest) -> HttpResponse:
        include_past = request.GET.get("past") == "1"
        return render(request, "productions/schedule.html", {
            "assignments": operator_schedule(request.user, include_past=include_past),
            "include_past": include_past,
        })


# ---------------------------------------------------------------------------
# Production requests
# ---------------------------------------------------------------------------

class CreateProductionView(ProducerRequiredMixin, View):
    def get(self, request: HttpRequest) -> HttpResponse:
        return render(request, "productions/create.html", {"form": ProductionRequestForm()})

    def post(self, request: HttpRequest) -> HttpResponse:
        form = ProductionRequestForm(request.POST)
        if not form.is_valid():
            return render(request, "productions/create.html", {"form": form}, status=400)

        try:
            production = services.create_production_request(
                request.user, form.production_data(), form.requirements(),
            )
        except services.WorkflowError as exc:
            msg.error(request, str(exc))
            return render(request, "productions/create.html", {"form": form}, status=400)
        except DatabaseError:
            logger.exception("Failed to create production request for user %d", request.user.pk)
            msg.error(request, "Failed to submit production request.")
            return render(request, "productions/create.html", {"form": form}, status=500)

        msg.success(request, "Production request submitted successfully.")
        return redirect("productions:detail", pk=production.pk)


class ProductionDetailView(ParticipantRequiredMixin, View):
    def get(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")
        if not services.is_participant(production, request.user):
            msg.error(request, "You are not part of this production.")
            return redirect("productions:dashboard")

        assignments = production.assignments.select_related("user").order_by("role", "pk")
        my_assignments = [a for a in assignments if a.user_id == request.user.pk]
        return render(request, "productions/detail.html", {
            "production": production,
            "requirements": production.requirement_map(),
            "assignments": assignments,
            "my_assignments": my_assignments,
            "actions": services.available_actions(production, request.user),
            "can_delete": (
                request.user.is_producer
                and production.requested_by_id == request.user.pk
                and production.status == Production.Status.REQUESTED
            ),
            "notes_form": NotesForm(initial={"notes": production.notes}),
            "messages_list": production.messages.select_related("sender")[:20],
        })


class TransitionView(ParticipantRequiredMixin, View):
    """POST action=confirm|start|complete|cancel."""

    SUCCESS = {
        services.CONFIRM: "Production confirmed.",
        services.START: "Production started.",
        services.COMPLETE: "Production completed.",
        services.CANCEL: "Production cancelled.",
    }

    def post(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")

        action = request.POST.get("action", "")
        notes = request.POST.get("notes") if action == services.CONFIRM else None
        try:
            services.apply_transition(production, action, request.user, notes=notes)
        except services.WorkflowError as exc:
            logger.warning("User %d: %s on production %d refused: %s", request.user.pk, action, pk, exc)
            msg.error(request, str(exc))
        except DatabaseError:
            logger.exception("Failed to %s production %d", action, pk)
            msg.error(request, f"Failed to {action} production.")
        else:
            msg.success(request, self.SUCCESS[action])
        return redirect("productions:detail", pk=pk)


class DeleteRequestView(ProducerRequiredMixin, View):
    def post(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")
        try:
            services.delete_request(production, request.user)
        except services.WorkflowError as exc:
            msg.error(request, str(exc))
            return redirect("productions:detail", pk=pk)
        except DatabaseError:
            logger.exception("Failed to delete production request %d", pk)
            msg.error(request, "Failed to delete production request.")
            return redirect("productions:detail", pk=pk)
        msg.success(request, "Production request deleted.")
        return redirect("productions:dashboard")


class SaveNotesView(BookingOfficerRequiredMixin, View):
    def post(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")
        form = NotesForm(request.POST)
        if form.is_valid():
            try:
                services.save_notes(production, request.user, form.cleaned_data["notes"])
            except DatabaseError:
                logger.exception("Failed to save notes on production %d", pk)
                msg.error(request, "Failed to save notes.")
            else:
                msg.success(request, "Notes saved.")
        return redirect("productions:detail", pk=pk)


# ---------------------------------------------------------------------------
# Crew
# ---------------------------------------------------------------------------

class AssignCrewView(BookingOfficerRequiredMixin, View):
    """
    Crew screen for one production.

    GET  → for each requirement, the operators already assigned and the ones
           available, with same-day conflict warnings.
    POST → reconcile the ticked crew against stored assignments. Conflicts
           never block the save; they are reported as warnings.
    """

    def _context(self, production, form=None) -> dict:
        roster = build_roster(production)
        stored = entries_from_assignments(
            Assignment.objects.filter(production=production).order_by("pk")
        )
        return {
            "production": production,
            "roster": roster,
            "stored": stored,
            "capacity": {
                role: remaining_capacity(stored, role, entry.required)
                for role, entry in roster.items()
            },
            "form": form,
        }

    def get(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")
        return render(request, "productions/assign_crew.html", self._context(production))

    def post(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")
        if production.is_terminal:
            msg.error(request, f"Cannot change the crew of a {production.get_status_display().lower()} production.")
            return redirect("productions:detail", pk=pk)

        form = CrewSelectionForm(request.POST, requirements=production.requirement_map())
        if not form.is_valid():
            for error in form.non_field_errors() + form.errors.get("existing", []) + form.errors.get("crew", []):
                msg.error(request, error)
            return render(request, "productions/assign_crew.html", self._context(production, form), status=400)

        try:
            result = save_assignments(production, form.cleaned_data["desired"], request.user)
        except DatabaseError:
            logger.exception("Failed to save crew for production %d", pk)
            msg.error(request, "Failed to save assignments.")
            return redirect("productions:assign_crew", pk=pk)

        for assignment in result.created:
            conflict = check_conflict_for(assignment.user, production)
            if conflict is not None:
                msg.warning(
                    request,
                    f"{assignment.user.get_full_name()} ({role_label(assignment.role)}): {conflict.reason}",
                )

        if result.plan.is_noop:
            msg.info(request, "No changes to the crew.")
        else:
            msg.success(
                request,
                f"Crew saved: {len(result.created)} added, {result.deleted_count} removed.",
            )
        return redirect("productions:detail", pk=pk)


class RespondAssignmentView(OperatorRequiredMixin, View):
    """POST response=accept|decline on the operator's own assignment."""

    def post(self, request: HttpRequest, pk: int) -> HttpResponse:
        assignment = Assignment.objects.filter(pk=pk).select_related("production").first()
        if assignment is None:
            msg.error(request, "Assignment not found.")
            return redirect("productions:dashboard")

        response = request.POST.get("response")
        if response not in ("accept", "decline"):
            msg.error(request, "Unknown response.")
            return redirect("productions:detail", pk=assignment.production_id)

        try:
            services.respond_to_assignment(assignment, request.user, accept=response == "accept")
        except services.WorkflowError as exc:
            msg.error(request, str(exc))
        except DatabaseError:
            logger.exception("Failed to %s assignment %d", response, pk)
            msg.error(request, f"Failed to {response} assignment.")
        else:
            if response == "accept":
                msg.success(request, "Assignment accepted.")
            else:
                msg.info(request, "Assignment declined. The booking officer will be notified.")
        return redirect("productions:detail", pk=assignment.production_id)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class MessageView(ParticipantRequiredMixin, View):
    def get(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")
        if not services.is_participant(production, request.user):
            msg.error(request, "You are not part of this production.")
            return redirect("productions:dashboard")
        initial = {"kind": request.GET.get("kind", MessageForm.Kind.MESSAGE)}
        return render(request, "productions/message.html", {
            "production": production,
            "form": MessageForm(initial=initial),
        })

    def post(self, request: HttpRequest, pk: int) -> HttpResponse:
        production = _get_production(request, pk)
        if production is None:
            return redirect("productions:dashboard")

        form = MessageForm(request.POST)
        if not form.is_valid():
            return render(request, "productions/message.html", {
                "production": production, "form": form,
            }, status=400)

        try:
            if form.cleaned_data["kind"] == MessageForm.Kind.OVERTIME:
                services.report_overtime(production, request.user, form.overtime_text())
                msg.success(request, "Overtime report sent successfully.")
            else:
                services.send_message(production, request.user, form.cleaned_data["text"])
                msg.success(request, "Message sent successfully.")
        except services.WorkflowError as exc:
            msg.error(request, str(exc))
            return render(request, "productions/message.html", {
                "production": production, "form": form,
            }, status=400)
        except DatabaseError:
            logger.exception("Failed to send message on production %d", pk)
            msg.error(request, "Failed to send message.")
        return redirect("productions:detail", pk=pk)


# ---------------------------------------------------------------------------
# Schedule export
# ---------------------------------------------------------------------------

class PrintScheduleView(BookingOfficerRequiredMixin, View):
    """
    GET without dates → range picker.
    GET with start_date/end_date → printable HTML document.
    """

    def get(self, request: HttpRequest) -> HttpResponse:
        if "start_date" not in request.GET:
            return render(request, "productions/print_form.html", {"form": ScheduleRangeForm()})

        form = ScheduleRangeForm(request.GET)
        if not form.is_valid():
            for error in form.non_field_errors():
                msg.error(request, error)
            return render(request, "productions/print_form.html", {"form": form}, status=400)

        start, end = form.cleaned_data["start_date"], form.cleaned_data["end_date"]
        try:
            html = build_schedule_html(start, end)
        except DatabaseError:
            logger.exception("Failed to export schedule %s..%s", start, end)
            msg.error(request, "Failed to fetch productions.")
            return redirect("productions:print_schedule")
        return HttpResponse(html)
