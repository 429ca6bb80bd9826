"""
Production models for CrewBook.

The core of the platform. Defines:
  - Production: a scheduled recording/broadcast event and its status
  - Requirement: how many crew of a given role a production needs
  - Assignment: links one operator to one role on one production
  - Message: free-text note from a participant about a production

All datetimes are stored timezone-aware (UTC). `date` is the production's
calendar day; call/start/end times fall on that day.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.accounts.models import Specialization


class ProductionQuerySet(models.QuerySet):
    """Accessor methods over the productions table."""

    def requested_by(self, user) -> "ProductionQuerySet":
        return self.filter(requested_by=user)

    def staffed_with(self, user) -> "ProductionQuerySet":
        """Productions on which the user holds any assignment."""
        return self.filter(assignments__user=user).distinct()

    def between(self, start_date, end_date) -> "ProductionQuerySet":
        """Productions whose date falls in [start_date, end_date], date then start time ascending."""
        return self.filter(date__gte=start_date, date__lte=end_date).order_by("date", "start_time")

    def active(self) -> "ProductionQuerySet":
        return self.exclude(status__in=Production.TERMINAL_STATUSES)


class Production(models.Model):
    """
    A single scheduled television production.

    Status machine (all transitions are manual booking-officer actions):
      REQUESTED → CONFIRMED → IN_PROGRESS → COMPLETED
      REQUESTED / CONFIRMED → CANCELLED

    COMPLETED and CANCELLED are terminal. Transition rules live in
    apps.productions.services; this model only stores the state and the
    actor/timestamp recorded by each transition.
    """

    class Status(models.TextChoices):
        REQUESTED = "requested", _("Requested")
        CONFIRMED = "confirmed", _("Confirmed")
        IN_PROGRESS = "in_progress", _("In Progress")
        COMPLETED = "completed", _("Completed")
        CANCELLED = "cancelled", _("Cancelled")

    TERMINAL_STATUSES = (Status.COMPLETED, Status.CANCELLED)

    name = models.CharField(max_length=200)
    date = models.DateField(help_text="Calendar day of the production.")
    call_time = models.DateTimeField(help_text="When the crew must be on site.")
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()

    venue = models.CharField(max_length=200)
    location_details = models.TextField(blank=True, help_text="Directions for off-site venues.")
    notes = models.TextField(blank=True)

    status = models.CharField(max_length=15, choices=Status.choices, default=Status.REQUESTED)

    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="requested_productions",
    )

    # Transition bookkeeping
    confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="confirmed_productions",
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    started_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cancelled_productions",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Overtime report from the floor
    overtime = models.BooleanField(default=False)
    overtime_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductionQuerySet.as_manager()

    class Meta:
        verbose_name = "Production"
        verbose_name_plural = "Productions"
        ordering = ["date", "start_time"]
        indexes = [
            models.Index(fields=["date", "start_time"], name="prod_date_start_idx"),
            models.Index(fields=["status"], name="prod_status_idx"),
            models.Index(fields=["requested_by", "date"], name="prod_requested_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} | {self.date.isoformat()} | {self.get_status_display()}"

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    @property
    def duration_hours(self) -> float:
        """Scheduled length from start to end in decimal hours."""
        return (self.end_time - self.start_time).total_seconds() / 3600

    def requirement_map(self) -> dict[str, int]:
        """
        Return the required headcount per crew role.

        Returns:
            Dict of role → count, in requirement creation order.
        """
        return {req.role: req.count for req in self.requirements.order_by("pk")}


class Requirement(models.Model):
    """How many crew of one role a production needs. Immutable after creation."""

    production = models.ForeignKey(Production, on_delete=models.CASCADE, related_name="requirements")
    role = models.CharField(max_length=20, choices=Specialization.choices)
    count = models.PositiveSmallIntegerField(default=1)

    class Meta:
        verbose_name = "Requirement"
        verbose_name_plural = "Requirements"
        ordering = ["production", "pk"]
        constraints = [
            models.UniqueConstraint(fields=["production", "role"], name="unique_requirement_role_per_production"),
        ]

    def __str__(self) -> str:
        return f"{self.production.name}: {self.count} × {self.get_role_display()}"


class Assignment(models.Model):
    """
    Binds one operator to one crew role on one production.

    Status machine (driven by the operator):
      PENDING → ACCEPTED
      PENDING → DECLINED

    There is no way back to PENDING. Production transitions never touch
    assignment status.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACCEPTED = "accepted", _("Accepted")
        DECLINED = "declined", _("Declined")

    production = models.ForeignKey(Production, on_delete=models.CASCADE, related_name="assignments")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="assignments",
    )
    role = models.CharField(max_length=20, choices=Specialization.choices)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assignments_made",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Assignment"
        verbose_name_plural = "Assignments"
        ordering = ["production", "pk"]
        constraints = [
            # One operator holds at most one assignment per (production, role)
            models.UniqueConstraint(
                fields=["production", "user", "role"],
                name="unique_assignment_per_production_role",
            )
        ]
        indexes = [
            models.Index(fields=["user", "status"], name="assign_user_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user.get_full_name()} → {self.production.name} as {self.get_role_display()} [{self.get_status_display()}]"

    @property
    def key(self) -> tuple[int, str]:
        """The (user_id, role) pair the reconciler diffs on."""
        return (self.user_id, self.role)


class Message(models.Model):
    """A message sent by a participant about a production."""

    production = models.ForeignKey(Production, on_delete=models.CASCADE, related_name="messages")
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="messages_sent",
    )
    text = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Message"
        verbose_name_plural = "Messages"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        sender = self.sender.get_short_name() if self.sender else "Unknown"
        return f"{sender} on {self.production.name}: {self.text[:30]}"
